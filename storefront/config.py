# storefront/config.py
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

ROOT_DIR = Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=ROOT_DIR / ".env")


class Settings(BaseModel):
    title: str = os.getenv("STOREFRONT_TITLE", "Canadian Heated")
    currency: str = os.getenv("CURRENCY", "CAD")
    # ⚠️ override SESSION_SECRET outside of local development
    session_secret: str = os.getenv("SESSION_SECRET", "storefront-dev-secret")
    session_algorithm: str = os.getenv("SESSION_ALGORITHM", "HS256")
    session_cookie: str = os.getenv("SESSION_COOKIE", "sf_session")
    # idle sessions are dropped after session_ttl seconds; at most session_max are kept
    session_ttl: float = float(os.getenv("SESSION_TTL", "86400"))
    session_max: int = int(os.getenv("SESSION_MAX", "10000"))
    # empty -> checkout stays on the stub processor
    payments_url: Optional[str] = os.getenv("PAYMENTS_URL") or None
    payments_timeout: float = float(os.getenv("PAYMENTS_TIMEOUT", "10.0"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
