# storefront/sessions.py
import logging
import time
import uuid
from collections import OrderedDict
from typing import Callable, Dict, Optional

from fastapi import Depends, Request
from jose import JWTError, jwt

from .cart_store import CartStore
from .config import settings
from .routing import Navigator, RouteTable

logger = logging.getLogger(__name__)


class AccountState:
    """Local sign-in toggle. Nothing here is verified against a real backend."""

    DEFAULT_NAME = "John Doe"
    DEFAULT_EMAIL = "john@example.com"

    def __init__(self) -> None:
        self.logged_in = False
        self.email = ""
        self.name: Optional[str] = None
        self.token: Optional[str] = None

    @property
    def display_email(self) -> str:
        return self.email or self.DEFAULT_EMAIL

    @property
    def display_name(self) -> str:
        return self.name or self.DEFAULT_NAME

    def sign_in(self, email: str, name: Optional[str] = None, token: Optional[str] = None) -> None:
        self.logged_in = True
        self.email = email
        self.name = name
        self.token = token

    def sign_out(self) -> None:
        self.logged_in = False
        self.token = None


class StorefrontSession:
    """Everything one browser session owns: cart, RouteState, account stub."""

    def __init__(self, session_id: str, table: RouteTable) -> None:
        self.id = session_id
        self.cart = CartStore()
        self.navigator = Navigator(table)
        self.account = AccountState()
        # one-shot UI state consumed by the next render
        self.flash: Dict[str, object] = {}
        self.checkout_form: Dict[str, str] = {}

    def pop_flash(self, key: str, default=None):
        return self.flash.pop(key, default)


class SessionRegistry:
    """In-memory sessions, dropped after ``ttl`` idle seconds or when more than
    ``max_sessions`` exist (least recently seen first)."""

    def __init__(
        self,
        table: RouteTable,
        max_sessions: int = 10000,
        ttl: float = 86400.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.table = table
        self.max_sessions = max_sessions
        self.ttl = ttl
        self._clock = clock
        self._sessions: "OrderedDict[str, StorefrontSession]" = OrderedDict()
        self._last_seen: Dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, session_id: Optional[str]) -> Optional[StorefrontSession]:
        if not session_id or session_id not in self._sessions:
            return None
        now = self._clock()
        if now - self._last_seen[session_id] > self.ttl:
            self._drop(session_id)
            logger.info("storefront session %s expired", session_id[:8])
            return None
        self._last_seen[session_id] = now
        self._sessions.move_to_end(session_id)
        return self._sessions[session_id]

    def create(self) -> StorefrontSession:
        self._sweep()
        session = StorefrontSession(uuid.uuid4().hex, self.table)
        self._sessions[session.id] = session
        self._last_seen[session.id] = self._clock()
        while len(self._sessions) > self.max_sessions:
            oldest = next(iter(self._sessions))
            self._drop(oldest)
            logger.info("storefront session %s evicted", oldest[:8])
        logger.info("new storefront session %s", session.id[:8])
        return session

    def _sweep(self) -> None:
        # entries are ordered by last access, so expired ones sit at the front
        now = self._clock()
        while self._sessions:
            oldest = next(iter(self._sessions))
            if now - self._last_seen[oldest] <= self.ttl:
                break
            self._drop(oldest)

    def _drop(self, session_id: str) -> None:
        del self._sessions[session_id]
        del self._last_seen[session_id]


# 🔐 Подписанная cookie сессии
def create_session_token(session_id: str) -> str:
    return jwt.encode({"sid": session_id}, settings.session_secret, algorithm=settings.session_algorithm)


def decode_session_token(token: Optional[str]) -> Optional[str]:
    if not token:
        return None
    try:
        payload = jwt.decode(token, settings.session_secret, algorithms=[settings.session_algorithm])
    except JWTError:
        logger.debug("rejected session cookie")
        return None
    return payload.get("sid")


async def session_middleware(request: Request, call_next):
    """Attach the StorefrontSession named by the cookie, if there is one.

    Requests without a session get one only when an endpoint asks for it
    through ``get_storefront_session``; the cookie is set on the way out.
    """
    registry: SessionRegistry = request.app.state.sessions
    request.state.storefront_session = registry.get(
        decode_session_token(request.cookies.get(settings.session_cookie))
    )
    request.state.new_storefront_session = False

    response = await call_next(request)
    if request.state.new_storefront_session:
        response.set_cookie(
            settings.session_cookie,
            create_session_token(request.state.storefront_session.id),
            path="/",
            httponly=True,
            samesite="lax",
        )
    return response


def get_storefront_session(request: Request) -> StorefrontSession:
    session = request.state.storefront_session
    if session is None:
        session = request.app.state.sessions.create()
        request.state.storefront_session = session
        request.state.new_storefront_session = True
    return session


def get_cart_store(session: StorefrontSession = Depends(get_storefront_session)) -> CartStore:
    return session.cart
