# storefront/main.py
from typing import Optional

import uvicorn
from fastapi import FastAPI

from . import auth, cart, orders, pages, shop
from .auth import AuthProvider, StubAuthProvider
from .catalog import Catalog, InMemoryCatalog
from .config import configure_logging, settings
from .orders import PaymentProcessor, build_payment_processor
from .sessions import SessionRegistry, session_middleware
from .views import route_table


def create_app(
    catalog: Optional[Catalog] = None,
    payment_processor: Optional[PaymentProcessor] = None,
    auth_provider: Optional[AuthProvider] = None,
) -> FastAPI:
    app = FastAPI(
        title=settings.title,
        description="🔥 Heated clothing storefront: catalog, cart and checkout",
        version="1.0.0",
    )

    # ✅ Внешние зависимости (каталог, платежи, авторизация)
    app.state.catalog = catalog if catalog is not None else InMemoryCatalog()
    app.state.payment_processor = payment_processor if payment_processor is not None else build_payment_processor()
    app.state.auth_provider = auth_provider if auth_provider is not None else StubAuthProvider()
    app.state.sessions = SessionRegistry(route_table, max_sessions=settings.session_max, ttl=settings.session_ttl)

    app.middleware("http")(session_middleware)

    # ✅ Роутеры
    app.include_router(pages.router)
    app.include_router(shop.router)
    app.include_router(cart.router)
    app.include_router(orders.router)
    app.include_router(auth.router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


configure_logging()
app = create_app()

if __name__ == "__main__":
    uvicorn.run("storefront.main:app", host="0.0.0.0", port=8000, reload=True)
