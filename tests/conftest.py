import pytest
from fastapi.testclient import TestClient

from storefront.auth import StubAuthProvider
from storefront.catalog import InMemoryCatalog
from storefront.main import create_app
from storefront.config import settings
from storefront.orders import StubPaymentProcessor
from storefront.sessions import decode_session_token


@pytest.fixture
def app():
    return create_app(
        catalog=InMemoryCatalog(),
        payment_processor=StubPaymentProcessor(),
        auth_provider=StubAuthProvider(),
    )


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def current_session(app, client):
    """Return a callable giving the StorefrontSession behind the client's cookie."""

    def _current():
        sid = decode_session_token(client.cookies.get(settings.session_cookie))
        return app.state.sessions.get(sid)

    return _current
