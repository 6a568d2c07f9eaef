# storefront/auth.py
import logging
from typing import Optional, Protocol

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from .schemas import AccountOut, LoginRequest
from .sessions import AccountState, StorefrontSession, get_storefront_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

AUTH_NOTE = "Authentication is not connected yet"


class AuthResult(BaseModel):
    email: str
    name: Optional[str] = None
    token: Optional[str] = None


class AuthProvider(Protocol):
    async def sign_in(self, email: str, password: str) -> AuthResult: ...

    async def sign_out(self, token: Optional[str]) -> None: ...


class StubAuthProvider:
    """Accepts any credentials. No token is issued until a real auth service is wired in."""

    async def sign_in(self, email: str, password: str) -> AuthResult:
        logger.info("auth stub: sign in for %s", email or "<blank>")
        return AuthResult(email=email)

    async def sign_out(self, token: Optional[str]) -> None:
        logger.info("auth stub: sign out")


def get_auth_provider(request: Request) -> AuthProvider:
    return request.app.state.auth_provider


def account_out(account: AccountState) -> AccountOut:
    if not account.logged_in:
        return AccountOut(logged_in=False)
    return AccountOut(logged_in=True, name=account.display_name, email=account.display_email)


async def sign_in(account: AccountState, provider: AuthProvider, email: str, password: str) -> None:
    result = await provider.sign_in(email, password)
    account.sign_in(result.email, name=result.name, token=result.token)


async def sign_out(account: AccountState, provider: AuthProvider) -> None:
    await provider.sign_out(account.token)
    account.sign_out()


# ✅ Логин (через JSON)
@router.post("/login", response_model=AccountOut)
async def login_user(
    payload: LoginRequest,
    session: StorefrontSession = Depends(get_storefront_session),
    provider: AuthProvider = Depends(get_auth_provider),
):
    await sign_in(session.account, provider, payload.email, payload.password)
    return account_out(session.account)


@router.post("/logout", response_model=AccountOut)
async def logout_user(
    session: StorefrontSession = Depends(get_storefront_session),
    provider: AuthProvider = Depends(get_auth_provider),
):
    await sign_out(session.account, provider)
    return account_out(session.account)


@router.get("/me", response_model=AccountOut)
async def get_me(session: StorefrontSession = Depends(get_storefront_session)):
    return account_out(session.account)
