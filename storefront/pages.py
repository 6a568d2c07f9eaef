# storefront/pages.py
import logging
from pathlib import Path

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError

from .auth import AUTH_NOTE, AuthProvider, get_auth_provider, sign_in, sign_out
from .cart_store import InvalidQuantityError
from .catalog import Catalog, get_catalog
from .config import settings
from .orders import EmptyCartError, PaymentProcessor, PaymentProcessorError, get_payment_processor, place_order
from .schemas import DEFAULT_SIZE, ShippingInfo, Size
from .sessions import StorefrontSession, get_storefront_session
from .views import CHECKOUT_FIELDS, ViewContext, not_found_view, route_table

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
router = APIRouter()


def _to_fragment(path: str) -> RedirectResponse:
    return RedirectResponse(url=f"/#{path}", status_code=303)


@router.get("/", response_class=HTMLResponse)
async def shell_page(request: Request):
    return templates.TemplateResponse(request, "shell.html", {"title": settings.title})


# 📍 Отрисовка вида по фрагменту URL
@router.get("/view", response_class=HTMLResponse)
async def render_view(
    request: Request,
    path: str = Query(default="/"),
    session: StorefrontSession = Depends(get_storefront_session),
    catalog: Catalog = Depends(get_catalog),
):
    match = session.navigator.navigate(path)
    ctx = ViewContext(session=session, catalog=catalog, query=request.query_params)
    if match:
        result = match.view(ctx, **match.params)
    else:
        logger.info("no route for %s", match.path)
        result = not_found_view(ctx)

    context = {
        "title": settings.title,
        "currency": settings.currency,
        "cart": session.cart,
        "current_path": session.navigator.current_path,
        "auth_note": AUTH_NOTE,
    }
    context.update(result.context)
    return templates.TemplateResponse(request, result.template, context, status_code=result.status_code)


# 🛒 Действия с корзиной (HTML-формы)
@router.post("/actions/cart/add")
async def add_to_cart_action(
    product_id: int = Form(...),
    size: Size = Form(DEFAULT_SIZE),
    session: StorefrontSession = Depends(get_storefront_session),
    catalog: Catalog = Depends(get_catalog),
):
    product = catalog.get_product(product_id)
    if product is not None:
        session.cart.add_to_cart(product, size)
        session.flash["added"] = (product.id, size)
    return _to_fragment(f"/product/{product_id}")


@router.post("/actions/cart/update")
async def update_quantity_action(
    product_id: int = Form(...),
    size: Size = Form(...),
    quantity: int = Form(...),
    session: StorefrontSession = Depends(get_storefront_session),
):
    try:
        session.cart.update_quantity(product_id, size, quantity)
    except InvalidQuantityError:
        logger.warning("ignored negative quantity %s for product=%s size=%s", quantity, product_id, size.value)
    return _to_fragment("/cart")


@router.post("/actions/cart/remove")
async def remove_from_cart_action(
    product_id: int = Form(...),
    size: Size = Form(...),
    session: StorefrontSession = Depends(get_storefront_session),
):
    session.cart.remove_from_cart(product_id, size)
    return _to_fragment("/cart")


# 📦 Оформление заказа
@router.post("/actions/checkout")
async def checkout_action(
    request: Request,
    session: StorefrontSession = Depends(get_storefront_session),
    processor: PaymentProcessor = Depends(get_payment_processor),
):
    form = await request.form()
    session.checkout_form = {name: str(form.get(name, "")).strip() for name, _, _ in CHECKOUT_FIELDS}
    try:
        shipping = ShippingInfo(**{k: v for k, v in session.checkout_form.items() if v})
    except ValidationError:
        session.flash["checkout"] = {"ok": False, "text": "Please complete the shipping information"}
        return _to_fragment("/checkout")

    try:
        result = await place_order(session.cart, shipping, processor)
    except EmptyCartError:
        return _to_fragment("/cart")
    except PaymentProcessorError:
        logger.exception("payment hand-off failed")
        session.flash["checkout"] = {"ok": False, "text": "Payment service unavailable, try again later"}
        return _to_fragment("/checkout")

    if result.accepted:
        session.checkout_form = {}
    session.flash["checkout"] = {"ok": result.accepted, "text": result.message}
    return _to_fragment("/checkout")


# 👤 Аккаунт
@router.post("/actions/account/login")
async def login_action(
    email: str = Form(""),
    password: str = Form(""),
    session: StorefrontSession = Depends(get_storefront_session),
    provider: AuthProvider = Depends(get_auth_provider),
):
    await sign_in(session.account, provider, email.strip(), password)
    return _to_fragment("/account")


@router.post("/actions/account/logout")
async def logout_action(
    session: StorefrontSession = Depends(get_storefront_session),
    provider: AuthProvider = Depends(get_auth_provider),
):
    await sign_out(session.account, provider)
    return _to_fragment("/account")


@router.get("/__routes")
async def _list_routes(request: Request):
    # debug endpoint: server endpoints plus the fragment routes the shell understands
    return {
        "routes": [{"path": getattr(r, "path", str(r)), "name": getattr(r, "name", None)} for r in request.app.routes],
        "fragments": [r.pattern for r in route_table.routes],
    }
