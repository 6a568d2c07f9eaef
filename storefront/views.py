# storefront/views.py
"""Views selected by the fragment router.

Each view takes a :class:`ViewContext` plus the parameters extracted from the
path and returns the template to render with its context.
"""
from typing import Any, Dict, Mapping, NamedTuple

from .catalog import ALL_CATEGORIES, Catalog
from .routing import RouteTable
from .schemas import DEFAULT_SIZE, Size
from .sessions import StorefrontSession

FEATURES = [
    ("🔥", "Advanced Heating", "3 heat settings for customized warmth"),
    ("🔋", "Long Battery Life", "Up to 10 hours of continuous heat"),
    ("🇨🇦", "Canadian Made", "Designed for our harsh winters"),
]

PRODUCT_HIGHLIGHTS = [
    "3 adjustable heat settings",
    "Rechargeable battery included",
    "Machine washable (remove battery)",
    "1-year warranty",
]

CHECKOUT_FIELDS = [
    ("email", "Email", "email"),
    ("first_name", "First Name", "text"),
    ("last_name", "Last Name", "text"),
    ("address", "Address", "text"),
    ("city", "City", "text"),
    ("province", "Province", "text"),
    ("postal_code", "Postal Code", "text"),
    ("phone", "Phone Number", "tel"),
]


class ViewContext(NamedTuple):
    session: StorefrontSession
    catalog: Catalog
    query: Mapping[str, str]


class ViewResult(NamedTuple):
    template: str
    context: Dict[str, Any]
    status_code: int = 200


def home_view(ctx: ViewContext) -> ViewResult:
    return ViewResult("home.html", {"features": FEATURES, "products": ctx.catalog.featured(3)})


def shop_view(ctx: ViewContext) -> ViewResult:
    search = ctx.query.get("q", "")
    category = ctx.query.get("category") or ALL_CATEGORIES
    return ViewResult("shop.html", {
        "products": ctx.catalog.list_products(category=category, search=search),
        "categories": ctx.catalog.categories(),
        "selected_category": category,
        "search": search,
    })


def product_view(ctx: ViewContext, id: int) -> ViewResult:
    product = ctx.catalog.get_product(id)
    if product is None:
        return ViewResult("product_not_found.html", {}, 404)
    # (product id, size) of the last add; shown once as a confirmation
    added = ctx.session.pop_flash("added")
    added = added if added and added[0] == product.id else None
    return ViewResult("product.html", {
        "product": product,
        "sizes": list(Size),
        "selected_size": added[1] if added else DEFAULT_SIZE,
        "added": added is not None,
        "highlights": PRODUCT_HIGHLIGHTS,
    })


def cart_view(ctx: ViewContext) -> ViewResult:
    return ViewResult("cart.html", {})


def checkout_view(ctx: ViewContext) -> ViewResult:
    return ViewResult("checkout.html", {
        "fields": CHECKOUT_FIELDS,
        "form": ctx.session.checkout_form,
        "message": ctx.session.pop_flash("checkout"),
    })


def account_view(ctx: ViewContext) -> ViewResult:
    return ViewResult("account.html", {"account": ctx.session.account})


def not_found_view(ctx: ViewContext) -> ViewResult:
    return ViewResult("not_found.html", {"path": ctx.session.navigator.current_path}, 404)


route_table = RouteTable([
    ("/", home_view),
    ("/shop", shop_view),
    ("/product/:id<int>", product_view),
    ("/cart", cart_view),
    ("/checkout", checkout_view),
    ("/account", account_view),
])
