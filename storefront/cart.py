# storefront/cart.py
from fastapi import APIRouter, Depends, HTTPException, status

from .cart_store import CartStore, InvalidQuantityError
from .catalog import Catalog, get_catalog
from .schemas import CartAddRequest, CartLineItem, CartQuantityUpdate, CartSummary, Size
from .sessions import get_cart_store

router = APIRouter(prefix="/api/cart", tags=["cart"])


def cart_summary(cart: CartStore) -> CartSummary:
    return CartSummary(items=list(cart.items), count=cart.cart_count, total=cart.cart_total)


@router.get("", response_model=CartSummary)
async def get_cart(cart: CartStore = Depends(get_cart_store)):
    return cart_summary(cart)


@router.get("/count")
async def get_cart_count(cart: CartStore = Depends(get_cart_store)):
    return {"count": cart.cart_count}


@router.post("/add", response_model=CartLineItem, status_code=status.HTTP_201_CREATED)
async def add_to_cart(
    payload: CartAddRequest,
    cart: CartStore = Depends(get_cart_store),
    catalog: Catalog = Depends(get_catalog),
):
    product = catalog.get_product(payload.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return cart.add_to_cart(product, payload.size)


@router.put("/{product_id}/{size}", response_model=CartSummary)
async def update_cart_item(
    product_id: int,
    size: Size,
    payload: CartQuantityUpdate,
    cart: CartStore = Depends(get_cart_store),
):
    try:
        cart.update_quantity(product_id, size, payload.quantity)
    except InvalidQuantityError:
        raise HTTPException(status_code=400, detail="Quantity must not be negative")
    return cart_summary(cart)


@router.delete("/{product_id}/{size}", status_code=204)
async def remove_cart_item(
    product_id: int,
    size: Size,
    cart: CartStore = Depends(get_cart_store),
):
    cart.remove_from_cart(product_id, size)
    return


@router.delete("", status_code=204)
async def clear_cart(cart: CartStore = Depends(get_cart_store)):
    cart.clear_cart()
    return
