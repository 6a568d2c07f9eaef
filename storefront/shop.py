# storefront/shop.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from .catalog import Catalog, get_catalog
from .schemas import Product

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=List[Product])
async def list_products(
    category: Optional[str] = Query(default=None),
    q: str = Query(default=""),
    catalog: Catalog = Depends(get_catalog),
):
    return catalog.list_products(category=category, search=q)


@router.get("/categories", response_model=List[str])
async def list_categories(catalog: Catalog = Depends(get_catalog)):
    return catalog.categories()


@router.get("/{product_id}", response_model=Product)
async def get_product(product_id: int, catalog: Catalog = Depends(get_catalog)):
    product = catalog.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
