# storefront/catalog.py
from decimal import Decimal
from typing import Iterable, List, Optional, Protocol

from fastapi import Request

from .schemas import Product

ALL_CATEGORIES = "all"
CATEGORIES = [ALL_CATEGORIES, "jackets", "vests", "gloves", "socks", "hoodies", "accessories"]

# Mock products until the catalog moves to a real data store
MOCK_PRODUCTS = [
    Product(id=1, name="Heated Jacket Pro", price=Decimal("299.99"), category="jackets", image="🧥",
            description="Premium heated jacket with 3 heat settings"),
    Product(id=2, name="Thermal Gloves", price=Decimal("79.99"), category="gloves", image="🧤",
            description="Battery-powered heated gloves"),
    Product(id=3, name="Heated Vest", price=Decimal("189.99"), category="vests", image="🦺",
            description="Lightweight heated vest for layering"),
    Product(id=4, name="Warm Socks", price=Decimal("49.99"), category="socks", image="🧦",
            description="Heated socks with wireless control"),
    Product(id=5, name="Heated Hoodie", price=Decimal("249.99"), category="hoodies", image="👔",
            description="Casual heated hoodie for everyday wear"),
    Product(id=6, name="Winter Beanie", price=Decimal("59.99"), category="accessories", image="🎩",
            description="Heated beanie with rechargeable battery"),
]


class Catalog(Protocol):
    def list_products(self, category: Optional[str] = None, search: str = "") -> List[Product]: ...

    def get_product(self, product_id: int) -> Optional[Product]: ...

    def featured(self, limit: int = 3) -> List[Product]: ...

    def categories(self) -> List[str]: ...


class InMemoryCatalog:
    def __init__(self, products: Optional[Iterable[Product]] = None) -> None:
        self._products = list(MOCK_PRODUCTS if products is None else products)

    def list_products(self, category: Optional[str] = None, search: str = "") -> List[Product]:
        needle = (search or "").strip().lower()
        out = []
        for p in self._products:
            if category and category != ALL_CATEGORIES and p.category != category:
                continue
            if needle and needle not in p.name.lower():
                continue
            out.append(p)
        return out

    def get_product(self, product_id: int) -> Optional[Product]:
        for p in self._products:
            if p.id == product_id:
                return p
        return None

    def featured(self, limit: int = 3) -> List[Product]:
        return self._products[:limit]

    def categories(self) -> List[str]:
        return list(CATEGORIES)


def get_catalog(request: Request) -> Catalog:
    return request.app.state.catalog
