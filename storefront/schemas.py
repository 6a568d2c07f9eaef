# storefront/schemas.py
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class Size(str, Enum):
    XS = "XS"
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"
    XXL = "XXL"


DEFAULT_SIZE = Size.M


# 🛍️ Товар
class Product(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    price: Decimal
    category: str
    image: str
    description: str


# 🛒 Позиция корзины
class CartLineItem(BaseModel):
    id: int
    size: Size
    name: str
    price: Decimal
    image: str
    description: str
    quantity: int = Field(default=1, ge=1)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class CartAddRequest(BaseModel):
    product_id: int
    size: Size = DEFAULT_SIZE


class CartQuantityUpdate(BaseModel):
    # negative values are rejected by the store, not here
    quantity: int


# 📊 Сводка корзины (единый формат ответа /api/cart)
class CartSummary(BaseModel):
    items: List[CartLineItem]
    count: int
    total: Decimal


# 📦 Оформление заказа
class ShippingInfo(BaseModel):
    email: EmailStr
    first_name: str
    last_name: str
    address: str
    city: str
    province: str
    postal_code: str
    phone: Optional[str] = None


class CheckoutRequest(BaseModel):
    shipping: ShippingInfo


class CheckoutResult(BaseModel):
    accepted: bool
    message: str
    total: Decimal
    items_count: int
    reference: Optional[str] = None


# 👤 Аккаунт
class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class AccountOut(BaseModel):
    logged_in: bool
    name: Optional[str] = None
    email: Optional[str] = None
