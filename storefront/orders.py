# storefront/orders.py
import asyncio
import logging
import uuid
from decimal import Decimal
from typing import Optional, Protocol, Sequence

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request, status

from .cart_store import CartStore
from .config import settings
from .schemas import CartLineItem, CheckoutRequest, CheckoutResult, ShippingInfo
from .sessions import get_cart_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["orders"])

STUB_MESSAGE = "Checkout functionality will be connected to payment processing"


class PaymentProcessorError(Exception):
    """The payment processor could not be reached or answered with an error."""


class EmptyCartError(Exception):
    pass


class PaymentProcessor(Protocol):
    async def submit(
        self, shipping: ShippingInfo, items: Sequence[CartLineItem], total: Decimal
    ) -> CheckoutResult: ...


class StubPaymentProcessor:
    """No network interaction; every order is reported as not yet processed."""

    async def submit(self, shipping, items, total):
        logger.info("checkout stub: %s items, total=%s, email=%s", len(items), total, shipping.email)
        return CheckoutResult(
            accepted=False,
            message=STUB_MESSAGE,
            total=total,
            items_count=sum(i.quantity for i in items),
        )


class HttpPaymentProcessor:
    """Hands the order to an external payments service over HTTP."""

    def __init__(
        self,
        base_url: str,
        currency: str = "CAD",
        timeout: float = 10.0,
        max_retries: int = 3,
        base_delay: float = 0.3,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.currency = currency
        self.timeout = timeout
        self.max_retries = max_retries
        self.base_delay = base_delay
        self._transport = transport

    def _payload(
        self, shipping: ShippingInfo, items: Sequence[CartLineItem], total: Decimal, idempotency_key: str
    ) -> dict:
        return {
            "idempotency_key": idempotency_key,
            "amount": str(total),
            "currency": self.currency,
            "payment_method": "card",
            "shipping": shipping.model_dump(),
            "items": [
                {
                    "product_id": i.id,
                    "size": i.size.value,
                    "quantity": i.quantity,
                    "price": str(i.price),
                }
                for i in items
            ],
        }

    async def submit(self, shipping, items, total):
        url = f"{self.base_url}/api/payments/charge"
        # same key on every retry so a charge that went through is not repeated
        payload = self._payload(shipping, items, total, uuid.uuid4().hex)
        last_error: Optional[Exception] = None
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            for attempt in range(1, self.max_retries + 1):
                try:
                    resp = await client.post(url, json=payload)
                except httpx.HTTPError as e:
                    last_error = e
                    logger.warning("payments request failed (attempt %s): %s", attempt, e)
                else:
                    if resp.status_code < 500:
                        return self._result(resp, total, items)
                    last_error = PaymentProcessorError(f"payments service returned {resp.status_code}")
                    logger.warning("payments service returned %s (attempt %s)", resp.status_code, attempt)
                if attempt < self.max_retries:
                    await asyncio.sleep(self.base_delay * (2 ** attempt))
        raise PaymentProcessorError(str(last_error))

    @staticmethod
    def _result(resp: httpx.Response, total: Decimal, items: Sequence[CartLineItem]) -> CheckoutResult:
        count = sum(i.quantity for i in items)
        if resp.status_code >= 400:
            try:
                detail = resp.json().get("detail", resp.text)
            except ValueError:
                detail = resp.text
            return CheckoutResult(accepted=False, message=str(detail), total=total, items_count=count)
        data = resp.json()
        accepted = data.get("status") == "succeeded"
        return CheckoutResult(
            accepted=accepted,
            message="Order placed" if accepted else f"Payment {data.get('status', 'failed')}",
            total=total,
            items_count=count,
            reference=data.get("payment_id"),
        )


def build_payment_processor() -> PaymentProcessor:
    if settings.payments_url:
        return HttpPaymentProcessor(settings.payments_url, currency=settings.currency, timeout=settings.payments_timeout)
    return StubPaymentProcessor()


def get_payment_processor(request: Request) -> PaymentProcessor:
    return request.app.state.payment_processor


async def place_order(cart: CartStore, shipping: ShippingInfo, processor: PaymentProcessor) -> CheckoutResult:
    """Hand the cart to the payment processor.

    On acceptance only the submitted quantities leave the cart; anything added
    while the processor was working stays.
    """
    if cart.is_empty:
        raise EmptyCartError("cart is empty")
    submitted = [item.model_copy() for item in cart.items]
    total = sum((i.line_total for i in submitted), Decimal("0"))
    result = await processor.submit(shipping, submitted, total)
    if result.accepted:
        cart.settle(submitted)
    logger.info("checkout finished: accepted=%s total=%s", result.accepted, result.total)
    return result


# ✅ Оформление заказа
@router.post("/checkout", response_model=CheckoutResult)
async def checkout(
    payload: CheckoutRequest,
    cart: CartStore = Depends(get_cart_store),
    processor: PaymentProcessor = Depends(get_payment_processor),
):
    try:
        return await place_order(cart, payload.shipping, processor)
    except EmptyCartError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cart is empty")
    except PaymentProcessorError:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Payment service unavailable, try again later")
