#!/usr/bin/env python3
"""Простой e2e-скрипт: наполняет корзину в запущенной витрине, оформляет заказ и печатает ответ.

Usage:
    uvicorn storefront.main:app --port 8000
    python scripts/run_e2e_checkout.py [base_url]
"""
import sys

import httpx

BASE_URL = "http://localhost:8000"

SHIPPING = {
    "email": "demo+user@example.com",
    "first_name": "Demo",
    "last_name": "User",
    "address": "1 Main St",
    "city": "Winnipeg",
    "province": "MB",
    "postal_code": "R3C 0A1",
}


def main(base_url: str) -> int:
    # one client == one storefront session (cookie jar)
    with httpx.Client(base_url=base_url, timeout=15.0) as client:
        try:
            for product_id, size in [(1, "M"), (1, "M"), (1, "L")]:
                r = client.post("/api/cart/add", json={"product_id": product_id, "size": size})
                r.raise_for_status()
        except httpx.HTTPError as e:
            print(f"Storefront unavailable: {e}")
            return 1

        cart = client.get("/api/cart").json()
        print(f"Cart: count={cart['count']} total={cart['total']}")
        for item in cart["items"]:
            print(f"  {item['name']} ({item['size']}) x{item['quantity']}")

        r = client.post("/api/orders/checkout", json={"shipping": SHIPPING})
        print("Status:", r.status_code)
        print(r.text)
        return 0 if r.status_code == 200 else 1


if __name__ == "__main__":
    sys.exit(main(sys.argv[1] if len(sys.argv) > 1 else BASE_URL))
