from decimal import Decimal

import pytest

from storefront.cart_store import CartStore, InvalidQuantityError
from storefront.catalog import MOCK_PRODUCTS
from storefront.schemas import Size

JACKET = MOCK_PRODUCTS[0]   # 299.99
GLOVES = MOCK_PRODUCTS[1]   # 79.99
VEST = MOCK_PRODUCTS[2]     # 189.99


def snapshot(cart: CartStore):
    return [(i.id, i.size, i.quantity) for i in cart.items]


def test_new_cart_is_empty():
    cart = CartStore()
    assert cart.items == ()
    assert cart.is_empty
    assert cart.cart_total == Decimal("0")
    assert cart.cart_count == 0


def test_repeated_add_merges_into_one_line():
    cart = CartStore()
    for _ in range(4):
        cart.add_to_cart(GLOVES, Size.S)
    assert snapshot(cart) == [(GLOVES.id, Size.S, 4)]


def test_add_copies_product_fields():
    cart = CartStore()
    item = cart.add_to_cart(VEST, Size.XL)
    assert item.name == VEST.name
    assert item.price == VEST.price
    assert item.image == VEST.image
    assert item.description == VEST.description
    assert item.quantity == 1


def test_same_product_different_sizes_are_separate_lines():
    cart = CartStore()
    cart.add_to_cart(JACKET, Size.M)
    cart.add_to_cart(JACKET, Size.M)
    cart.add_to_cart(JACKET, Size.L)

    assert snapshot(cart) == [(1, Size.M, 2), (1, Size.L, 1)]
    assert cart.cart_count == 3
    assert cart.cart_total == JACKET.price * 3


def test_size_accepts_plain_strings():
    cart = CartStore()
    cart.add_to_cart(JACKET, "M")
    cart.add_to_cart(JACKET, Size.M)
    assert snapshot(cart) == [(1, Size.M, 2)]


def test_totals_follow_every_mutation():
    cart = CartStore()
    cart.add_to_cart(JACKET, Size.M)
    cart.add_to_cart(GLOVES, Size.S)
    cart.add_to_cart(GLOVES, Size.S)
    assert cart.cart_total == Decimal("299.99") + Decimal("79.99") * 2
    assert cart.cart_count == 3

    cart.update_quantity(JACKET.id, Size.M, 3)
    assert cart.cart_total == Decimal("299.99") * 3 + Decimal("79.99") * 2
    assert cart.cart_count == 5

    cart.remove_from_cart(GLOVES.id, Size.S)
    assert cart.cart_total == Decimal("899.97")
    assert cart.cart_count == 3


def test_update_to_zero_is_remove():
    a, b = CartStore(), CartStore()
    for cart in (a, b):
        cart.add_to_cart(JACKET, Size.M)
        cart.add_to_cart(GLOVES, Size.L)

    a.update_quantity(JACKET.id, Size.M, 0)
    b.remove_from_cart(JACKET.id, Size.M)
    assert snapshot(a) == snapshot(b) == [(GLOVES.id, Size.L, 1)]


def test_set_quantity_then_zero_removes_line():
    cart = CartStore()
    cart.add_to_cart(JACKET, Size.M)
    cart.add_to_cart(VEST, Size.S)

    cart.update_quantity(JACKET.id, Size.M, 5)
    assert cart.find(JACKET.id, Size.M).quantity == 5
    assert cart.cart_count == 6

    cart.update_quantity(JACKET.id, Size.M, 0)
    assert cart.find(JACKET.id, Size.M) is None
    assert cart.cart_count == 1


def test_absent_line_is_a_noop():
    cart = CartStore()
    cart.add_to_cart(JACKET, Size.M)
    before = snapshot(cart)

    cart.remove_from_cart(JACKET.id, Size.XS)
    cart.remove_from_cart(999, Size.M)
    cart.update_quantity(JACKET.id, Size.XXL, 7)
    cart.update_quantity(999, Size.M, 0)

    assert snapshot(cart) == before


def test_negative_quantity_is_rejected_without_change():
    cart = CartStore()
    cart.add_to_cart(JACKET, Size.M)
    with pytest.raises(InvalidQuantityError):
        cart.update_quantity(JACKET.id, Size.M, -1)
    assert snapshot(cart) == [(1, Size.M, 1)]
    # also a ValueError for callers that don't know the store
    with pytest.raises(ValueError):
        cart.update_quantity(999, Size.M, -3)


def test_clear_cart():
    cart = CartStore()
    cart.add_to_cart(JACKET, Size.M)
    cart.add_to_cart(GLOVES, Size.L)
    cart.clear_cart()
    assert cart.items == ()
    assert cart.cart_total == Decimal("0")
    assert cart.cart_count == 0
    cart.clear_cart()
    assert len(cart) == 0


def test_insertion_order_and_readd_goes_last():
    cart = CartStore()
    cart.add_to_cart(JACKET, Size.M)
    cart.add_to_cart(GLOVES, Size.M)
    cart.add_to_cart(VEST, Size.M)
    cart.update_quantity(JACKET.id, Size.M, 4)
    assert [i.id for i in cart.items] == [1, 2, 3]

    cart.remove_from_cart(JACKET.id, Size.M)
    cart.add_to_cart(JACKET, Size.M)
    assert snapshot(cart) == [(2, Size.M, 1), (3, Size.M, 1), (1, Size.M, 1)]


def test_listeners_fire_on_effective_changes_only():
    cart = CartStore()
    calls = []
    unsubscribe = cart.subscribe(lambda c: calls.append(c.cart_count))

    cart.add_to_cart(JACKET, Size.M)
    cart.add_to_cart(JACKET, Size.M)
    cart.remove_from_cart(999, Size.M)
    cart.update_quantity(JACKET.id, Size.M, 5)
    assert calls == [1, 2, 5]

    unsubscribe()
    cart.clear_cart()
    assert calls == [1, 2, 5]


def test_unknown_size_rejected_on_add_ignored_elsewhere():
    cart = CartStore()
    cart.add_to_cart(JACKET, Size.M)
    before = snapshot(cart)

    with pytest.raises(ValueError):
        cart.add_to_cart(JACKET, "XXXL")
    cart.remove_from_cart(JACKET.id, "XXXL")
    cart.update_quantity(JACKET.id, "XXXL", 2)

    assert snapshot(cart) == before


def test_settle_takes_out_purchased_quantities():
    cart = CartStore()
    for _ in range(3):
        cart.add_to_cart(JACKET, Size.M)
    cart.add_to_cart(GLOVES, Size.S)
    purchased = [i.model_copy() for i in cart.items]
    cart.add_to_cart(JACKET, Size.M)
    cart.add_to_cart(VEST, Size.L)
    cart.remove_from_cart(GLOVES.id, Size.S)
    calls = []
    cart.subscribe(calls.append)

    cart.settle(purchased)

    assert snapshot(cart) == [(1, Size.M, 1), (3, Size.L, 1)]
    assert len(calls) == 1
    cart.settle([])
    assert len(calls) == 1
