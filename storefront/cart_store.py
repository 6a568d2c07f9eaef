# storefront/cart_store.py
import logging
from decimal import Decimal
from typing import Callable, Iterable, List, Optional, Tuple

from .schemas import CartLineItem, Product, Size

logger = logging.getLogger(__name__)

CartListener = Callable[["CartStore"], None]


class InvalidQuantityError(ValueError):
    """Raised when a line item quantity below zero is requested."""


class CartStore:
    """In-memory cart for a single storefront session.

    Line items are keyed by ``(product id, size)`` and kept in insertion order.
    Totals are never stored: ``cart_total`` and ``cart_count`` are recomputed
    from the items on every read.
    """

    def __init__(self) -> None:
        self._items: List[CartLineItem] = []
        self._listeners: List[CartListener] = []

    # 🔎 Чтение
    @property
    def items(self) -> Tuple[CartLineItem, ...]:
        return tuple(self._items)

    @property
    def cart_total(self) -> Decimal:
        return sum((item.price * item.quantity for item in self._items), Decimal("0"))

    @property
    def cart_count(self) -> int:
        return sum(item.quantity for item in self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def find(self, product_id: int, size: Size) -> Optional[CartLineItem]:
        index = self._index_of(product_id, size)
        return None if index is None else self._items[index]

    # ✏️ Изменение
    def add_to_cart(self, product: Product, size: Size) -> CartLineItem:
        """Add one unit of ``product`` in ``size``.

        An unknown size string raises ``ValueError`` here, while
        ``remove_from_cart`` and ``update_quantity`` treat it as an absent line.
        """
        size = Size(size)
        index = self._index_of(product.id, size)
        if index is not None:
            item = self._items[index]
            item.quantity += 1
        else:
            item = CartLineItem(
                id=product.id,
                size=size,
                name=product.name,
                price=product.price,
                image=product.image,
                description=product.description,
                quantity=1,
            )
            self._items.append(item)
        logger.info("cart add: product=%s size=%s qty=%s", product.id, size.value, item.quantity)
        self._notify()
        return item

    def remove_from_cart(self, product_id: int, size: Size) -> None:
        index = self._index_of(product_id, size)
        if index is None:
            logger.debug("cart remove: no line for product=%s size=%s", product_id, size)
            return
        del self._items[index]
        logger.info("cart remove: product=%s size=%s", product_id, Size(size).value)
        self._notify()

    def update_quantity(self, product_id: int, size: Size, quantity: int) -> None:
        if quantity < 0:
            raise InvalidQuantityError(f"quantity must be >= 0, got {quantity}")
        if quantity == 0:
            self.remove_from_cart(product_id, size)
            return
        index = self._index_of(product_id, size)
        if index is None:
            logger.debug("cart update: no line for product=%s size=%s", product_id, size)
            return
        self._items[index].quantity = quantity
        logger.info("cart update: product=%s size=%s qty=%s", product_id, Size(size).value, quantity)
        self._notify()

    def settle(self, purchased: Iterable[CartLineItem]) -> None:
        """Take the purchased quantities out of the cart.

        Lines added or raised after the order was submitted keep the difference.
        """
        changed = False
        for bought in purchased:
            index = self._index_of(bought.id, bought.size)
            if index is None:
                continue
            item = self._items[index]
            if item.quantity > bought.quantity:
                item.quantity -= bought.quantity
            else:
                del self._items[index]
            changed = True
        if changed:
            logger.info("cart settled: %s lines left", len(self._items))
            self._notify()

    def clear_cart(self) -> None:
        self._items.clear()
        logger.info("cart cleared")
        self._notify()

    # 🔔 Подписки
    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _index_of(self, product_id: int, size: Size) -> Optional[int]:
        try:
            size = Size(size)
        except ValueError:
            return None
        for i, item in enumerate(self._items):
            if item.id == product_id and item.size == size:
                return i
        return None
