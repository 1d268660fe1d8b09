"""Cart session: the cart a caller works with, bound to where it is persisted.

A session reads the persisted record once when it opens and writes it back
after every successful mutation. Callers create one per shopper interaction
(an HTTP request, a test) and pass it to whatever needs the cart; there is no
process-wide cart.
"""

import structlog

from shopping.cart.cart import Cart
from shopping.cart.persistence import CartRepository, storage_key_for
from shopping.cart.storage.port import CartStorage

logger = structlog.get_logger(__name__)


class CartSession:
    def __init__(self, repository: CartRepository) -> None:
        self.repository = repository
        self.cart: Cart = repository.load()

    @classmethod
    def open(cls, storage: CartStorage, session_id: str | None = None) -> "CartSession":
        return cls(CartRepository(storage, key=storage_key_for(session_id)))

    def _save(self, action: str) -> None:
        self.repository.save(self.cart)
        logger.debug(
            "cart_saved",
            action=action,
            key=self.repository.key,
            item_count=self.cart.item_count(),
        )

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add_item(self, product_id, variant_id, name, price, quantity=1, **attributes) -> None:
        self.cart.add_item(product_id, variant_id, name, price, quantity=quantity, **attributes)
        self._save("add_item")

    def remove_item(self, variant_id) -> None:
        self.cart.remove_item(variant_id)
        self._save("remove_item")

    def update_quantity(self, variant_id, quantity) -> None:
        self.cart.update_quantity(variant_id, quantity)
        self._save("update_quantity")

    def clear(self) -> None:
        self.cart.clear()
        self._save("clear")

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def items(self):
        return list(self.cart.items)

    def total(self) -> float:
        return self.cart.total()

    def subtotal(self) -> float:
        return self.cart.subtotal()

    def savings(self) -> float:
        return self.cart.savings()

    def item_count(self) -> int:
        return self.cart.item_count()

    def priced_lines(self):
        return self.cart.priced_lines()
