"""Persisted cart record and the repository that reads and writes it.

The record is a JSON object stored under ``jfs-cart-storage``::

    {"cartId": "...", "items": [{"productId": ..., "variantId": ..., ...}], "version": 0}

A missing, empty or unreadable record loads as an empty cart.
"""

from datetime import datetime

import structlog
from protean.exceptions import ValidationError
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as RecordError
from pydantic.alias_generators import to_camel

from shopping.cart import pricing
from shopping.cart.cart import Cart
from shopping.cart.storage.port import CartStorage

logger = structlog.get_logger(__name__)

CART_STORAGE_KEY = "jfs-cart-storage"
RECORD_VERSION = 0


def storage_key_for(session_id: str | None = None) -> str:
    """Storage key for a shopper session; the bare key when there is none."""
    if not session_id:
        return CART_STORAGE_KEY
    return f"{CART_STORAGE_KEY}:{session_id}"


class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TierRecord(_Record):
    min_quantity: int
    discount_percent: float


class CartItemRecord(_Record):
    product_id: str
    variant_id: str
    name: str
    image: str | None = None
    size: str | None = None
    color: str | None = None
    price: float
    quantity: int
    bulk_pricing_tiers: list[TierRecord] | None = None


class CartRecord(_Record):
    cart_id: str | None = None
    items: list[CartItemRecord] = Field(default_factory=list)
    updated_at: datetime | None = None
    version: int = RECORD_VERSION


def to_record(cart: Cart) -> CartRecord:
    items = []
    for item in cart.items:
        tiers = None
        if item.bulk_pricing_tiers is not None:
            tiers = [
                TierRecord(min_quantity=t.min_quantity, discount_percent=t.discount_percent) for t in item.tiers()
            ]
        items.append(
            CartItemRecord(
                product_id=str(item.product_id),
                variant_id=str(item.variant_id),
                name=item.name,
                image=item.image,
                size=item.size,
                color=item.color,
                price=item.price,
                quantity=item.quantity,
                bulk_pricing_tiers=tiers,
            )
        )
    return CartRecord(cart_id=str(cart.id), items=items, updated_at=cart.updated_at)


def from_record(record: CartRecord) -> Cart:
    items = []
    for entry in record.items:
        data = entry.model_dump(exclude={"bulk_pricing_tiers"})
        data["bulk_pricing_tiers"] = None
        if entry.bulk_pricing_tiers is not None:
            data["bulk_pricing_tiers"] = pricing.dump_tiers(
                pricing.BulkPricingTier(t.min_quantity, t.discount_percent) for t in entry.bulk_pricing_tiers
            )
        items.append(data)
    return Cart.restore(items, cart_id=record.cart_id, updated_at=record.updated_at)


def serialize(cart: Cart) -> str:
    return to_record(cart).model_dump_json(by_alias=True, exclude_none=True)


def deserialize(raw: str | None) -> Cart:
    """Rebuild a cart from its stored JSON. Raises on unreadable input."""
    if not raw:
        return Cart.create()
    return from_record(CartRecord.model_validate_json(raw))


class CartRepository:
    """Loads and saves one cart record in a key/value storage."""

    def __init__(self, storage: CartStorage, key: str = CART_STORAGE_KEY) -> None:
        self.storage = storage
        self.key = key

    def load(self) -> Cart:
        try:
            return deserialize(self.storage.get_item(self.key))
        except (RecordError, ValidationError, UnicodeDecodeError) as exc:
            logger.warning("cart_record_unreadable", key=self.key, error=str(exc))
            return Cart.create()

    def save(self, cart: Cart) -> None:
        self.storage.set_item(self.key, serialize(cart))

    def discard(self) -> None:
        self.storage.remove_item(self.key)
