"""Cart aggregate: the shopper's selected variants and their bulk-priced total.

The cart lives on the shopper's side and is persisted as a single record (see
``shopping.cart.persistence``). Each row is one variant; variants of the same
product share that product's bulk pricing tiers, and their quantities are
combined when choosing a tier.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from shopping.cart import pricing
from shopping.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from shopping.domain import shopping


@shopping.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    image = String(max_length=500)
    size = String(max_length=50)
    color = String(max_length=50)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    bulk_pricing_tiers = Text()  # JSON array of {minQuantity, discountPercent}

    def tiers(self) -> tuple[pricing.BulkPricingTier, ...]:
        return pricing.parse_tiers(self.bulk_pricing_tiers)

    def line_item(self) -> pricing.LineItem:
        return pricing.LineItem(
            product_id=str(self.product_id),
            variant_id=str(self.variant_id),
            price=self.price,
            quantity=self.quantity,
            tiers=self.tiers(),
        )


@shopping.aggregate
class Cart:
    items = HasMany(CartItem)
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls):
        return cls(updated_at=datetime.now(UTC))

    @classmethod
    def restore(cls, items, cart_id=None, updated_at=None):
        """Rebuild a cart from persisted item dicts without raising events.

        Rows repeating a variant are merged into the first one, summing quantities.
        """
        kwargs = {"updated_at": updated_at}
        if cart_id:
            kwargs["id"] = cart_id
        cart = cls(**kwargs)
        for data in items:
            existing = cart.find_item(data["variant_id"])
            if existing:
                existing.quantity += data["quantity"]
                continue
            cart.add_items(CartItem(**data))
        return cart

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def find_item(self, variant_id):
        return next((i for i in self.items if str(i.variant_id) == str(variant_id)), None)

    def add_item(
        self,
        product_id,
        variant_id,
        name,
        price,
        quantity=1,
        image=None,
        size=None,
        color=None,
        bulk_pricing_tiers=None,
    ):
        """Add a variant to the cart, or top up its quantity if already present.

        Supplied tiers replace the stored ones on an existing row.
        """
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        tiers_json = None
        if bulk_pricing_tiers is not None:
            tiers_json = pricing.dump_tiers(pricing.parse_tiers(bulk_pricing_tiers))

        existing = self.find_item(variant_id)
        if existing:
            existing.quantity += quantity
            if tiers_json is not None:
                existing.bulk_pricing_tiers = tiers_json
            unit_price = existing.price
        else:
            self.add_items(
                CartItem(
                    product_id=product_id,
                    variant_id=variant_id,
                    name=name,
                    image=image,
                    size=size,
                    color=color,
                    price=price,
                    quantity=quantity,
                    bulk_pricing_tiers=tiers_json,
                )
            )
            unit_price = price

        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                product_id=str(product_id),
                variant_id=str(variant_id),
                quantity=quantity,
                unit_price=unit_price,
            )
        )

    def update_quantity(self, variant_id, quantity):
        """Set a row's quantity. Unknown variants are ignored."""
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        item = self.find_item(variant_id)
        if item is None:
            return

        previous_quantity = item.quantity
        item.quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                variant_id=str(variant_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def remove_item(self, variant_id):
        """Remove a row. Unknown variants are ignored."""
        item = self.find_item(variant_id)
        if item is None:
            return

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartItemRemoved(cart_id=str(self.id), variant_id=str(variant_id)))

    def clear(self):
        removed = list(self.items)
        for item in removed:
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartCleared(cart_id=str(self.id), items_removed_count=len(removed)))

    # -------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------
    def line_items(self) -> list[pricing.LineItem]:
        return [item.line_item() for item in self.items]

    def priced_lines(self) -> list[pricing.PricedLine]:
        return pricing.price_lines(self.line_items())

    def total(self) -> float:
        return pricing.calculate_total(self.line_items())

    def subtotal(self) -> float:
        return pricing.calculate_subtotal(self.line_items())

    def savings(self) -> float:
        return pricing.round_money(self.subtotal() - self.total())

    def item_count(self) -> int:
        return pricing.count_items(self.line_items())

    def is_empty(self) -> bool:
        return not self.items
