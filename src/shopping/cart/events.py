"""Domain events for the Cart aggregate."""

from protean.fields import Float, Identifier, Integer

from shopping.domain import shopping


@shopping.event(part_of="Cart")
class CartItemAdded:
    """A variant was added to the cart, or its quantity topped up."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    quantity = Integer(required=True)
    unit_price = Float(required=True)


@shopping.event(part_of="Cart")
class CartQuantityUpdated:
    """The quantity of a cart item was changed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@shopping.event(part_of="Cart")
class CartItemRemoved:
    """An item was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    variant_id = Identifier(required=True)


@shopping.event(part_of="Cart")
class CartCleared:
    """Every item was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    items_removed_count = Integer(required=True)
