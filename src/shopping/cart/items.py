"""Cart item management: commands and handler.

Each command names the shopper session whose cart it changes. The handler
opens that session against the configured storage, applies the change and
lets the session persist the record.
"""

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text

from shopping.cart.cart import Cart
from shopping.cart.session import CartSession
from shopping.cart.storage import get_storage
from shopping.domain import shopping


@shopping.command(part_of="Cart")
class AddToCart:
    session_id = String(required=True, max_length=255)
    product_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    image = String(max_length=500)
    size = String(max_length=50)
    color = String(max_length=50)
    bulk_pricing_tiers = Text()  # JSON array of {minQuantity, discountPercent}


@shopping.command(part_of="Cart")
class UpdateCartQuantity:
    session_id = String(required=True, max_length=255)
    variant_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@shopping.command(part_of="Cart")
class RemoveFromCart:
    session_id = String(required=True, max_length=255)
    variant_id = Identifier(required=True)


@shopping.command(part_of="Cart")
class ClearCart:
    session_id = String(required=True, max_length=255)


@shopping.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        session = CartSession.open(get_storage(), command.session_id)
        session.add_item(
            product_id=command.product_id,
            variant_id=command.variant_id,
            name=command.name,
            price=command.price,
            quantity=command.quantity,
            image=command.image,
            size=command.size,
            color=command.color,
            bulk_pricing_tiers=command.bulk_pricing_tiers,
        )
        return session.item_count()

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        session = CartSession.open(get_storage(), command.session_id)
        session.update_quantity(command.variant_id, command.quantity)
        return session.item_count()

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        session = CartSession.open(get_storage(), command.session_id)
        session.remove_item(command.variant_id)
        return session.item_count()

    @handle(ClearCart)
    def clear_cart(self, command):
        session = CartSession.open(get_storage(), command.session_id)
        session.clear()
        return session.item_count()
