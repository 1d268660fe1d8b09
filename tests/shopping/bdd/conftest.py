"""Shared BDD fixtures and step definitions for the Shopping domain."""

from collections import defaultdict

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when
from shopping.cart.session import CartSession

SESSION_ID = "sess-bdd"


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def tiers():
    """Bulk pricing tiers offered per product, in camelCase record form."""
    return defaultdict(list)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an empty cart", target_fixture="cart")
def _(storage):
    return CartSession.open(storage, SESSION_ID)


@given(parsers.cfparse('product "{product_id}" offers {percent:g} percent off from {min_qty:d} units'))
def _(tiers, product_id, percent, min_qty):
    tiers[product_id].append({"minQuantity": min_qty, "discountPercent": percent})


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('{qty:d} of variant "{variant_id}" of product "{product_id}" are added at {price:g}'))
def _(cart, tiers, error, qty, variant_id, product_id, price):
    try:
        cart.add_item(
            product_id=product_id,
            variant_id=variant_id,
            name=f"{product_id} {variant_id}",
            price=price,
            quantity=qty,
            bulk_pricing_tiers=tiers.get(product_id),
        )
    except ValidationError as exc:
        error["exc"] = exc


@when(parsers.cfparse('the quantity of variant "{variant_id}" is set to {qty:d}'))
def _(cart, error, variant_id, qty):
    try:
        cart.update_quantity(variant_id, qty)
    except ValidationError as exc:
        error["exc"] = exc


@when(parsers.cfparse('variant "{variant_id}" is removed'))
def _(cart, variant_id):
    cart.remove_item(variant_id)


@when("the cart is cleared")
def _(cart):
    cart.clear()


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart total is {total:g}"))
def _(cart, total):
    assert cart.total() == total


@then(parsers.cfparse("the cart holds {count:d} items"))
def _(cart, count):
    assert cart.item_count() == count
