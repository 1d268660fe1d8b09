"""FastAPI routes for the Shopping domain: carts and checkout."""

import json

from fastapi import APIRouter, HTTPException
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from shopping.api.schemas import (
    AddToCartRequest,
    CartLineResponse,
    CartResponse,
    CheckoutRequest,
    CheckoutResponse,
    CheckoutSummaryRequest,
    CheckoutSummaryResponse,
    ShippingZoneResponse,
    StatusResponse,
    UpdateCartQuantityRequest,
)
from shopping.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity
from shopping.cart.session import CartSession
from shopping.cart.storage import get_storage
from shopping.checkout import get_backend
from shopping.checkout.checkout import Checkout, CheckoutError
from shopping.checkout.details import CheckoutDetails
from shopping.checkout.port import CommerceBackendError
from shopping.utils.format import format_currency


def _cart_response(session_id: str) -> CartResponse:
    session = CartSession.open(get_storage(), session_id)
    items_by_variant = {str(item.variant_id): item for item in session.items}

    lines = []
    for priced in session.priced_lines():
        item = items_by_variant[priced.variant_id]
        lines.append(
            CartLineResponse(
                product_id=priced.product_id,
                variant_id=priced.variant_id,
                name=item.name,
                image=item.image,
                size=item.size,
                color=item.color,
                quantity=priced.quantity,
                unit_price=priced.unit_price,
                effective_unit_price=priced.effective_unit_price,
                line_total=priced.line_total,
                discount_percent=priced.applied_tier.discount_percent if priced.applied_tier else None,
            )
        )

    total = session.total()
    return CartResponse(
        session_id=session_id,
        items=lines,
        item_count=session.item_count(),
        subtotal=session.subtotal(),
        savings=session.savings(),
        total=total,
        display_total=format_currency(total, abbreviated=False),
    )


def _process(command) -> None:
    try:
        current_domain.process(command, asynchronous=False)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.messages) from exc


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
# Storage and storefront API calls block, so handlers are plain ``def`` and
# run in the threadpool.
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.get("/{session_id}", response_model=CartResponse)
def get_cart(session_id: str) -> CartResponse:
    return _cart_response(session_id)


@cart_router.post("/{session_id}/items", response_model=CartResponse)
def add_cart_item(session_id: str, body: AddToCartRequest) -> CartResponse:
    tiers = None
    if body.bulk_pricing_tiers is not None:
        tiers = json.dumps(
            [
                {"minQuantity": tier.min_quantity, "discountPercent": tier.discount_percent}
                for tier in body.bulk_pricing_tiers
            ]
        )

    _process(
        AddToCart(
            session_id=session_id,
            product_id=body.product_id,
            variant_id=body.variant_id,
            name=body.name,
            price=body.price,
            quantity=body.quantity,
            image=body.image,
            size=body.size,
            color=body.color,
            bulk_pricing_tiers=tiers,
        )
    )
    return _cart_response(session_id)


@cart_router.put("/{session_id}/items/{variant_id}", response_model=CartResponse)
def update_cart_item_quantity(session_id: str, variant_id: str, body: UpdateCartQuantityRequest) -> CartResponse:
    _process(UpdateCartQuantity(session_id=session_id, variant_id=variant_id, quantity=body.quantity))
    return _cart_response(session_id)


@cart_router.delete("/{session_id}/items/{variant_id}", response_model=CartResponse)
def remove_cart_item(session_id: str, variant_id: str) -> CartResponse:
    _process(RemoveFromCart(session_id=session_id, variant_id=variant_id))
    return _cart_response(session_id)


@cart_router.delete("/{session_id}", response_model=StatusResponse)
def clear_cart(session_id: str) -> StatusResponse:
    _process(ClearCart(session_id=session_id))
    return StatusResponse(status="cleared")


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.get("/shipping-zones", response_model=list[ShippingZoneResponse])
def list_shipping_zones() -> list[ShippingZoneResponse]:
    try:
        zones = get_backend().list_shipping_zones()
    except CommerceBackendError as exc:
        raise HTTPException(status_code=502, detail=exc.message) from exc
    return [ShippingZoneResponse(id=zone.id, name=zone.name, states=list(zone.states), fee=zone.fee) for zone in zones]


@checkout_router.post("/{session_id}/summary", response_model=CheckoutSummaryResponse)
def checkout_summary(session_id: str, body: CheckoutSummaryRequest) -> CheckoutSummaryResponse:
    """Price the cart with shipping for ``state`` and an optional promo code."""
    checkout = Checkout(CartSession.open(get_storage(), session_id), get_backend())

    if body.state:
        checkout.select_state(body.state)

    promo_message = None
    if body.promo_code:
        try:
            result = checkout.apply_promo_code(body.promo_code)
        except CheckoutError as exc:
            raise HTTPException(status_code=400, detail=exc.message) from exc
        promo_message = result.message if result else None

    summary = checkout.summary()
    return CheckoutSummaryResponse(
        subtotal=summary.subtotal,
        discount=summary.discount,
        shipping=summary.shipping,
        total=summary.total,
        shipping_zone_id=checkout.selected_zone.id if checkout.selected_zone else None,
        promo_message=promo_message,
    )


@checkout_router.post("/{session_id}", status_code=201, response_model=CheckoutResponse)
def place_order(session_id: str, body: CheckoutRequest) -> CheckoutResponse:
    """Place an order for the session's cart.

    1. Resolve the shipping zone for the shopper's state
    2. Apply the promo code, if any
    3. Submit the order and, for card payments, initialize payment
    """
    checkout = Checkout(CartSession.open(get_storage(), session_id), get_backend())
    details = CheckoutDetails(**body.model_dump(exclude={"promo_code"}))

    try:
        checkout.select_state(details.state)
        if body.promo_code:
            checkout.apply_promo_code(body.promo_code)
        outcome = checkout.place_order(details)
    except CheckoutError as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc

    return CheckoutResponse(
        order_id=outcome.order_id,
        order_number=outcome.order_number,
        redirect_url=outcome.redirect_url,
        message=outcome.message,
        payment_reference=outcome.payment_reference,
    )
