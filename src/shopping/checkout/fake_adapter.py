"""Configurable fake storefront API for development and testing.

Simulates the shipping, promotion, order and payment endpoints without any
network calls. Behaviour can be configured at runtime to reject orders or
payment initialization, and every call is recorded in ``calls``.
"""

from dataclasses import dataclass
from uuid import uuid4

from shopping.checkout.port import (
    CommerceBackend,
    CommerceBackendError,
    OrderReceipt,
    OrderRequest,
    PaymentRequest,
    PaymentSession,
    PromotionResult,
    ShippingZone,
)

DEFAULT_ZONES = (
    ShippingZone(id="zone-lagos", name="Lagos", states=("Lagos",), fee=2500.0),
    ShippingZone(id="zone-southwest", name="South West", states=("Ogun", "Oyo", "Osun", "Ondo", "Ekiti"), fee=4000.0),
    ShippingZone(id="zone-north", name="North", states=("Abuja", "Kano", "Kaduna"), fee=6000.0),
)


@dataclass(frozen=True)
class FakePromotion:
    code: str
    name: str
    kind: str  # PERCENTAGE | FIXED
    value: float
    min_order_amount: float | None = None
    max_discount: float | None = None


class FakeCommerceBackend(CommerceBackend):
    """Configurable fake storefront API."""

    def __init__(self, zones=DEFAULT_ZONES) -> None:
        self.zones: list[ShippingZone] = list(zones)
        self.promotions: dict[str, FakePromotion] = {}
        self.order_should_succeed: bool = True
        self.payment_should_succeed: bool = True
        self.failure_reason: str = "Service unavailable"
        self.orders_created: int = 0
        self.calls: list[dict] = []

    def configure(
        self,
        order_should_succeed: bool = True,
        payment_should_succeed: bool = True,
        failure_reason: str = "Service unavailable",
    ) -> None:
        """Configure backend behaviour at runtime."""
        self.order_should_succeed = order_should_succeed
        self.payment_should_succeed = payment_should_succeed
        self.failure_reason = failure_reason

    def add_promotion(self, code, value, kind="PERCENTAGE", name=None, min_order_amount=None, max_discount=None):
        self.promotions[code] = FakePromotion(
            code=code,
            name=name or code,
            kind=kind,
            value=value,
            min_order_amount=min_order_amount,
            max_discount=max_discount,
        )

    def list_shipping_zones(self) -> list[ShippingZone]:
        self.calls.append({"method": "list_shipping_zones"})
        return list(self.zones)

    def validate_promotion(self, code: str, order_amount: float) -> PromotionResult:
        self.calls.append({"method": "validate_promotion", "code": code, "order_amount": order_amount})

        promo = self.promotions.get(code)
        if promo is None:
            raise CommerceBackendError("Promotion not found", status_code=404)

        if promo.min_order_amount and order_amount < promo.min_order_amount:
            raise CommerceBackendError(
                f"Minimum order amount of ₦{promo.min_order_amount:g} required for this promotion",
                status_code=400,
            )

        if promo.kind == "PERCENTAGE":
            discount = order_amount * promo.value / 100
            if promo.max_discount and discount > promo.max_discount:
                discount = promo.max_discount
        else:
            discount = promo.value

        return PromotionResult(
            discount=round(discount, 2),
            message=f'Promotion "{promo.name}" applied successfully',
        )

    def create_order(self, order: OrderRequest) -> OrderReceipt:
        self.calls.append({"method": "create_order", "payload": order.to_payload()})

        if not self.order_should_succeed:
            raise CommerceBackendError(self.failure_reason, status_code=400)

        self.orders_created += 1
        return OrderReceipt(
            id=uuid4().hex,
            order_number=f"JFS-{self.orders_created:06d}",
        )

    def initialize_payment(self, payment: PaymentRequest) -> PaymentSession:
        self.calls.append({"method": "initialize_payment", "payload": payment.to_payload()})

        if not self.payment_should_succeed:
            raise CommerceBackendError(self.failure_reason, status_code=502)

        reference = f"fake_ref_{uuid4().hex[:12]}"
        return PaymentSession(
            redirect_url=f"https://checkout.fake/{payment.provider.lower()}/{reference}",
            reference=reference,
        )
