"""Checkout: turns the shopper's cart into a placed order.

Flow:
    1. Load shipping zones and pick the one covering the shopper's state
    2. Optionally validate a promo code against the cart total
    3. Submit the order (items, zone, address, customer, promo, payment method)
    4. Card payments: request a payment page and redirect the shopper to it
    5. Otherwise (transfer, cash on delivery): redirect to the order-success page

Steps run one after another; a failure before the order is created aborts the
rest and leaves the cart untouched. Once the order exists it counts as placed,
so a failed payment initialization falls back to the order-success redirect.
The cart is cleared only after an order has been placed.
"""

import os
from dataclasses import dataclass

import structlog

from shopping.cart.pricing import round_money
from shopping.cart.session import CartSession
from shopping.checkout.details import CheckoutDetails
from shopping.checkout.port import (
    CommerceBackend,
    CommerceBackendError,
    CustomerInfo,
    OrderLine,
    OrderReceipt,
    OrderRequest,
    PaymentMethod,
    PaymentProvider,
    PaymentRequest,
    PaymentSession,
    PromotionResult,
    ShippingZone,
)

logger = structlog.get_logger(__name__)


class CheckoutError(Exception):
    """A checkout step failed; ``message`` is safe to show the shopper."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class CheckoutSummary:
    subtotal: float
    discount: float
    shipping: float
    total: float


@dataclass(frozen=True)
class CheckoutOutcome:
    order_id: str
    order_number: str | None
    redirect_url: str
    message: str
    payment_reference: str | None = None


class Checkout:
    def __init__(self, session: CartSession, backend: CommerceBackend, payment_provider: str | None = None) -> None:
        self.session = session
        self.backend = backend
        self.payment_provider = payment_provider or os.environ.get(
            "PAYMENT_PROVIDER", PaymentProvider.PAYSTACK.value
        )
        self.shipping_zones: list[ShippingZone] = []
        self.selected_zone: ShippingZone | None = None
        self.promo_code: str | None = None
        self.discount: float = 0.0

    # -------------------------------------------------------------------
    # Shipping
    # -------------------------------------------------------------------
    def load_shipping_zones(self) -> list[ShippingZone]:
        """Fetch zones. An unavailable service leaves the list empty."""
        try:
            self.shipping_zones = self.backend.list_shipping_zones()
        except CommerceBackendError as exc:
            logger.warning("shipping_zones_unavailable", error=exc.message)
            self.shipping_zones = []
        return self.shipping_zones

    def select_state(self, state: str) -> ShippingZone | None:
        if not self.shipping_zones:
            self.load_shipping_zones()
        self.selected_zone = next((z for z in self.shipping_zones if z.covers(state)), None)
        return self.selected_zone

    # -------------------------------------------------------------------
    # Promotions
    # -------------------------------------------------------------------
    def apply_promo_code(self, code: str) -> PromotionResult | None:
        """Validate ``code`` against the cart total. Blank codes are ignored.

        A rejected code resets the discount to zero.
        """
        if not code or not code.strip():
            return None

        try:
            result = self.backend.validate_promotion(code, self.session.total())
        except CommerceBackendError as exc:
            self.discount = 0.0
            self.promo_code = None
            logger.info("promo_code_rejected", code=code, reason=exc.message)
            raise CheckoutError(exc.message or "Failed to apply promo code") from exc

        self.discount = result.discount
        self.promo_code = code
        logger.info("promo_code_applied", code=code, discount=result.discount)
        return result

    # -------------------------------------------------------------------
    # Totals
    # -------------------------------------------------------------------
    def summary(self) -> CheckoutSummary:
        subtotal = self.session.total()
        shipping = self.selected_zone.fee if self.selected_zone else 0.0
        return CheckoutSummary(
            subtotal=subtotal,
            discount=self.discount,
            shipping=shipping,
            total=round_money(max(0.0, subtotal - self.discount + shipping)),
        )

    # -------------------------------------------------------------------
    # Order placement
    # -------------------------------------------------------------------
    def build_order(self, details: CheckoutDetails) -> OrderRequest:
        return OrderRequest(
            items=tuple(OrderLine(variant_id=str(i.variant_id), quantity=i.quantity) for i in self.session.items),
            shipping_zone_id=self.selected_zone.id,
            shipping_address=details.shipping_address,
            customer_info=CustomerInfo(
                first_name=details.first_name,
                last_name=details.last_name,
                email=details.email,
                phone=details.phone,
            ),
            payment_method=details.payment_method.value,
            promo_code=self.promo_code,
        )

    def place_order(self, details: CheckoutDetails) -> CheckoutOutcome:
        if self.selected_zone is None:
            raise CheckoutError("Please select a valid state for shipping")
        if self.session.cart.is_empty():
            raise CheckoutError("Your cart is empty")

        summary = self.summary()
        order = self.build_order(details)

        try:
            receipt = self.backend.create_order(order)
        except CommerceBackendError as exc:
            logger.warning("order_creation_failed", error=exc.message, status_code=exc.status_code)
            raise CheckoutError(exc.message or "Failed to create order") from exc

        logger.info(
            "order_placed",
            order_id=receipt.id,
            order_number=receipt.order_number,
            total=summary.total,
            order_total=receipt.total,
            payment_method=details.payment_method.value,
        )

        if details.payment_method == PaymentMethod.CARD:
            payment = self._initialize_payment(receipt, summary.total, details.email)
            if payment is not None and payment.redirect_url:
                self.session.clear()
                return CheckoutOutcome(
                    order_id=receipt.id,
                    order_number=receipt.order_number,
                    redirect_url=payment.redirect_url,
                    message="Redirecting to payment",
                    payment_reference=payment.reference,
                )

        self.session.clear()
        return CheckoutOutcome(
            order_id=receipt.id,
            order_number=receipt.order_number,
            redirect_url=f"/order-success?id={receipt.id}",
            message=f"Order #{receipt.order_number or receipt.id[:8]} placed successfully!",
        )

    def _initialize_payment(self, receipt: OrderReceipt, amount: float, email: str) -> PaymentSession | None:
        request = PaymentRequest(order_id=receipt.id, amount=amount, email=email, provider=self.payment_provider)
        try:
            return self.backend.initialize_payment(request)
        except CommerceBackendError as exc:
            logger.warning(
                "payment_initialization_failed",
                order_id=receipt.id,
                provider=self.payment_provider,
                error=exc.message,
            )
            return None
