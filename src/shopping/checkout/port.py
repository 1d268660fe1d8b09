"""Commerce backend port (abstract interface).

The storefront API that owns shipping zones, promotions, orders and payment
initialization. Checkout programs against this port; adapters are swapped
between FakeCommerceBackend (dev/test) and HttpCommerceBackend (production)
without changing the orchestration.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class PaymentMethod(Enum):
    CARD = "card"
    TRANSFER = "transfer"
    COD = "cod"


class PaymentProvider(Enum):
    OPAY = "OPAY"
    MONNIFY = "MONNIFY"
    PAYSTACK = "PAYSTACK"


class CommerceBackendError(Exception):
    """A collaborator call failed or was rejected."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass(frozen=True)
class ShippingZone:
    """A named group of states sharing a flat shipping fee."""

    id: str
    name: str
    states: tuple[str, ...]
    fee: float

    def covers(self, state: str) -> bool:
        return state in self.states


@dataclass(frozen=True)
class PromotionResult:
    discount: float
    message: str


@dataclass(frozen=True)
class OrderLine:
    variant_id: str
    quantity: int


@dataclass(frozen=True)
class CustomerInfo:
    first_name: str
    last_name: str
    email: str
    phone: str


@dataclass(frozen=True)
class OrderRequest:
    items: tuple[OrderLine, ...]
    shipping_zone_id: str
    shipping_address: str
    customer_info: CustomerInfo
    payment_method: str
    promo_code: str | None = None

    def to_payload(self) -> dict:
        payload = {
            "items": [{"variantId": line.variant_id, "quantity": line.quantity} for line in self.items],
            "shippingZoneId": self.shipping_zone_id,
            "shippingAddress": self.shipping_address,
            "customerInfo": {
                "firstName": self.customer_info.first_name,
                "lastName": self.customer_info.last_name,
                "email": self.customer_info.email,
                "phone": self.customer_info.phone,
            },
            "paymentMethod": self.payment_method,
        }
        if self.promo_code:
            payload["promoCode"] = self.promo_code
        return payload


@dataclass(frozen=True)
class OrderReceipt:
    id: str
    order_number: str | None = None
    total: float | None = None


@dataclass(frozen=True)
class PaymentRequest:
    order_id: str
    amount: float
    email: str
    provider: str = PaymentProvider.PAYSTACK.value

    def to_payload(self) -> dict:
        return {
            "orderId": self.order_id,
            "amount": self.amount,
            "email": self.email,
            "provider": self.provider,
        }


@dataclass(frozen=True)
class PaymentSession:
    """Where to send the shopper to complete an electronic payment."""

    redirect_url: str | None = None
    reference: str | None = None


class CommerceBackend(ABC):
    """Abstract storefront API interface."""

    @abstractmethod
    def list_shipping_zones(self) -> list[ShippingZone]:
        """Return every active shipping zone."""
        ...

    @abstractmethod
    def validate_promotion(self, code: str, order_amount: float) -> PromotionResult:
        """Validate a promo code against an order amount.

        Raises CommerceBackendError when the code is rejected.
        """
        ...

    @abstractmethod
    def create_order(self, order: OrderRequest) -> OrderReceipt:
        """Submit an order. Raises CommerceBackendError on failure."""
        ...

    @abstractmethod
    def initialize_payment(self, payment: PaymentRequest) -> PaymentSession:
        """Request a payment page for an order. Raises CommerceBackendError on failure."""
        ...

    def close(self) -> None:
        """Release any connections held by the adapter."""
