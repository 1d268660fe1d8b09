"""HTTP adapter for the storefront API.

Talks JSON to the order/payment service. Non-2xx responses become
CommerceBackendError carrying the service's ``message`` when it sends one.
"""

import httpx
import structlog

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

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 10.0


class HttpCommerceBackend(CommerceBackend):
    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT, transport: httpx.BaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    def close(self) -> None:
        self.client.close()

    def _request(self, method: str, path: str, fallback_message: str, json: dict | None = None):
        try:
            response = self.client.request(method, path, json=json)
        except httpx.HTTPError as exc:
            logger.warning("storefront_api_unreachable", method=method, path=path, error=str(exc))
            raise CommerceBackendError(fallback_message) from exc

        if response.is_error:
            raise CommerceBackendError(_error_message(response, fallback_message), status_code=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise CommerceBackendError(fallback_message, status_code=response.status_code) from exc

    def list_shipping_zones(self) -> list[ShippingZone]:
        data = self._request("GET", "/shipping/zones", "Failed to fetch shipping zones")
        return [
            ShippingZone(
                id=str(zone["id"]),
                name=zone.get("name", ""),
                states=tuple(zone.get("states") or ()),
                fee=float(zone.get("fee") or 0),
            )
            for zone in data
        ]

    def validate_promotion(self, code: str, order_amount: float) -> PromotionResult:
        data = self._request(
            "POST",
            "/promotions/validate",
            "Invalid promo code",
            json={"code": code, "orderAmount": order_amount},
        )
        return PromotionResult(discount=float(data.get("discount") or 0), message=data.get("message", ""))

    def create_order(self, order: OrderRequest) -> OrderReceipt:
        data = self._request("POST", "/orders", "Failed to create order", json=order.to_payload())
        total = data.get("total", data.get("totalAmount"))
        return OrderReceipt(
            id=str(data["id"]),
            order_number=data.get("orderNumber"),
            total=float(total) if total is not None else None,
        )

    def initialize_payment(self, payment: PaymentRequest) -> PaymentSession:
        data = self._request("POST", "/payments/initialize", "Failed to initialize payment", json=payment.to_payload())
        return PaymentSession(
            redirect_url=data.get("authorizationUrl") or data.get("paymentUrl"),
            reference=data.get("reference"),
        )


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return fallback
    message = body.get("message") if isinstance(body, dict) else None
    if isinstance(message, list):
        message = "; ".join(str(m) for m in message)
    return message or fallback
