"""Pydantic request/response schemas for the Shopping API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands and the persisted cart record.
"""

from pydantic import BaseModel, Field

from shopping.checkout.details import CheckoutDetails


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class BulkPricingTierSchema(BaseModel):
    min_quantity: int = Field(ge=1)
    discount_percent: float = Field(ge=0, le=100)


class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Cart Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    variant_id: str
    name: str
    price: float = Field(ge=0)
    quantity: int = Field(ge=1, default=1)
    image: str | None = None
    size: str | None = None
    color: str | None = None
    bulk_pricing_tiers: list[BulkPricingTierSchema] | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "prod-001",
                    "variant_id": "var-001-m-black",
                    "name": "Ankara Shirt",
                    "price": 15000,
                    "quantity": 2,
                    "image": "/images/ankara-shirt.jpg",
                    "size": "M",
                    "color": "Black",
                    "bulk_pricing_tiers": [
                        {"min_quantity": 5, "discount_percent": 10},
                        {"min_quantity": 10, "discount_percent": 20},
                    ],
                }
            ]
        }
    }


class UpdateCartQuantityRequest(BaseModel):
    quantity: int = Field(ge=1)


class CartLineResponse(BaseModel):
    product_id: str
    variant_id: str
    name: str
    image: str | None = None
    size: str | None = None
    color: str | None = None
    quantity: int
    unit_price: float
    effective_unit_price: float
    line_total: float
    discount_percent: float | None = None


class CartResponse(BaseModel):
    session_id: str
    items: list[CartLineResponse]
    item_count: int
    subtotal: float
    savings: float
    total: float
    display_total: str


# ---------------------------------------------------------------------------
# Checkout Schemas
# ---------------------------------------------------------------------------
class ShippingZoneResponse(BaseModel):
    id: str
    name: str
    states: list[str]
    fee: float


class CheckoutSummaryRequest(BaseModel):
    state: str | None = None
    promo_code: str | None = None


class CheckoutSummaryResponse(BaseModel):
    subtotal: float
    discount: float
    shipping: float
    total: float
    shipping_zone_id: str | None = None
    promo_message: str | None = None


class CheckoutRequest(CheckoutDetails):
    promo_code: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "first_name": "Ada",
                    "last_name": "Okafor",
                    "email": "ada@example.com",
                    "phone": "08012345678",
                    "address": "12 Admiralty Way",
                    "city": "Lekki",
                    "state": "Lagos",
                    "payment_method": "card",
                    "promo_code": "WELCOME10",
                }
            ]
        }
    }


class CheckoutResponse(BaseModel):
    order_id: str
    order_number: str | None = None
    redirect_url: str
    message: str
    payment_reference: str | None = None
