"""Cart pricing: quantity-tiered bulk discounts across the variants of a product.

Pure functions over line items. Nothing here raises: malformed tier data is
treated as "no tiers" and out-of-range discounts are applied as given.

Bulk tiers are keyed by *product*, not variant, so a shopper can mix sizes and
colours of the same product to reach a threshold. Only the single best
qualifying tier applies; tiers never stack.

The grand total is rounded once, after summation, to 2 decimal places using
round-half-up. Per-line figures stay unrounded.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

_KOBO = Decimal("0.01")


@dataclass(frozen=True)
class BulkPricingTier:
    """A quantity breakpoint at or above which a percentage discount applies."""

    min_quantity: int
    discount_percent: float

    def to_dict(self) -> dict:
        return {"minQuantity": self.min_quantity, "discountPercent": self.discount_percent}


@dataclass(frozen=True)
class LineItem:
    """The pricing-relevant slice of a cart item."""

    product_id: str
    variant_id: str
    price: float
    quantity: int
    tiers: tuple[BulkPricingTier, ...] = ()


@dataclass(frozen=True)
class PricedLine:
    """A line item with its applied tier and discounted figures."""

    variant_id: str
    product_id: str
    quantity: int
    unit_price: float
    effective_unit_price: float
    line_total: float
    applied_tier: BulkPricingTier | None = None


def round_money(amount: float) -> float:
    """Round to the nearest kobo, halves away from zero."""
    return float(Decimal(str(amount)).quantize(_KOBO, rounding=ROUND_HALF_UP))


def parse_tiers(raw) -> tuple[BulkPricingTier, ...]:
    """Build tiers from JSON text or a list of ``{minQuantity, discountPercent}`` dicts.

    Accepts snake_case keys as well. Anything unreadable yields no tiers.
    """
    if not raw:
        return ()

    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            return ()

    if not isinstance(raw, list):
        return ()

    tiers = []
    for entry in raw:
        if isinstance(entry, BulkPricingTier):
            tiers.append(entry)
            continue
        if not isinstance(entry, dict):
            continue
        min_quantity = entry.get("minQuantity", entry.get("min_quantity"))
        discount_percent = entry.get("discountPercent", entry.get("discount_percent"))
        if min_quantity is None or discount_percent is None:
            continue
        try:
            tiers.append(BulkPricingTier(int(min_quantity), float(discount_percent)))
        except (TypeError, ValueError):
            continue
    return tuple(tiers)


def dump_tiers(tiers: Iterable[BulkPricingTier]) -> str:
    return json.dumps([tier.to_dict() for tier in tiers])


def product_quantities(lines: Iterable[LineItem]) -> dict[str, int]:
    """Total quantity per product, summed across its variants."""
    totals: dict[str, int] = {}
    for line in lines:
        totals[line.product_id] = totals.get(line.product_id, 0) + line.quantity
    return totals


def select_tier(tiers: Iterable[BulkPricingTier], total_quantity: int) -> BulkPricingTier | None:
    """Return the highest tier whose threshold ``total_quantity`` reaches.

    Tiers sharing a threshold are ordered by discount, largest first.
    """
    ranked = sorted(tiers, key=lambda t: (t.min_quantity, t.discount_percent), reverse=True)
    return next((tier for tier in ranked if tier.min_quantity <= total_quantity), None)


def discounted_price(price: float, tier: BulkPricingTier | None) -> float:
    if tier is None:
        return price
    return price * (1 - tier.discount_percent / 100)


def price_lines(lines: Iterable[LineItem]) -> list[PricedLine]:
    """Price every line against its product's combined quantity."""
    lines = list(lines)
    quantities = product_quantities(lines)

    priced = []
    for line in lines:
        tier = select_tier(line.tiers, quantities[line.product_id]) if line.tiers else None
        unit_price = discounted_price(line.price, tier)
        priced.append(
            PricedLine(
                variant_id=line.variant_id,
                product_id=line.product_id,
                quantity=line.quantity,
                unit_price=line.price,
                effective_unit_price=unit_price,
                line_total=unit_price * line.quantity,
                applied_tier=tier,
            )
        )
    return priced


def calculate_total(lines: Iterable[LineItem]) -> float:
    """Discounted grand total, rounded to the kobo."""
    return round_money(sum((p.line_total for p in price_lines(lines)), 0.0))


def calculate_subtotal(lines: Iterable[LineItem]) -> float:
    """Undiscounted total, rounded to the kobo."""
    return round_money(sum((line.price * line.quantity for line in lines), 0.0))


def count_items(lines: Iterable[LineItem]) -> int:
    return sum(line.quantity for line in lines)
