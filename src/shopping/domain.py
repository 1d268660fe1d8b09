"""Shopping bounded context: shopper cart, bulk pricing and checkout.

The cart is a CQRS-style aggregate persisted as a client-side record; checkout
orchestrates the external shipping, promotion, order and payment collaborators.
"""

import structlog
from protean.domain import Domain

shopping = Domain(name="shopping")

logger = structlog.get_logger(__name__)
