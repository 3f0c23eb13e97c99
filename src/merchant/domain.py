"""Merchant bounded context — the shop's own REST API.

Serves the product catalogue and categories to the storefront and records
the orders it submits.
"""

import structlog
from protean.domain import Domain

merchant = Domain(name="merchant")

logger = structlog.get_logger(__name__)
