"""Storefront domain: catalogue, shopping cart and order management.

A single domain hosts every bounded context so that checkout can coordinate
cart lines, orders and product stock against the same providers.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

configure_logging(log_file_prefix="storefront")

logger = get_logger(__name__)

# Domain Composition Root
storefront = Domain(name="storefront")
