"""Storefront bounded context: catalogue, shopping cart and orders.

Product, ShoppingCart and Order live in one domain so that placing or
cancelling an order can change all three inside a single Unit of Work.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

storefront = Domain(name="storefront")
