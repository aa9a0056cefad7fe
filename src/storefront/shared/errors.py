"""Business errors raised by storefront command handlers.

Aggregates keep raising ``protean.exceptions.ValidationError`` for their own
invariants. The classes below cover rules that span aggregates (catalogue vs.
cart vs. order) and carry the HTTP status the API layer reports them with.
"""


class StorefrontError(Exception):
    status_code = 500

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details


class NotFound(StorefrontError):
    status_code = 404


class Forbidden(StorefrontError):
    status_code = 403


class BusinessRuleViolation(StorefrontError):
    status_code = 400


class EmptyCart(BusinessRuleViolation):
    def __init__(self):
        super().__init__("Your cart is empty")


class ProductUnavailable(BusinessRuleViolation):
    def __init__(self, product_id: str, reason: str = "Product not found or not available"):
        super().__init__(reason, productId=str(product_id))
        self.product_id = str(product_id)
        self.reason = reason


class InsufficientStock(BusinessRuleViolation):
    def __init__(self, product_id: str, available: int, requested: int):
        super().__init__(
            f"Only {available} items available in stock",
            productId=str(product_id),
            available=available,
            requested=requested,
        )
        self.product_id = str(product_id)
        self.available = available
        self.requested = requested


class ItemsUnavailable(BusinessRuleViolation):
    """Raised when checkout finds lines that can no longer be bought.

    ``unavailable_items`` lists every offending line, not just the first.
    """

    def __init__(self, unavailable_items: list[dict]):
        super().__init__("Some items in your cart are unavailable", unavailableItems=unavailable_items)
        self.unavailable_items = unavailable_items
