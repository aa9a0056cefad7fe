"""Pydantic request schemas for the storefront API.

These are the external contracts, kept apart from the internal Protean
commands. Bodies accept camelCase keys (``productId``) as well as snake_case
(``product_id``).
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from storefront.catalogue.product import ProductStatus, ProductType
from storefront.order.order import OrderStatus, PaymentMethod, PaymentStatus


class RequestSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(RequestSchema):
    product_id: str
    quantity: int = Field(ge=1, default=1)


class UpdateCartItemRequest(RequestSchema):
    quantity: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class AddressSchema(RequestSchema):
    street: str
    city: str
    state: str | None = None
    postal_code: str
    country: str


class PlaceOrderRequest(RequestSchema):
    shipping_address: AddressSchema
    billing_address: AddressSchema | None = None
    payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY
    notes: str | None = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "shippingAddress": {
                        "street": "12 Market Street",
                        "city": "Springfield",
                        "state": "IL",
                        "postalCode": "62701",
                        "country": "US",
                    },
                    "paymentMethod": "CASH_ON_DELIVERY",
                }
            ]
        },
    )


class UpdateOrderStatusRequest(RequestSchema):
    order_status: OrderStatus


class UpdatePaymentStatusRequest(RequestSchema):
    payment_status: PaymentStatus


class AddTrackingNumberRequest(RequestSchema):
    tracking_number: str = Field(min_length=1, max_length=100)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class OfferingSchema(RequestSchema):
    name: str | None = None  # variations and group items
    link: str | None = None  # external products
    regular_price: float = Field(gt=0)
    sale_price: float | None = Field(default=None, ge=0)
    stock: int | None = Field(default=None, ge=0)
    photos: list[str] = Field(default_factory=list)


class CreateProductRequest(RequestSchema):
    name: str = Field(min_length=1, max_length=255)
    product_type: ProductType
    status: ProductStatus | None = None
    offerings: list[OfferingSchema] = Field(min_length=1)


class ChangeProductStatusRequest(RequestSchema):
    status: ProductStatus


class OfferingPatch(RequestSchema):
    """Partial update of the primary offering.

    Only keys present in the body are applied; an explicit ``null`` clears
    ``salePrice`` or stops tracking ``stock``.
    """

    regular_price: float | None = Field(default=None, gt=0)
    sale_price: float | None = Field(default=None, ge=0)
    stock: int | None = Field(default=None, ge=0)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
