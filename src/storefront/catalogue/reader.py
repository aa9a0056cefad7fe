"""Catalog Reader: current price, stock and availability of a product.

Cart and order handlers consult the reader instead of the prices stored on
cart lines. The reader is built around a product repository handed in by the
caller, so any object with a ``get(product_id)`` method will do in tests.
"""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError

from storefront.catalogue.product import Product, ProductStatus, effective_price, first_photo
from storefront.shared.lifecycle import is_live

UNAVAILABLE = "Product is no longer available"
NOT_FOUND = "Product not found or not available"
UNSUPPORTED_TYPE = "Product type not supported"
NO_PRICE = "Product price information not available"


@dataclass(frozen=True)
class CatalogEntry:
    """What the catalogue currently says about one product.

    ``available`` only says the product exists, is live, is ACTIVE and has a
    priced offering. ``purchasable`` adds that its type is stocked and sold
    through checkout, and ``addable`` that it may be put in a cart.
    ``stock`` is None when stock is not tracked. ``product`` is the loaded
    aggregate (None when the product does not exist) so callers can move
    stock without loading it a second time.
    """

    product_id: str
    available: bool
    purchasable: bool = False
    addable: bool = False
    unit_price: float = 0.0
    stock: int | None = None
    name: str | None = None
    product_type: str | None = None
    status: str | None = None
    image: str | None = None
    reason: str | None = None
    product: Product | None = None

    def shortfall(self, quantity: int) -> bool:
        """True when tracked stock cannot cover ``quantity``."""
        return self.stock is not None and self.stock < quantity

    @property
    def checkout_reason(self) -> str | None:
        """Why the line cannot be kept through sync or checkout, if at all."""
        if not self.available:
            return self.reason
        if not self.purchasable:
            return UNSUPPORTED_TYPE
        return None


class CatalogReader:
    def __init__(self, products):
        self._products = products

    def lookup(self, product_id) -> CatalogEntry:
        """Describe a product. Never raises; problems come back as reasons."""
        try:
            product = self._products.get(str(product_id))
        except ObjectNotFoundError:
            return CatalogEntry(product_id=str(product_id), available=False, reason=NOT_FOUND)

        return self.describe(product)

    def describe(self, product: Product) -> CatalogEntry:
        base = {
            "product_id": str(product.id),
            "name": product.name,
            "product_type": product.product_type,
            "status": product.status,
            "product": product,
        }

        if not is_live(product):
            return CatalogEntry(available=False, reason=NOT_FOUND, **base)

        offering = product.primary_offering
        priced = {}
        if offering is not None:
            priced = {
                "unit_price": effective_price(offering),
                "stock": offering.stock,
                "image": first_photo(offering),
            }

        if product.status != ProductStatus.ACTIVE.value:
            return CatalogEntry(available=False, reason=UNAVAILABLE, **base, **priced)
        if offering is None:
            return CatalogEntry(available=False, reason=NO_PRICE, **base)

        return CatalogEntry(
            available=True,
            purchasable=product.is_purchasable_type,
            addable=product.accepts_cart_lines,
            **base,
            **priced,
        )
