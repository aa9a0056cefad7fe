"""Repository for the Product aggregate."""

from protean.exceptions import ObjectNotFoundError

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.shared.errors import NotFound
from storefront.shared.lifecycle import is_live


@storefront.repository(part_of=Product)
class ProductRepository:
    def get_live(self, product_id) -> Product:
        """Load a product that has not been trashed, or raise NotFound."""
        try:
            product = self.get(str(product_id))
        except ObjectNotFoundError:
            raise NotFound("Product not found") from None

        if not is_live(product):
            raise NotFound("Product not found")
        return product
