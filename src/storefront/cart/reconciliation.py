"""Cart reconciliation: heal drift between cart lines and the catalogue.

For every live line, in order:

    1. Product gone, inactive or of an unsupported type -> line removed.
    2. Catalogue price differs from the stored price -> price refreshed.
    3. Tracked stock below the line quantity -> line removed when stock is
       zero, otherwise quantity clamped to the remaining stock.

Steps 2 and 3 can both apply to the same line. Running the command again
against an unchanged catalogue produces an empty ledger.
"""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.catalogue.reader import CatalogReader
from storefront.domain import storefront
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

OUT_OF_STOCK = "Product is out of stock"
CLAMPED = "Adjusted to available stock"


@storefront.command(part_of="ShoppingCart")
class SyncCart:
    customer_id = Identifier(required=True)


def empty_ledger() -> dict:
    return {"updated": [], "removed": [], "priceChanged": []}


def reconcile(cart: ShoppingCart, reader: CatalogReader) -> dict:
    """Apply catalogue corrections to ``cart`` and return the change ledger."""
    ledger = empty_ledger()

    for item in cart.live_items:
        entry = reader.lookup(item.product_id)
        product_name = entry.name or "Unknown product"

        reason = entry.checkout_reason
        if reason is not None:
            cart.remove_item(item.id, reason=reason)
            ledger["removed"].append({"id": str(item.id), "productName": product_name, "reason": reason})
            continue

        if entry.unit_price != item.price:
            old_price = item.price
            cart.reprice_item(item.id, entry.unit_price)
            ledger["priceChanged"].append(
                {
                    "id": str(item.id),
                    "productName": product_name,
                    "oldPrice": old_price,
                    "newPrice": entry.unit_price,
                }
            )

        if entry.shortfall(item.quantity):
            if entry.stock == 0:
                cart.remove_item(item.id, reason=OUT_OF_STOCK)
                ledger["removed"].append({"id": str(item.id), "productName": product_name, "reason": OUT_OF_STOCK})
            else:
                old_quantity = item.quantity
                cart.update_item_quantity(item.id, entry.stock)
                ledger["updated"].append(
                    {
                        "id": str(item.id),
                        "productName": product_name,
                        "oldQuantity": old_quantity,
                        "newQuantity": entry.stock,
                        "reason": CLAMPED,
                    }
                )

    return ledger


def has_changes(ledger: dict) -> bool:
    return any(ledger[key] for key in ("updated", "removed", "priceChanged"))


@storefront.command_handler(part_of=ShoppingCart)
class SyncCartHandler:
    @handle(SyncCart)
    def sync_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.find_active_for(command.customer_id)
        if cart is None:
            return empty_ledger()

        ledger = reconcile(cart, CatalogReader(current_domain.repository_for(Product)))
        if has_changes(ledger):
            repo.add(cart)
            logger.info(
                "Cart reconciled",
                cart_id=str(cart.id),
                updated=len(ledger["updated"]),
                removed=len(ledger["removed"]),
                price_changed=len(ledger["priceChanged"]),
            )
        return ledger
