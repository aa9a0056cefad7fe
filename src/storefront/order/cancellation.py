"""Order cancellation with stock restoration.

Cancelling and putting every line's quantity back on the product commit in
one Unit of Work. Products that no longer exist are skipped.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.order.order import Order
from storefront.shared.roles import Role
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(choices=Role, default=Role.CUSTOMER.value)


def restore_stock(order):
    products = current_domain.repository_for(Product)
    for item in order.items:
        try:
            product = products.get(str(item.product_id))
        except ObjectNotFoundError:
            logger.warning(
                "Product missing, stock not restored",
                order_id=str(order.id),
                product_id=str(item.product_id),
                quantity=item.quantity,
            )
            continue

        if not product.is_purchasable_type:
            continue
        product.restore_stock(item.quantity)
        products.add(product)


@storefront.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        is_admin = command.actor_role == Role.ADMIN.value
        repo = current_domain.repository_for(Order)
        order = repo.get_visible_to(command.order_id, command.actor_id, is_admin=is_admin)

        order.cancel(cancelled_by=command.actor_role, is_admin=is_admin)
        repo.add(order)
        restore_stock(order)

        logger.info(
            "Order cancelled",
            order_id=str(order.id),
            cancelled_by=command.actor_role,
            payment_status=order.payment_status,
        )
