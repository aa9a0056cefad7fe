"""Admin-side order writes: status, payment status, tracking and deletion."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    order_status = String(required=True, max_length=20)


@storefront.command(part_of="Order")
class UpdatePaymentStatus:
    order_id = Identifier(required=True)
    payment_status = String(required=True, max_length=20)


@storefront.command(part_of="Order")
class AddTrackingNumber:
    order_id = Identifier(required=True)
    tracking_number = String(required=True, max_length=100)


@storefront.command(part_of="Order")
class DeleteOrder:
    order_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_live(command.order_id)
        order.update_status(command.order_status)
        repo.add(order)

    @handle(UpdatePaymentStatus)
    def update_payment_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_live(command.order_id)
        order.update_payment_status(command.payment_status)
        repo.add(order)

    @handle(AddTrackingNumber)
    def add_tracking_number(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_live(command.order_id)
        order.add_tracking_number(command.tracking_number)
        repo.add(order)

    @handle(DeleteOrder)
    def delete_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_live(command.order_id)
        order.trash()
        repo.add(order)
