"""Order emails: confirmation on placement, notice on cancellation.

Delivery is best effort. Failures are logged and never undo the order
change that triggered them.
"""

from protean import handle

from storefront.domain import storefront
from storefront.notification import get_mailer
from storefront.notification.email_port import EmailMessage
from storefront.notification.templates import OrderCancellationTemplate, OrderConfirmationTemplate
from storefront.order.events import OrderCancelled, OrderPlaced
from storefront.order.order import Order
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def send_order_email(to, template, context) -> bool:
    if not to:
        logger.info("No email address on order, notification skipped", order_id=context.get("order_id"))
        return False

    content = template.render(context)
    try:
        receipt = get_mailer().send(EmailMessage(to=to, subject=content["subject"], body=content["body"]))
    except Exception as e:
        logger.error("Order email failed", order_id=context.get("order_id"), to=to, error=str(e))
        return False

    if not receipt.delivered:
        logger.warning(
            "Order email not delivered",
            order_id=context.get("order_id"),
            to=to,
            error=receipt.error or "Unknown delivery error",
        )
        return False
    return True


@storefront.event_handler(part_of=Order)
class OrderEmailsHandler:
    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        send_order_email(
            event.customer_email,
            OrderConfirmationTemplate,
            {
                "order_id": str(event.order_id),
                "total_amount": event.total_amount,
                "item_count": event.item_count,
                "payment_method": event.payment_method,
            },
        )

    @handle(OrderCancelled)
    def on_order_cancelled(self, event: OrderCancelled) -> None:
        send_order_email(
            event.customer_email,
            OrderCancellationTemplate,
            {
                "order_id": str(event.order_id),
                "payment_status": event.payment_status,
            },
        )
