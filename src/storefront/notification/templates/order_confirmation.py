"""Order confirmation template, sent when an order is placed."""


class OrderConfirmationTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        total_amount = context.get("total_amount", 0.0)
        item_count = context.get("item_count", 0)
        payment_method = context.get("payment_method", "CASH_ON_DELIVERY")
        return {
            "subject": f"Order #{order_id} Confirmed",
            "body": (
                f"Thank you for your order #{order_id}.\n\n"
                f"Items: {item_count}\n"
                f"Order Total: {total_amount:.2f}\n"
                f"Payment Method: {payment_method.replace('_', ' ').title()}\n\n"
                "We'll let you know as soon as it ships."
            ),
        }
