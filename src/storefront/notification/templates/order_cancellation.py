"""Order cancellation template, sent when an order is cancelled."""


class OrderCancellationTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        payment_status = context.get("payment_status", "CANCELLED")
        refund_note = (
            "Your payment will be refunded." if payment_status == "REFUNDED" else "No payment was taken for this order."
        )
        return {
            "subject": f"Order #{order_id} Cancelled",
            "body": (
                f"Your order #{order_id} has been cancelled.\n\n"
                f"{refund_note}\n\n"
                "If you have questions, please contact our support team."
            ),
        }
