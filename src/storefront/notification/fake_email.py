"""In-memory email adapter, the default mailer outside production."""

from uuid import uuid4

from storefront.notification.email_port import DeliveryReceipt, EmailMessage, EmailPort


class FakeEmailAdapter(EmailPort):
    def __init__(self):
        self.outbox: list[EmailMessage] = []
        self.failure_reason: str | None = None

    def fail_with(self, reason: str = "Email delivery failed"):
        """Reject every following message with ``reason``."""
        self.failure_reason = reason

    def send(self, message: EmailMessage) -> DeliveryReceipt:
        if self.failure_reason:
            return DeliveryReceipt(delivered=False, error=self.failure_reason)

        self.outbox.append(message)
        return DeliveryReceipt(delivered=True, message_id=f"email-{uuid4().hex[:12]}")

    def sent_to(self, address: str) -> list[EmailMessage]:
        return [message for message in self.outbox if message.to == address]
