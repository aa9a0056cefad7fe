"""Email port: the one seam through which order emails leave the service."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    body: str


@dataclass(frozen=True)
class DeliveryReceipt:
    delivered: bool
    message_id: str | None = None
    error: str | None = None


class EmailPort(ABC):
    @abstractmethod
    def send(self, message: EmailMessage) -> DeliveryReceipt:
        """Hand ``message`` to the provider.

        Adapters report provider-side rejections in the receipt and raise
        only when the provider cannot be reached at all.
        """
