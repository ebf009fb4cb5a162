"""
Abstract base class for outbound email transports.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


class EmailDeliveryError(Exception):
    """Raised when a transport could not hand a message over for delivery."""


@dataclass(frozen=True)
class OutgoingEmail:
    """A single message ready to be handed to a transport."""
    to: str
    subject: str
    html: str
    text: Optional[str] = None
    reply_to: Optional[str] = None


@dataclass
class DeliveryResult:
    """Outcome of a send that must not fail the request."""
    sent: bool
    message_id: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def ok(cls, message_id: Optional[str] = None) -> "DeliveryResult":
        return cls(sent=True, message_id=message_id)

    @classmethod
    def failed(cls, error_message: str) -> "DeliveryResult":
        return cls(sent=False, error_message=error_message)


class BaseEmailTransport(ABC):
    """Abstract base class for email transports."""

    name: str

    @abstractmethod
    async def send(self, email: OutgoingEmail) -> Optional[str]:
        """
        Deliver a message.

        Args:
            email: The message to send

        Returns:
            The provider's message id, when it reports one

        Raises:
            EmailDeliveryError: if the provider rejected the message
        """
        pass
