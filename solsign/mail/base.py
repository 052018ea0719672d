from abc import ABC, abstractmethod
from email.message import EmailMessage


class BaseMailer(ABC):
    """Contract for all outgoing mail adapters."""

    @abstractmethod
    def send(self, message: EmailMessage) -> None:
        """Deliver a fully built message.

        Raises:
            MailDeliveryError: if the transport rejects or cannot reach the server.
        """
