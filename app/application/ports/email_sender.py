"""Email sender port."""

from abc import ABC, abstractmethod


class EmailSender(ABC):
    """Port interface for outbound notification email."""

    @abstractmethod
    async def send(self, recipients: list[str], subject: str, html_body: str) -> None:
        """
        Send an email.

        Args:
            recipients: Destination addresses
            subject: Subject line
            html_body: HTML body

        Raises:
            EmailDeliveryError: If delivery fails
        """
        pass


class EmailDeliveryError(Exception):
    """Raised when an email could not be delivered."""
