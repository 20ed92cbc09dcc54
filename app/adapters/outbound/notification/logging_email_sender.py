"""Logging email sender adapter for development."""

from collections import deque

from app.application.ports.email_sender import EmailSender
from app.infrastructure.logging.logger import logger

# Most recent sends kept for inspection; older entries drop off
SENT_HISTORY_LIMIT = 100


class LoggingEmailSender(EmailSender):
    """Adapter that records outbound email in the log instead of sending it."""

    def __init__(self, history_limit: int = SENT_HISTORY_LIMIT) -> None:
        """
        Initialize sender.

        Args:
            history_limit: Number of recent sends kept in sent
        """
        self.sent: deque[tuple[list[str], str, str]] = deque(maxlen=history_limit)

    async def send(self, recipients: list[str], subject: str, html_body: str) -> None:
        """
        Log an email.

        Args:
            recipients: Destination addresses
            subject: Subject line
            html_body: HTML body (kept in sent, not logged)
        """
        self.sent.append((list(recipients), subject, html_body))
        logger.info(f"Email queued | to={', '.join(recipients)!r} | subject={subject!r}")
