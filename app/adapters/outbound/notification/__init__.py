"""Email sender adapters."""

from app.adapters.outbound.notification.logging_email_sender import LoggingEmailSender
from app.adapters.outbound.notification.smtp_email_sender import SMTPEmailSender

__all__ = [
    "LoggingEmailSender",
    "SMTPEmailSender",
]
