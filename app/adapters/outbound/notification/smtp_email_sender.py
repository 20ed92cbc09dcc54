"""SMTP email sender adapter."""

import asyncio
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from app.application.ports.email_sender import EmailDeliveryError, EmailSender


class SMTPEmailSender(EmailSender):
    """SMTP adapter for CSR notification email."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        from_email: str = "noreply@example.com",
        timeout_seconds: int = 10,
    ) -> None:
        """
        Initialize SMTP sender.

        Args:
            host: SMTP server hostname
            port: SMTP server port
            username: Authentication username
            password: Authentication password
            use_tls: Use STARTTLS
            from_email: Sender address
            timeout_seconds: Connection timeout
        """
        if not host:
            raise ValueError("SMTP_HOST is required for the SMTP email sender")
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._from_email = from_email
        self._timeout_seconds = timeout_seconds

    def _build_message(self, recipients: list[str], subject: str, html_body: str) -> MIMEMultipart:
        """Build the MIME message."""
        message = MIMEMultipart("alternative")
        message["From"] = self._from_email
        message["To"] = ", ".join(recipients)
        message["Subject"] = subject
        message.attach(MIMEText(html_body, "html"))
        return message

    def _send_sync(self, recipients: list[str], subject: str, html_body: str) -> None:
        """Deliver over a blocking SMTP connection."""
        message = self._build_message(recipients, subject, html_body)
        with smtplib.SMTP(self._host, self._port, timeout=self._timeout_seconds) as server:
            if self._use_tls:
                server.starttls(context=ssl.create_default_context())
            if self._username and self._password:
                server.login(self._username, self._password)
            server.sendmail(self._from_email, recipients, message.as_string())

    async def send(self, recipients: list[str], subject: str, html_body: str) -> None:
        """
        Send an email over SMTP.

        Args:
            recipients: Destination addresses
            subject: Subject line
            html_body: HTML body

        Raises:
            EmailDeliveryError: If the server rejects or cannot be reached
        """
        try:
            await asyncio.to_thread(self._send_sync, recipients, subject, html_body)
        except (smtplib.SMTPException, OSError) as err:
            raise EmailDeliveryError(f"SMTP delivery failed: {err}") from err
