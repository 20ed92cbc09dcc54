"""Send follow-up reminders use case."""

import html
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from app.application.dtos.reminder import ReminderSweepResult
from app.application.ports.email_sender import EmailDeliveryError, EmailSender
from app.application.ports.lead_repository import LeadRepository
from app.application.use_cases.notification_recipients import resolve_recipients
from app.domain.entities.lead import Lead
from app.domain.errors import LeadStoreError


class SendFollowUpReminders:
    """Use case for the periodic follow-up reminder sweep."""

    def __init__(
        self,
        lead_repository: LeadRepository,
        email_sender: EmailSender,
        site_url: str = "",
        default_sender: Optional[str] = None,
        admin_email: Optional[str] = None,
        logger: Optional[Callable[..., None]] = None,
    ) -> None:
        """
        Initialize reminder sweep.

        Args:
            lead_repository: Repository for leads
            email_sender: Sender for reminder emails
            site_url: Base URL used for the dashboard link
            default_sender: Recipient used when no CSR is assigned
            admin_email: Admin notification address
            logger: Optional logger function (lead_id, request_id, component, **kwargs)
        """
        self._lead_repository = lead_repository
        self._email_sender = email_sender
        self._site_url = site_url.rstrip("/")
        self._default_sender = default_sender
        self._admin_email = admin_email
        self._logger = logger

    def _log(self, lead_id: str, request_id: str, component: str, **kwargs: Any) -> None:
        """Log event if logger is available."""
        if self._logger:
            self._logger(lead_id, request_id, component, **kwargs)

    async def execute(
        self,
        now: Optional[datetime] = None,
        request_id: Optional[str] = None,
    ) -> ReminderSweepResult:
        """
        Remind CSRs about leads whose follow-up date has passed.

        A lead is reminded once: reminder_sent is flipped only if it is still
        false. Per-lead failures are counted and do not stop the sweep.

        Args:
            now: Current timestamp (defaults to UTC now)
            request_id: Optional request identifier for logging

        Returns:
            ReminderSweepResult with processed/sent/errors counts
        """
        now = now or datetime.now(timezone.utc)
        request_id = request_id or "unknown"

        leads = await self._lead_repository.list_due_for_reminder(now)
        if not leads:
            return ReminderSweepResult()

        sent = 0
        errors = 0
        for lead in leads:
            if not lead.email:
                self._log(
                    lead.id, request_id, "reminder", level=logging.WARNING, skipped="no email"
                )
                continue

            recipients = resolve_recipients(lead, self._default_sender, self._admin_email)
            if not recipients:
                self._log(
                    lead.id, request_id, "reminder", level=logging.WARNING, skipped="no recipients"
                )
                continue

            subject, body = self._compose(lead)
            try:
                await self._email_sender.send(recipients, subject, body)
                flipped = await self._lead_repository.mark_reminder_sent(lead.id)
            except (EmailDeliveryError, LeadStoreError) as err:
                errors += 1
                self._log(lead.id, request_id, "reminder", level=logging.ERROR, failed=str(err))
                continue

            sent += 1
            self._log(
                lead.id,
                request_id,
                "reminder",
                recipients=recipients,
                already_marked=not flipped,
            )

        return ReminderSweepResult(processed=len(leads), sent=sent, errors=errors)

    def _compose(self, lead: Lead) -> tuple[str, str]:
        """Build subject and HTML body for one lead."""
        client = lead.client_name or "Lead"
        named = html.escape(lead.client_name or "Unknown")
        link = f"{self._site_url}/dashboard/leads/{lead.id}"
        subject = f"Action Required: Follow-up Reminder for {client}"
        body = (
            "<p>This is an automated reminder.</p>"
            f"<p>The lead <strong>{named}</strong> is past its "
            "follow-up date and requires follow-up.</p>"
            "<p>Please check the dashboard and contact the client if necessary.</p>"
            f'<p><a href="{link}">View Lead</a></p>'
        )
        return subject, body
