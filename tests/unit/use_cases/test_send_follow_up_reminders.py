"""Unit tests for SendFollowUpReminders use case."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from app.adapters.outbound.lead.lead_repository import InMemoryLeadRepository
from app.adapters.outbound.notification.logging_email_sender import LoggingEmailSender
from app.application.ports.email_sender import EmailDeliveryError
from app.application.use_cases.notification_recipients import resolve_recipients
from app.application.use_cases.send_follow_up_reminders import SendFollowUpReminders
from app.domain.entities.lead import Lead
from app.domain.value_objects.stage_metadata import StageMetadata

NOW = datetime(2025, 1, 20, 9, 0, tzinfo=timezone.utc)


def due_lead(lead_id: str, **overrides) -> Lead:
    """Build a lead whose follow-up date has passed."""
    values = {
        "id": lead_id,
        "pipeline_id": "commercial",
        "current_stage_id": "cl_quote_emailed",
        "follow_up_date": NOW - timedelta(days=1),
        "stage_metadata": StageMetadata({"email_sent": True}),
        "client_name": "Acme Roofing",
        "email": "owner@acme.example",
        "assigned_csr_email": "csr@agency.example",
    }
    values.update(overrides)
    return Lead(**values)


@pytest.fixture
def lead_repository():
    """Create in-memory lead repository."""
    return InMemoryLeadRepository()


@pytest.fixture
def email_sender():
    """Create recording email sender."""
    return LoggingEmailSender()


@pytest.fixture
def use_case(lead_repository, email_sender):
    """Create reminder sweep."""
    return SendFollowUpReminders(
        lead_repository,
        email_sender,
        site_url="https://crm.example/",
        admin_email="admin@agency.example",
    )


@pytest.mark.asyncio
async def test_no_due_leads(use_case):
    """Test an empty sweep reports zero counts."""
    result = await use_case.execute(now=NOW)

    assert result.processed == 0
    assert result.sent == 0
    assert result.errors == 0


@pytest.mark.asyncio
async def test_sends_reminder_and_marks_lead(use_case, lead_repository, email_sender):
    """Test a due lead is reminded once and flagged."""
    await lead_repository.save(due_lead("lead_1"))

    result = await use_case.execute(now=NOW)

    assert result.processed == 1
    assert result.sent == 1
    assert len(email_sender.sent) == 1
    recipients, subject, body = email_sender.sent[0]
    assert recipients == ["csr@agency.example", "admin@agency.example"]
    assert subject == "Action Required: Follow-up Reminder for Acme Roofing"
    assert "https://crm.example/dashboard/leads/lead_1" in body
    stored = await lead_repository.get("lead_1")
    assert stored.reminder_sent is True


@pytest.mark.asyncio
async def test_reminder_body_escapes_client_name(use_case, lead_repository, email_sender):
    """Test markup in a client name is escaped in the HTML body."""
    await lead_repository.save(due_lead("lead_1", client_name="<b>Acme & Sons</b>"))

    await use_case.execute(now=NOW)

    _, _, body = email_sender.sent[0]
    assert "<strong>&lt;b&gt;Acme &amp; Sons&lt;/b&gt;</strong>" in body
    assert "<b>Acme" not in body


@pytest.mark.asyncio
async def test_second_sweep_does_not_resend(use_case, lead_repository, email_sender):
    """Test a reminded lead is not picked up again."""
    await lead_repository.save(due_lead("lead_1"))

    await use_case.execute(now=NOW)
    result = await use_case.execute(now=NOW)

    assert result.processed == 0
    assert len(email_sender.sent) == 1


@pytest.mark.asyncio
async def test_skips_leads_not_yet_due_or_not_emailed(use_case, lead_repository):
    """Test future follow-ups and leads without the initial email are ignored."""
    await lead_repository.save(due_lead("future", follow_up_date=NOW + timedelta(hours=1)))
    await lead_repository.save(due_lead("no_email_sent", stage_metadata=StageMetadata()))
    await lead_repository.save(due_lead("already", reminder_sent=True))

    result = await use_case.execute(now=NOW)

    assert result.processed == 0


@pytest.mark.asyncio
async def test_lead_without_email_is_skipped(use_case, lead_repository, email_sender):
    """Test a lead with no client email is processed but not reminded."""
    await lead_repository.save(due_lead("lead_1", email=None))

    result = await use_case.execute(now=NOW)

    assert result.processed == 1
    assert result.sent == 0
    assert list(email_sender.sent) == []
    stored = await lead_repository.get("lead_1")
    assert stored.reminder_sent is False


@pytest.mark.asyncio
async def test_delivery_failure_counts_error_and_continues(lead_repository):
    """Test one failing lead does not stop the sweep."""
    sender = AsyncMock()
    sender.send.side_effect = [EmailDeliveryError("mailbox full"), None]
    use_case = SendFollowUpReminders(lead_repository, sender, admin_email="admin@agency.example")
    await lead_repository.save(due_lead("lead_1"))
    await lead_repository.save(due_lead("lead_2"))

    result = await use_case.execute(now=NOW)

    assert result.processed == 2
    assert result.sent == 1
    assert result.errors == 1
    reminded = [
        lead_id
        for lead_id in ("lead_1", "lead_2")
        if (await lead_repository.get(lead_id)).reminder_sent
    ]
    assert reminded == ["lead_2"]


def test_recipients_fall_back_to_default_sender():
    """Test unassigned leads notify the default sender and admin without duplicates."""
    lead = due_lead("lead_1", assigned_csr_email=None)

    assert resolve_recipients(lead, "office@agency.example", "admin@agency.example") == [
        "office@agency.example",
        "admin@agency.example",
    ]
    assert resolve_recipients(lead, "admin@agency.example", "admin@agency.example") == [
        "admin@agency.example"
    ]
    assert resolve_recipients(lead, None, None) == []
