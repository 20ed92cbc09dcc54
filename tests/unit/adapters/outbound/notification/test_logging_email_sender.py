"""Unit tests for logging email sender adapter."""

import pytest

from app.adapters.outbound.notification.logging_email_sender import LoggingEmailSender


@pytest.mark.asyncio
async def test_records_sent_messages():
    """Test messages are kept for inspection instead of being delivered."""
    sender = LoggingEmailSender()

    await sender.send(["csr@agency.example"], "Lead moved", "<p>Hi</p>")

    assert list(sender.sent) == [(["csr@agency.example"], "Lead moved", "<p>Hi</p>")]


@pytest.mark.asyncio
async def test_history_keeps_only_recent_messages():
    """Test the recorded history is capped at the configured size."""
    sender = LoggingEmailSender(history_limit=2)

    for index in range(5):
        await sender.send(["csr@agency.example"], f"Lead {index}", "<p>Hi</p>")

    assert [subject for _, subject, _ in sender.sent] == ["Lead 3", "Lead 4"]
