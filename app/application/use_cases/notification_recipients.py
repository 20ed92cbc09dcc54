"""Recipient resolution for CSR notifications."""

from typing import Optional

from app.domain.entities.lead import Lead


def resolve_recipients(
    lead: Lead,
    default_sender: Optional[str],
    admin_email: Optional[str],
) -> list[str]:
    """
    Resolve who is notified about a lead.

    The assigned CSR (or the default sender when none is assigned) plus the
    admin address, without duplicates.

    Args:
        lead: Lead entity
        default_sender: Fallback address for unassigned leads
        admin_email: Admin notification address

    Returns:
        Ordered, de-duplicated recipient list (may be empty)
    """
    candidates = [lead.assigned_csr_email or default_sender, admin_email]
    recipients: list[str] = []
    for address in candidates:
        if address and address not in recipients:
            recipients.append(address)
    return recipients
