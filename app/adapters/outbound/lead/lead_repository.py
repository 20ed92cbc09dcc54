"""In-memory lead repository adapter."""

from dataclasses import replace
from datetime import datetime
from typing import Optional

from app.application.ports.lead_repository import LeadRepository
from app.domain.entities.lead import Lead, LeadStageChange
from app.domain.errors import LeadNotFound, LeadUpdateConflict
from app.domain.value_objects.calendar_date import as_utc


class InMemoryLeadRepository(LeadRepository):
    """In-memory implementation of lead repository."""

    def __init__(self) -> None:
        """Initialize in-memory repository."""
        self._storage: dict[str, Lead] = {}

    async def get(self, lead_id: str) -> Optional[Lead]:
        """
        Get a lead by id.

        Args:
            lead_id: Lead identifier

        Returns:
            Lead entity, or None if not found
        """
        return self._storage.get(lead_id)

    async def save(self, lead: Lead) -> None:
        """
        Save a lead (replaces any lead with the same id).

        Args:
            lead: Lead entity to save
        """
        self._storage[lead.id] = lead

    async def apply_stage_change(
        self,
        lead_id: str,
        change: LeadStageChange,
        expected: Lead,
    ) -> None:
        """
        Write a stage change if the lead still matches what was read.

        Args:
            lead_id: Lead identifier
            change: Fields to write
            expected: Lead as read before validation
        """
        current = self._storage.get(lead_id)
        if current is None:
            raise LeadNotFound(lead_id)
        if (
            current.current_stage_id != expected.current_stage_id
            or current.stage_metadata != expected.stage_metadata
        ):
            raise LeadUpdateConflict(lead_id)
        self._storage[lead_id] = current.with_stage_change(change)

    async def list_due_for_reminder(self, now: datetime) -> list[Lead]:
        """
        List leads whose follow-up is due and not yet reminded.

        Args:
            now: Current timestamp

        Returns:
            Matching leads
        """
        return [
            lead
            for lead in self._storage.values()
            if lead.follow_up_date is not None
            and as_utc(lead.follow_up_date) <= as_utc(now)
            and not lead.reminder_sent
            and lead.stage_metadata.is_true("email_sent")
        ]

    async def mark_reminder_sent(self, lead_id: str) -> bool:
        """
        Set reminder_sent to true only if it is still false.

        Args:
            lead_id: Lead identifier

        Returns:
            True if the flag was flipped by this call
        """
        lead = self._storage.get(lead_id)
        if lead is None or lead.reminder_sent:
            return False
        self._storage[lead_id] = replace(lead, reminder_sent=True)
        return True
