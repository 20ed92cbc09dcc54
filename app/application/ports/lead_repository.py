"""Lead repository port."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from app.domain.entities.lead import Lead, LeadStageChange


class LeadRepository(ABC):
    """Port interface for lead repository."""

    @abstractmethod
    async def get(self, lead_id: str) -> Optional[Lead]:
        """
        Get a lead by id.

        Args:
            lead_id: Lead identifier

        Returns:
            Lead entity, or None if not found

        Raises:
            LeadStoreError: If the store cannot be reached
        """
        pass

    @abstractmethod
    async def save(self, lead: Lead) -> None:
        """
        Insert or replace a lead (used by intake and fixtures).

        Args:
            lead: Lead entity to save
        """
        pass

    @abstractmethod
    async def apply_stage_change(
        self,
        lead_id: str,
        change: LeadStageChange,
        expected: Lead,
    ) -> None:
        """
        Write a stage change if the lead still matches what was read.

        Only current_stage_id, stage_metadata and (when set) reminder_sent
        are written.

        Args:
            lead_id: Lead identifier
            change: Fields to write
            expected: Lead as read before validation

        Raises:
            LeadNotFound: If the lead no longer exists
            LeadUpdateConflict: If stage or metadata changed since the read
            LeadStoreError: If the write fails
        """
        pass

    @abstractmethod
    async def list_due_for_reminder(self, now: datetime) -> list[Lead]:
        """
        List leads whose follow-up is due and not yet reminded.

        Matches follow_up_date <= now, reminder_sent false and
        stage_metadata.email_sent true.

        Args:
            now: Current timestamp

        Returns:
            Matching leads
        """
        pass

    @abstractmethod
    async def mark_reminder_sent(self, lead_id: str) -> bool:
        """
        Set reminder_sent to true only if it is still false.

        Args:
            lead_id: Lead identifier

        Returns:
            True if this call flipped the flag, False if it was already set
        """
        pass
