"""Lead entity."""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Optional

from app.domain.entities.pipeline import InsuranceCategory
from app.domain.value_objects.stage_metadata import StageMetadata


class PolicyFlow(str, Enum):
    """New business or renewal."""

    NEW = "new"
    RENEWAL = "renewal"


@dataclass(frozen=True)
class Lead:
    """
    Prospective or in-progress insurance case.

    Renewals are leads with policy_flow=renewal. Leads are changed through
    stage transitions only and are never deleted.
    """

    id: str
    pipeline_id: str
    current_stage_id: str
    insurance_category: InsuranceCategory = InsuranceCategory.PERSONAL
    policy_flow: PolicyFlow = PolicyFlow.NEW
    effective_date: Optional[date] = None
    renewal_date: Optional[date] = None
    follow_up_date: Optional[datetime] = None
    target_completion_date: Optional[date] = None
    stage_metadata: StageMetadata = field(default_factory=StageMetadata)
    reminder_sent: bool = False
    client_name: Optional[str] = None
    email: Optional[str] = None
    assigned_csr_email: Optional[str] = None

    def with_stage_change(self, change: "LeadStageChange") -> "Lead":
        """
        Apply a stage change.

        Args:
            change: Fields written by a transition

        Returns:
            New Lead with only those fields replaced
        """
        if change.reminder_sent is None:
            return replace(
                self,
                current_stage_id=change.current_stage_id,
                stage_metadata=change.stage_metadata,
            )
        return replace(
            self,
            current_stage_id=change.current_stage_id,
            stage_metadata=change.stage_metadata,
            reminder_sent=change.reminder_sent,
        )


@dataclass(frozen=True)
class LeadStageChange:
    """Partial field set written by a successful transition."""

    current_stage_id: str
    stage_metadata: StageMetadata
    reminder_sent: Optional[bool] = None
