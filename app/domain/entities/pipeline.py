"""Pipeline and pipeline stage entities."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from app.domain.stage_rules import TERMINAL_RULES, StageRule, resolve_stage_rule
from app.domain.value_objects.field_checklist import FieldChecklist


class InsuranceCategory(str, Enum):
    """Line of business."""

    PERSONAL = "personal"
    COMMERCIAL = "commercial"

    @classmethod
    def from_label(cls, label: Optional[str]) -> "InsuranceCategory":
        """
        Normalize a catalog label such as "Commercial Lines".

        Args:
            label: Free-text category

        Returns:
            InsuranceCategory (anything not commercial is personal)
        """
        if label and "commercial" in label.lower():
            return cls.COMMERCIAL
        return cls.PERSONAL


@dataclass(frozen=True)
class Pipeline:
    """Named, ordered stage catalog for one line of business."""

    id: str
    name: str
    category: str
    is_renewal: bool = False

    @property
    def insurance_category(self) -> InsuranceCategory:
        """Normalized category."""
        return InsuranceCategory.from_label(self.category)

    @property
    def is_commercial(self) -> bool:
        """Check if pipeline is commercial lines."""
        return self.insurance_category == InsuranceCategory.COMMERCIAL

    @property
    def is_commercial_renewal(self) -> bool:
        """Check if pipeline handles commercial renewals."""
        return self.is_commercial and self.is_renewal

    @property
    def is_commercial_new_business(self) -> bool:
        """Check if pipeline handles commercial new business."""
        return self.is_commercial and not self.is_renewal


@dataclass(frozen=True)
class PipelineStage:
    """Catalog entry for a stage (immutable reference data)."""

    id: str
    pipeline_id: str
    stage_name: str
    stage_order: int
    checklist: FieldChecklist = field(default_factory=FieldChecklist)
    rule_tag: Optional[str] = None

    def __post_init__(self) -> None:
        """Reject unknown rule tags when the catalog entry is built."""
        resolve_stage_rule(self.stage_name, self.rule_tag)

    @property
    def rule(self) -> Optional[StageRule]:
        """Business rule attached to this stage."""
        return resolve_stage_rule(self.stage_name, self.rule_tag)

    @property
    def is_terminal(self) -> bool:
        """Check if stage ends the pipeline."""
        return self.rule in TERMINAL_RULES
