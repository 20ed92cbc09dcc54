"""
Business-rule tags for pipeline stages.

Rules are keyed by a stable tag rather than the display label. Catalog
entries may carry an explicit rule_tag; entries without one fall back to an
exact, case-sensitive match on stage_name.
"""

from enum import Enum
from typing import Optional


class StageRule(str, Enum):
    """Stable identifiers for stages that carry business rules."""

    QUOTING_IN_PROGRESS = "quoting_in_progress"
    QUOTE_EMAILED = "quote_emailed"
    COMPLETED = "completed"
    COMPLETED_SAME = "completed_same"
    COMPLETED_SWITCH = "completed_switch"
    DID_NOT_BIND = "did_not_bind"
    CANCELLED = "cancelled"


# Canonical catalog labels
STAGE_NAME_RULES: dict[str, StageRule] = {
    "Quoting in Progress": StageRule.QUOTING_IN_PROGRESS,
    "Quote Has Been Emailed": StageRule.QUOTE_EMAILED,
    "Completed": StageRule.COMPLETED,
    "Completed (Same)": StageRule.COMPLETED_SAME,
    "Completed (Switch)": StageRule.COMPLETED_SWITCH,
    "Did Not Bind": StageRule.DID_NOT_BIND,
    "Cancelled": StageRule.CANCELLED,
}

TERMINAL_RULES: frozenset[StageRule] = frozenset(
    [
        StageRule.COMPLETED,
        StageRule.COMPLETED_SAME,
        StageRule.COMPLETED_SWITCH,
        StageRule.DID_NOT_BIND,
        StageRule.CANCELLED,
    ]
)

# Commercial new business: x_date from effective_date + 1 year
NEW_BUSINESS_X_DATE_RULES: frozenset[StageRule] = frozenset(
    [StageRule.COMPLETED, StageRule.DID_NOT_BIND]
)

# Commercial renewal: x_date from the renewal_date on file
RENEWAL_X_DATE_RULES: frozenset[StageRule] = frozenset(
    [StageRule.COMPLETED_SAME, StageRule.COMPLETED_SWITCH, StageRule.CANCELLED]
)

_LOWERCASE_NAMES: dict[str, str] = {name.lower(): name for name in STAGE_NAME_RULES}


def resolve_stage_rule(stage_name: str, rule_tag: Optional[str] = None) -> Optional[StageRule]:
    """
    Resolve the business rule for a stage.

    Args:
        stage_name: Display label from the catalog
        rule_tag: Explicit tag from the catalog entry, if any

    Returns:
        StageRule, or None when the stage carries no rule

    Raises:
        ValueError: If rule_tag is set but unknown
    """
    if rule_tag:
        try:
            return StageRule(rule_tag)
        except ValueError as err:
            raise ValueError(f"Unknown stage rule tag: {rule_tag!r}") from err
    return STAGE_NAME_RULES.get(stage_name)


def drifted_rule_name(stage_name: str) -> Optional[str]:
    """
    Detect a label that differs from a rule name only by case or padding.

    Such a stage silently gets no rule, so callers should surface it.

    Args:
        stage_name: Display label from the catalog

    Returns:
        The canonical rule name it resembles, or None
    """
    if stage_name in STAGE_NAME_RULES:
        return None
    return _LOWERCASE_NAMES.get(stage_name.strip().lower())
