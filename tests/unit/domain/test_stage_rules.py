"""Unit tests for stage rule resolution."""

import pytest

from app.domain.entities.pipeline import InsuranceCategory, Pipeline, PipelineStage
from app.domain.stage_rules import StageRule, drifted_rule_name, resolve_stage_rule


def test_exact_stage_name_resolves_rule():
    """Test canonical labels map to their rule."""
    assert resolve_stage_rule("Quote Has Been Emailed") == StageRule.QUOTE_EMAILED
    assert resolve_stage_rule("Completed (Same)") == StageRule.COMPLETED_SAME
    assert resolve_stage_rule("Did Not Bind") == StageRule.DID_NOT_BIND


def test_stage_name_match_is_case_sensitive():
    """Test a label with different casing gets no rule."""
    assert resolve_stage_rule("quote has been emailed") is None
    assert resolve_stage_rule("Consent Letter Sent") is None


def test_rule_tag_wins_over_stage_name():
    """Test an explicit tag is used regardless of the label."""
    assert resolve_stage_rule("Quote sent to client", "quote_emailed") == StageRule.QUOTE_EMAILED
    assert resolve_stage_rule("Completed", "cancelled") == StageRule.CANCELLED


def test_unknown_rule_tag_raises():
    """Test catalog typos in rule tags are surfaced."""
    with pytest.raises(ValueError, match="Unknown stage rule tag"):
        resolve_stage_rule("Completed", "complete")


def test_stage_with_unknown_rule_tag_cannot_be_built():
    """Test a bad rule tag fails when the catalog entry is built, not on first use."""
    with pytest.raises(ValueError, match="Unknown stage rule tag"):
        PipelineStage(
            id="s1",
            pipeline_id="p",
            stage_name="Quote Has Been Emailed",
            stage_order=2,
            rule_tag="quote-emailed",
        )


def test_drifted_rule_name_detects_case_drift():
    """Test near-miss labels are reported with their canonical name."""
    assert drifted_rule_name("quote has been emailed") == "Quote Has Been Emailed"
    assert drifted_rule_name(" COMPLETED ") == "Completed"
    assert drifted_rule_name("Completed") is None
    assert drifted_rule_name("Consent Letter Sent") is None


def test_terminal_stages():
    """Test terminal detection follows the rule tag."""
    completed = PipelineStage(id="s1", pipeline_id="p", stage_name="Completed", stage_order=4)
    quoting = PipelineStage(
        id="s2", pipeline_id="p", stage_name="Quoting in Progress", stage_order=1
    )

    assert completed.is_terminal is True
    assert quoting.is_terminal is False


def test_pipeline_category_normalization():
    """Test catalog category labels normalize to personal or commercial."""
    commercial_renewal = Pipeline(
        id="cr", name="Commercial Lines Renewal", category="Commercial Lines", is_renewal=True
    )
    personal = Pipeline(id="pr", name="Personal Lines Renewal", category="Personal Lines")

    assert commercial_renewal.insurance_category == InsuranceCategory.COMMERCIAL
    assert commercial_renewal.is_commercial_renewal is True
    assert commercial_renewal.is_commercial_new_business is False
    assert personal.insurance_category == InsuranceCategory.PERSONAL
    assert personal.is_commercial is False
