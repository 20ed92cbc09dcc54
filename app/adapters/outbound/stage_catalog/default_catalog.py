"""Default pipelines and stage checklists for the agency."""

from app.domain.entities.pipeline import Pipeline, PipelineStage
from app.domain.value_objects.field_checklist import FieldChecklist

REQUIRED = {"required": True}
OPTIONAL = {"required": False}

PERSONAL_RENEWAL_PIPELINE_ID = "personal_renewal"
COMMERCIAL_PIPELINE_ID = "commercial"
COMMERCIAL_RENEWAL_PIPELINE_ID = "commercial_renewal"

DEFAULT_PIPELINES: list[Pipeline] = [
    Pipeline(
        id=PERSONAL_RENEWAL_PIPELINE_ID,
        name="Personal Lines Renewal",
        category="Personal Lines",
        is_renewal=True,
    ),
    Pipeline(
        id=COMMERCIAL_PIPELINE_ID,
        name="Commercial Lines",
        category="Commercial Lines",
        is_renewal=False,
    ),
    Pipeline(
        id=COMMERCIAL_RENEWAL_PIPELINE_ID,
        name="Commercial Lines Renewal",
        category="Commercial Lines",
        is_renewal=True,
    ),
]

_PAYMENT_FIELDS = {
    "follow_up_date": REQUIRED,
    "payment_method": REQUIRED,
    "payment_frequency": REQUIRED,
    "notes": OPTIONAL,
}

# (stage id, stage name, mandatory_fields) in stage_order
_CATALOG: dict[str, list[tuple[str, str, dict]]] = {
    PERSONAL_RENEWAL_PIPELINE_ID: [
        (
            "pr_quoting",
            "Quoting in Progress",
            {"ezlynx_updated": REQUIRED, "notes": OPTIONAL},
        ),
        (
            "pr_same_declaration",
            "Same Declaration Emailed",
            {"quoted_multiple_carriers": REQUIRED, "autopay_setup": REQUIRED, "notes": OPTIONAL},
        ),
        (
            "pr_completed_same",
            "Completed (Same)",
            {"paid_for_renewal": REQUIRED, "notes": OPTIONAL},
        ),
        (
            "pr_quote_emailed",
            "Quote Has Been Emailed",
            {
                "follow_up_date": REQUIRED,
                "quote_finalized": REQUIRED,
                "carrier_quote_sent": REQUIRED,
                "quoted_premium": REQUIRED,
                "savings_amount": REQUIRED,
                "notes": OPTIONAL,
            },
        ),
        ("pr_consent_letter", "Consent Letter Sent", dict(_PAYMENT_FIELDS)),
        (
            "pr_completed_switch",
            "Completed (Switch)",
            {
                "policy_number": REQUIRED,
                "bound_premium": REQUIRED,
                "expected_commission": REQUIRED,
                "docs_saved_ezlynx": REQUIRED,
                "docs_sent_to_client": REQUIRED,
                "cancelled_prev_carrier": REQUIRED,
                "notes": OPTIONAL,
            },
        ),
        (
            "pr_cancelled",
            "Cancelled",
            {"cancellation_reason": REQUIRED, "notes": OPTIONAL},
        ),
    ],
    COMMERCIAL_PIPELINE_ID: [
        (
            "cl_quoting",
            "Quoting in Progress",
            {
                "target_completion_date": REQUIRED,
                "documents_saved_filecenter": REQUIRED,
                "required_documents_received": REQUIRED,
                "notes": OPTIONAL,
            },
        ),
        (
            "cl_quote_emailed",
            "Quote Has Been Emailed",
            {
                "follow_up_date": REQUIRED,
                "finalized_quote": REQUIRED,
                "carrier_name": REQUIRED,
                "quoted_premium": REQUIRED,
                "agency_fees": REQUIRED,
                "notes": OPTIONAL,
            },
        ),
        ("cl_consent_letter", "Consent Letter Sent", dict(_PAYMENT_FIELDS)),
        (
            "cl_completed",
            "Completed",
            {
                "policy_number": REQUIRED,
                "bound_premium": REQUIRED,
                "expected_commission": REQUIRED,
                "agency_fees": REQUIRED,
                "policy_docs_saved": REQUIRED,
                "docs_sent_to_client": REQUIRED,
                "notes": OPTIONAL,
            },
        ),
        (
            "cl_did_not_bind",
            "Did Not Bind",
            {"reason_not_bound": REQUIRED, "notes": OPTIONAL},
        ),
    ],
    COMMERCIAL_RENEWAL_PIPELINE_ID: [
        (
            "cr_quoting",
            "Quoting in Progress",
            {
                "business_profile_updated_ezlynx": REQUIRED,
                "required_documents_received": REQUIRED,
                "notes": OPTIONAL,
            },
        ),
        (
            "cr_same_declaration",
            "Same Declaration Emailed",
            {
                "quoted_multiple_carriers": REQUIRED,
                "autopay_enabled": REQUIRED,
                "agency_fee": REQUIRED,
                "notes": OPTIONAL,
            },
        ),
        (
            "cr_completed_same",
            "Completed (Same)",
            {"policy_paid": REQUIRED, "notes": OPTIONAL},
        ),
        (
            "cr_quote_emailed",
            "Quote Has Been Emailed",
            {
                "follow_up_date": REQUIRED,
                "finalized_quote": REQUIRED,
                "carrier_name": REQUIRED,
                "quoted_premium": REQUIRED,
                "agency_fee": REQUIRED,
                "savings_amount": REQUIRED,
                "notes": OPTIONAL,
            },
        ),
        ("cr_consent_letter", "Consent Letter Sent", dict(_PAYMENT_FIELDS)),
        (
            "cr_completed_switch",
            "Completed (Switch)",
            {
                "policy_number": REQUIRED,
                "bound_premium": REQUIRED,
                "expected_commission": REQUIRED,
                "policy_docs_saved": REQUIRED,
                "docs_sent_to_client": REQUIRED,
                "cancelled_previous_carrier": REQUIRED,
                "notes": OPTIONAL,
            },
        ),
        ("cr_cancelled", "Cancelled", {"notes": OPTIONAL}),
    ],
}


def build_default_stages() -> list[PipelineStage]:
    """
    Build the default stage catalog.

    Returns:
        Stages of every default pipeline, ordered within each pipeline
    """
    stages: list[PipelineStage] = []
    for pipeline_id, entries in _CATALOG.items():
        for order, (stage_id, stage_name, mandatory_fields) in enumerate(entries, start=1):
            stages.append(
                PipelineStage(
                    id=stage_id,
                    pipeline_id=pipeline_id,
                    stage_name=stage_name,
                    stage_order=order,
                    checklist=FieldChecklist.from_config(mandatory_fields),
                )
            )
    return stages
