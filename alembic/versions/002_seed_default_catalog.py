"""Seed the default pipelines and stage checklists

Revision ID: 002
Revises: 001
Create Date: 2025-01-06 00:10:00.000000

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

pipelines_table = sa.table(
    "pipelines",
    sa.column("id", sa.String),
    sa.column("name", sa.String),
    sa.column("category", sa.String),
    sa.column("is_renewal", sa.Boolean),
)

pipeline_stages_table = sa.table(
    "pipeline_stages",
    sa.column("id", sa.String),
    sa.column("pipeline_id", sa.String),
    sa.column("stage_name", sa.String),
    sa.column("stage_order", sa.Integer),
    sa.column("mandatory_fields", sa.JSON),
    sa.column("rule_tag", sa.String),
)

PIPELINE_ROWS = [
    {
        "id": "personal_renewal",
        "name": "Personal Lines Renewal",
        "category": "Personal Lines",
        "is_renewal": True,
    },
    {
        "id": "commercial",
        "name": "Commercial Lines",
        "category": "Commercial Lines",
        "is_renewal": False,
    },
    {
        "id": "commercial_renewal",
        "name": "Commercial Lines Renewal",
        "category": "Commercial Lines",
        "is_renewal": True,
    },
]


def _checklist(*required: str) -> dict:
    """Map form of a checklist; every stage also takes optional notes."""
    fields = {name: {"required": True} for name in required}
    fields["notes"] = {"required": False}
    return fields


_PAYMENT = ("follow_up_date", "payment_method", "payment_frequency")

# (id, pipeline_id, stage_name, stage_order, mandatory_fields, rule_tag)
_STAGES = [
    ("pr_quoting", "personal_renewal", "Quoting in Progress", 1,
     _checklist("ezlynx_updated"), "quoting_in_progress"),
    ("pr_same_declaration", "personal_renewal", "Same Declaration Emailed", 2,
     _checklist("quoted_multiple_carriers", "autopay_setup"), None),
    ("pr_completed_same", "personal_renewal", "Completed (Same)", 3,
     _checklist("paid_for_renewal"), "completed_same"),
    ("pr_quote_emailed", "personal_renewal", "Quote Has Been Emailed", 4,
     _checklist("follow_up_date", "quote_finalized", "carrier_quote_sent", "quoted_premium",
                "savings_amount"), "quote_emailed"),
    ("pr_consent_letter", "personal_renewal", "Consent Letter Sent", 5,
     _checklist(*_PAYMENT), None),
    ("pr_completed_switch", "personal_renewal", "Completed (Switch)", 6,
     _checklist("policy_number", "bound_premium", "expected_commission", "docs_saved_ezlynx",
                "docs_sent_to_client", "cancelled_prev_carrier"), "completed_switch"),
    ("pr_cancelled", "personal_renewal", "Cancelled", 7,
     _checklist("cancellation_reason"), "cancelled"),
    ("cl_quoting", "commercial", "Quoting in Progress", 1,
     _checklist("target_completion_date", "documents_saved_filecenter",
                "required_documents_received"), "quoting_in_progress"),
    ("cl_quote_emailed", "commercial", "Quote Has Been Emailed", 2,
     _checklist("follow_up_date", "finalized_quote", "carrier_name", "quoted_premium",
                "agency_fees"), "quote_emailed"),
    ("cl_consent_letter", "commercial", "Consent Letter Sent", 3,
     _checklist(*_PAYMENT), None),
    ("cl_completed", "commercial", "Completed", 4,
     _checklist("policy_number", "bound_premium", "expected_commission", "agency_fees",
                "policy_docs_saved", "docs_sent_to_client"), "completed"),
    ("cl_did_not_bind", "commercial", "Did Not Bind", 5,
     _checklist("reason_not_bound"), "did_not_bind"),
    ("cr_quoting", "commercial_renewal", "Quoting in Progress", 1,
     _checklist("business_profile_updated_ezlynx", "required_documents_received"),
     "quoting_in_progress"),
    ("cr_same_declaration", "commercial_renewal", "Same Declaration Emailed", 2,
     _checklist("quoted_multiple_carriers", "autopay_enabled", "agency_fee"), None),
    ("cr_completed_same", "commercial_renewal", "Completed (Same)", 3,
     _checklist("policy_paid"), "completed_same"),
    ("cr_quote_emailed", "commercial_renewal", "Quote Has Been Emailed", 4,
     _checklist("follow_up_date", "finalized_quote", "carrier_name", "quoted_premium",
                "agency_fee", "savings_amount"), "quote_emailed"),
    ("cr_consent_letter", "commercial_renewal", "Consent Letter Sent", 5,
     _checklist(*_PAYMENT), None),
    ("cr_completed_switch", "commercial_renewal", "Completed (Switch)", 6,
     _checklist("policy_number", "bound_premium", "expected_commission", "policy_docs_saved",
                "docs_sent_to_client", "cancelled_previous_carrier"), "completed_switch"),
    ("cr_cancelled", "commercial_renewal", "Cancelled", 7,
     _checklist(), "cancelled"),
]

# Stored rows carry explicit rule tags so renaming a label keeps its rule
STAGE_ROWS = [
    {
        "id": stage_id,
        "pipeline_id": pipeline_id,
        "stage_name": stage_name,
        "stage_order": stage_order,
        "mandatory_fields": mandatory_fields,
        "rule_tag": rule_tag,
    }
    for stage_id, pipeline_id, stage_name, stage_order, mandatory_fields, rule_tag in _STAGES
]


def upgrade() -> None:
    op.bulk_insert(pipelines_table, PIPELINE_ROWS)
    op.bulk_insert(pipeline_stages_table, STAGE_ROWS)


def downgrade() -> None:
    pipeline_ids = [row["id"] for row in PIPELINE_ROWS]
    op.execute(
        pipeline_stages_table.delete().where(
            pipeline_stages_table.c.pipeline_id.in_(pipeline_ids)
        )
    )
    op.execute(pipelines_table.delete().where(pipelines_table.c.id.in_(pipeline_ids)))
