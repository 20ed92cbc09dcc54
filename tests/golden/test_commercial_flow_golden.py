"""Golden tests for full pipeline walks to prevent regressions."""

from datetime import date

import pytest

from app.adapters.outbound.lead.lead_repository import InMemoryLeadRepository
from app.adapters.outbound.notification.logging_email_sender import LoggingEmailSender
from app.adapters.outbound.stage_catalog.in_memory_stage_catalog_repository import (
    InMemoryStageCatalogRepository,
)
from app.application.dtos.stage_transition import StageTransitionRequest
from app.application.use_cases.transition_lead_stage import TransitionLeadStage
from app.domain.entities.lead import Lead, PolicyFlow
from app.domain.entities.pipeline import InsuranceCategory
from app.domain.errors import TransitionRejected


@pytest.fixture
def lead_repository():
    """Create in-memory lead repository."""
    return InMemoryLeadRepository()


@pytest.fixture
def email_sender():
    """Create recording email sender."""
    return LoggingEmailSender()


@pytest.fixture
def use_case(lead_repository, email_sender):
    """Create the stage engine with notifications and a fixed clock."""
    return TransitionLeadStage(
        lead_repository,
        InMemoryStageCatalogRepository(),
        email_sender=email_sender,
        default_sender="office@agency.example",
        admin_email="admin@agency.example",
        today=lambda: date(2025, 1, 10),
    )


@pytest.mark.asyncio
async def test_commercial_new_business_golden_flow(use_case, lead_repository, email_sender):
    """Test a commercial lead from quoting to bound policy."""
    await lead_repository.save(
        Lead(
            id="golden_cl",
            pipeline_id="commercial",
            current_stage_id="cl_quoting",
            insurance_category=InsuranceCategory.COMMERCIAL,
            policy_flow=PolicyFlow.NEW,
            effective_date=date(2024, 3, 15),
            reminder_sent=True,
            client_name="Acme Roofing",
        )
    )

    # Quoting: documents gate and target date
    response = await use_case.execute(
        StageTransitionRequest(
            lead_id="golden_cl",
            target_stage_id="cl_quoting",
            metadata_update={
                "target_completion_date": "2025-01-31",
                "documents_saved_filecenter": True,
                "required_documents_received": True,
            },
        )
    )
    assert response.stage_id == "cl_quoting"
    assert response.x_date is None

    # Quote emailed
    response = await use_case.advance(
        "golden_cl",
        {
            "email_sent": True,
            "follow_up_date": "2025-01-20",
            "finalized_quote": "Yes",
            "carrier_name": "Travelers",
            "quoted_premium": 4200,
            "agency_fees": 150,
        },
    )
    assert response.stage_id == "cl_quote_emailed"

    # Consent letter reuses the stored follow-up date
    response = await use_case.advance(
        "golden_cl",
        {"payment_method": "ACH", "payment_frequency": "Monthly"},
    )
    assert response.stage_id == "cl_consent_letter"

    # Completed
    response = await use_case.advance(
        "golden_cl",
        {
            "policy_number": "CP-100",
            "bound_premium": 4100,
            "expected_commission": 410,
            "policy_docs_saved": True,
            "docs_sent_to_client": True,
        },
    )
    assert response.stage_id == "cl_completed"
    assert response.x_date == "2025-01-14"
    assert response.warning is None

    stored = await lead_repository.get("golden_cl")
    assert stored.current_stage_id == "cl_completed"
    assert stored.reminder_sent is False
    assert stored.stage_metadata.to_json_dict() == {
        "target_completion_date": "2025-01-31",
        "documents_saved_filecenter": True,
        "required_documents_received": True,
        "email_sent": True,
        "follow_up_date": "2025-01-20",
        "finalized_quote": "Yes",
        "carrier_name": "Travelers",
        "quoted_premium": 4200,
        "agency_fees": 150,
        "payment_method": "ACH",
        "payment_frequency": "Monthly",
        "policy_number": "CP-100",
        "bound_premium": 4100,
        "expected_commission": 410,
        "policy_docs_saved": True,
        "docs_sent_to_client": True,
        "x_date": "2025-01-14",
    }

    with pytest.raises(TransitionRejected, match="This is the final stage"):
        await use_case.advance("golden_cl")

    assert [subject for _, subject, _ in email_sender.sent] == [
        "Acme Roofing moved to Quoting in Progress",
        "Acme Roofing moved to Quote Has Been Emailed",
        "Acme Roofing moved to Consent Letter Sent",
        "Acme Roofing moved to Completed",
    ]
    assert email_sender.sent[0][0] == ["office@agency.example", "admin@agency.example"]


@pytest.mark.asyncio
async def test_commercial_renewal_switch_golden_flow(use_case, lead_repository):
    """Test a commercial renewal that switches carriers."""
    await lead_repository.save(
        Lead(
            id="golden_cr",
            pipeline_id="commercial_renewal",
            current_stage_id="cr_quoting",
            insurance_category=InsuranceCategory.COMMERCIAL,
            policy_flow=PolicyFlow.RENEWAL,
            renewal_date=date(2025, 6, 1),
            client_name="Bayside Bakery",
        )
    )

    steps = [
        (
            "cr_quoting",
            {"business_profile_updated_ezlynx": "Yes", "required_documents_received": True},
        ),
        (
            "cr_quote_emailed",
            {
                "email_sent": True,
                "follow_up_date": "2025-02-01",
                "finalized_quote": "Yes",
                "carrier_name": "Hartford",
                "quoted_premium": 3900,
                "agency_fee": 100,
                "savings_amount": 0,
            },
        ),
        ("cr_consent_letter", {"payment_method": "Card", "payment_frequency": "Annual"}),
        (
            "cr_completed_switch",
            {
                "policy_number": "HF-200",
                "bound_premium": 3900,
                "expected_commission": 390,
                "policy_docs_saved": True,
                "docs_sent_to_client": True,
                "cancelled_previous_carrier": True,
            },
        ),
    ]

    responses = []
    for stage_id, update in steps:
        responses.append(
            await use_case.execute(
                StageTransitionRequest(
                    lead_id="golden_cr", target_stage_id=stage_id, metadata_update=update
                )
            )
        )

    assert [r.x_date for r in responses] == [None, None, None, "2025-04-02"]
    stored = await lead_repository.get("golden_cr")
    assert stored.current_stage_id == "cr_completed_switch"
    assert stored.stage_metadata.get("x_date") == "2025-04-02"
    assert stored.stage_metadata.get("savings_amount") == 0
