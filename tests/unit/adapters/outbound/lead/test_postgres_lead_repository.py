"""Unit tests for Postgres lead repository using SQLite in-memory."""

from datetime import date, datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from app.adapters.outbound.lead.models import LeadModel  # noqa: F401
from app.adapters.outbound.lead.postgres_lead_repository import PostgresLeadRepository
from app.adapters.outbound.stage_catalog.models import Base
from app.domain.entities.lead import Lead, LeadStageChange, PolicyFlow
from app.domain.entities.pipeline import InsuranceCategory
from app.domain.errors import LeadNotFound, LeadStoreError, LeadUpdateConflict, StoredDataError
from app.domain.value_objects.stage_metadata import StageMetadata

NOW = datetime(2025, 1, 20, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def sqlite_engine():
    """Create SQLite in-memory engine for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def repository(sqlite_engine, monkeypatch):
    """Create Postgres repository with SQLite in-memory database for testing."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=sqlite_engine)

    def get_test_db_session():
        return SessionLocal()

    monkeypatch.setattr(
        "app.adapters.outbound.lead.postgres_lead_repository.get_db_session",
        get_test_db_session,
    )

    return PostgresLeadRepository()


def make_lead(**overrides) -> Lead:
    """Build a commercial lead."""
    values = {
        "id": "lead_1",
        "pipeline_id": "commercial",
        "current_stage_id": "cl_quote_emailed",
        "insurance_category": InsuranceCategory.COMMERCIAL,
        "policy_flow": PolicyFlow.NEW,
        "effective_date": date(2024, 3, 15),
        "follow_up_date": NOW - timedelta(hours=2),
        "stage_metadata": StageMetadata({"email_sent": True, "carrier_name": "Travelers"}),
        "client_name": "Acme Roofing",
        "email": "owner@acme.example",
    }
    values.update(overrides)
    return Lead(**values)


@pytest.mark.asyncio
async def test_save_and_get_round_trip(repository):
    """Test that saving and reading a lead keeps every field."""
    lead = make_lead()

    await repository.save(lead)
    stored = await repository.get("lead_1")

    assert stored == lead
    assert stored.follow_up_date.tzinfo is not None


@pytest.mark.asyncio
async def test_get_unknown_lead_returns_none(repository):
    """Test that an unknown id returns None."""
    assert await repository.get("missing") is None


@pytest.mark.asyncio
async def test_apply_stage_change_writes_stage_metadata_and_reminder(repository):
    """Test a stage change replaces only the transition fields."""
    lead = make_lead(reminder_sent=True)
    await repository.save(lead)
    change = LeadStageChange(
        current_stage_id="cl_completed",
        stage_metadata=lead.stage_metadata.merge(
            {"policy_number": "CP-100", "x_date": "2025-01-14"}
        ),
        reminder_sent=False,
    )

    await repository.apply_stage_change("lead_1", change, expected=lead)

    stored = await repository.get("lead_1")
    assert stored.current_stage_id == "cl_completed"
    assert stored.stage_metadata.get("x_date") == "2025-01-14"
    assert stored.stage_metadata.get("carrier_name") == "Travelers"
    assert stored.reminder_sent is False
    assert stored.client_name == "Acme Roofing"


@pytest.mark.asyncio
async def test_apply_stage_change_detects_stale_read(repository):
    """Test a write based on an outdated read is refused."""
    lead = make_lead()
    await repository.save(lead)
    moved = LeadStageChange(
        current_stage_id="cl_consent_letter", stage_metadata=lead.stage_metadata
    )
    await repository.apply_stage_change("lead_1", moved, expected=lead)

    stale = LeadStageChange(current_stage_id="cl_did_not_bind", stage_metadata=lead.stage_metadata)
    with pytest.raises(LeadUpdateConflict):
        await repository.apply_stage_change("lead_1", stale, expected=lead)

    stored = await repository.get("lead_1")
    assert stored.current_stage_id == "cl_consent_letter"


@pytest.mark.asyncio
async def test_apply_stage_change_unknown_lead(repository):
    """Test a change for a missing lead raises LeadNotFound."""
    lead = make_lead()
    change = LeadStageChange(current_stage_id="cl_completed", stage_metadata=StageMetadata())

    with pytest.raises(LeadNotFound):
        await repository.apply_stage_change("lead_1", change, expected=lead)


@pytest.mark.asyncio
async def test_list_due_for_reminder_filters(repository):
    """Test only due, unreminded, emailed leads are listed."""
    await repository.save(make_lead(id="due"))
    await repository.save(make_lead(id="future", follow_up_date=NOW + timedelta(days=1)))
    await repository.save(make_lead(id="reminded", reminder_sent=True))
    await repository.save(
        make_lead(id="not_emailed", stage_metadata=StageMetadata({"email_sent": False}))
    )
    await repository.save(make_lead(id="no_follow_up", follow_up_date=None))

    leads = await repository.list_due_for_reminder(NOW)

    assert [lead.id for lead in leads] == ["due"]


@pytest.mark.asyncio
async def test_list_due_for_reminder_includes_follow_up_at_now(repository):
    """Test a follow-up date equal to now is due, one second later is not."""
    await repository.save(make_lead(id="at_now", follow_up_date=NOW))
    await repository.save(make_lead(id="just_after", follow_up_date=NOW + timedelta(seconds=1)))

    leads = await repository.list_due_for_reminder(NOW)

    assert [lead.id for lead in leads] == ["at_now"]


def insert_raw_lead(sqlite_engine, **columns) -> None:
    """Write a lead row directly, bypassing entity validation."""
    values = {
        "id": "lead_raw",
        "pipeline_id": "commercial",
        "current_stage_id": "cl_quote_emailed",
        "insurance_category": "commercial",
        "policy_flow": "new",
        "stage_metadata": {},
    }
    values.update(columns)
    db = sessionmaker(bind=sqlite_engine)()
    db.add(LeadModel(**values))
    db.commit()
    db.close()


@pytest.mark.asyncio
async def test_non_scalar_stored_metadata_raises_stored_data_error(repository, sqlite_engine):
    """Test a list value in stored metadata surfaces as a store error."""
    insert_raw_lead(sqlite_engine, stage_metadata={"carriers": ["A", "B"]})

    with pytest.raises(StoredDataError) as exc_info:
        await repository.get("lead_raw")

    assert isinstance(exc_info.value, LeadStoreError)
    assert isinstance(exc_info.value.__cause__, ValueError)
    assert exc_info.value.message == "Invalid stored lead data"


@pytest.mark.asyncio
async def test_unknown_stored_category_raises_stored_data_error(repository, sqlite_engine):
    """Test an unrecognized insurance category surfaces as a store error."""
    insert_raw_lead(sqlite_engine, insurance_category="marine")

    with pytest.raises(StoredDataError):
        await repository.get("lead_raw")


@pytest.mark.asyncio
async def test_mark_reminder_sent_is_conditional(repository):
    """Test the flag is flipped only once."""
    await repository.save(make_lead())

    assert await repository.mark_reminder_sent("lead_1") is True
    assert await repository.mark_reminder_sent("lead_1") is False
    stored = await repository.get("lead_1")
    assert stored.reminder_sent is True


@pytest.mark.asyncio
async def test_database_error_raises_store_error(monkeypatch):
    """Test SQLAlchemy failures surface as LeadStoreError."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    SessionLocal = sessionmaker(bind=engine)
    monkeypatch.setattr(
        "app.adapters.outbound.lead.postgres_lead_repository.get_db_session",
        lambda: SessionLocal(),
    )
    repository = PostgresLeadRepository()

    # No tables were created, so every query fails
    with pytest.raises(LeadStoreError) as exc_info:
        await repository.get("lead_1")

    assert isinstance(exc_info.value.__cause__, OperationalError)
    assert exc_info.value.message == "Failed to update stage"
