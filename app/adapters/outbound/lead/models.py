"""SQLAlchemy ORM models for leads."""

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, Date, DateTime, ForeignKey, String

# Import Base from stage_catalog models to reuse the same declarative base
from app.adapters.outbound.stage_catalog.models import Base


class LeadModel(Base):
    """SQLAlchemy model for leads table."""

    __tablename__ = "leads"

    id = Column(String, primary_key=True, index=True)
    pipeline_id = Column(String, ForeignKey("pipelines.id"), nullable=False, index=True)
    current_stage_id = Column(String, ForeignKey("pipeline_stages.id"), nullable=False)
    insurance_category = Column(String, nullable=False, default="personal")
    policy_flow = Column(String, nullable=False, default="new")  # "new" or "renewal"
    effective_date = Column(Date, nullable=True)
    renewal_date = Column(Date, nullable=True)
    follow_up_date = Column(DateTime(timezone=True), nullable=True)
    target_completion_date = Column(Date, nullable=True)
    stage_metadata = Column(JSON, nullable=False, default=dict)
    reminder_sent = Column(Boolean, nullable=False, default=False)
    client_name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    assigned_csr_email = Column(String, nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
