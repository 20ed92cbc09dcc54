"""SQLAlchemy ORM models for the pipeline stage catalog."""

from sqlalchemy import JSON, Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class PipelineModel(Base):
    """SQLAlchemy model for pipelines table."""

    __tablename__ = "pipelines"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False)  # e.g., "Personal Lines", "Commercial Lines"
    is_renewal = Column(Boolean, nullable=False, default=False)


class PipelineStageModel(Base):
    """SQLAlchemy model for pipeline_stages table."""

    __tablename__ = "pipeline_stages"

    id = Column(String, primary_key=True, index=True)
    pipeline_id = Column(String, ForeignKey("pipelines.id"), nullable=False, index=True)
    stage_name = Column(String, nullable=False)
    stage_order = Column(Integer, nullable=False)
    # List of names or map of name -> {"required": bool}
    mandatory_fields = Column(JSON, nullable=True)
    rule_tag = Column(String, nullable=True)
