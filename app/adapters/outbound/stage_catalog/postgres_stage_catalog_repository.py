"""Postgres-backed stage catalog repository adapter."""

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.application.ports.stage_catalog_repository import StageCatalogRepository
from app.domain.entities.pipeline import Pipeline, PipelineStage
from app.domain.errors import LeadStoreError, StoredDataError
from app.domain.value_objects.field_checklist import FieldChecklist
from app.infrastructure.db import get_db_session
from app.infrastructure.logging.logger import logger

from .models import PipelineModel, PipelineStageModel


class PostgresStageCatalogRepository(StageCatalogRepository):
    """Postgres implementation of the stage catalog."""

    def _stage_to_entity(self, model: PipelineStageModel) -> PipelineStage:
        """
        Convert PipelineStageModel to PipelineStage entity.

        Args:
            model: SQLAlchemy model instance

        Returns:
            PipelineStage entity with a normalized checklist

        Raises:
            StoredDataError: If mandatory_fields or rule_tag do not decode
        """
        try:
            return PipelineStage(
                id=model.id,
                pipeline_id=model.pipeline_id,
                stage_name=model.stage_name,
                stage_order=model.stage_order,
                checklist=FieldChecklist.from_config(model.mandatory_fields),
                rule_tag=model.rule_tag,
            )
        except ValueError as e:
            logger.error(f"Invalid catalog row for stage {model.id}: {str(e)}")
            raise StoredDataError("Invalid stage configuration") from e

    def _pipeline_to_entity(self, model: PipelineModel) -> Pipeline:
        """Convert PipelineModel to Pipeline entity."""
        return Pipeline(
            id=model.id,
            name=model.name,
            category=model.category,
            is_renewal=bool(model.is_renewal),
        )

    async def get_stage(self, stage_id: str) -> Optional[PipelineStage]:
        """
        Get a stage by id.

        Args:
            stage_id: Stage identifier

        Returns:
            PipelineStage, or None if not found

        Raises:
            LeadStoreError: On database failure
        """
        db: Session = get_db_session()
        try:
            model = db.query(PipelineStageModel).filter(PipelineStageModel.id == stage_id).first()
            if model is None:
                return None
            return self._stage_to_entity(model)
        except SQLAlchemyError as e:
            logger.error(f"Database error while getting stage {stage_id}: {str(e)}")
            raise LeadStoreError() from e
        finally:
            db.close()

    async def get_pipeline(self, pipeline_id: str) -> Optional[Pipeline]:
        """
        Get a pipeline by id.

        Args:
            pipeline_id: Pipeline identifier

        Returns:
            Pipeline, or None if not found

        Raises:
            LeadStoreError: On database failure
        """
        db: Session = get_db_session()
        try:
            model = db.query(PipelineModel).filter(PipelineModel.id == pipeline_id).first()
            if model is None:
                return None
            return self._pipeline_to_entity(model)
        except SQLAlchemyError as e:
            logger.error(f"Database error while getting pipeline {pipeline_id}: {str(e)}")
            raise LeadStoreError() from e
        finally:
            db.close()

    async def list_stages(self, pipeline_id: str) -> list[PipelineStage]:
        """
        List a pipeline's stages sorted by stage_order.

        Args:
            pipeline_id: Pipeline identifier

        Returns:
            Ordered stages (empty if the pipeline has none)

        Raises:
            LeadStoreError: On database failure
        """
        db: Session = get_db_session()
        try:
            models = (
                db.query(PipelineStageModel)
                .filter(PipelineStageModel.pipeline_id == pipeline_id)
                .order_by(PipelineStageModel.stage_order)
                .all()
            )
            return [self._stage_to_entity(model) for model in models]
        except SQLAlchemyError as e:
            logger.error(f"Database error while listing stages for {pipeline_id}: {str(e)}")
            raise LeadStoreError() from e
        finally:
            db.close()
