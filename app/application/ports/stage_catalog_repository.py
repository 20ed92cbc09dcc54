"""Stage catalog repository port."""

from abc import ABC, abstractmethod
from typing import Optional

from app.domain.entities.pipeline import Pipeline, PipelineStage


class StageCatalogRepository(ABC):
    """Port interface for pipeline and stage reference data."""

    @abstractmethod
    async def get_stage(self, stage_id: str) -> Optional[PipelineStage]:
        """
        Get a stage by id.

        Args:
            stage_id: Stage identifier

        Returns:
            PipelineStage, or None if not found
        """
        pass

    @abstractmethod
    async def get_pipeline(self, pipeline_id: str) -> Optional[Pipeline]:
        """
        Get a pipeline by id.

        Args:
            pipeline_id: Pipeline identifier

        Returns:
            Pipeline, or None if not found
        """
        pass

    @abstractmethod
    async def list_stages(self, pipeline_id: str) -> list[PipelineStage]:
        """
        List the stages of a pipeline.

        Args:
            pipeline_id: Pipeline identifier

        Returns:
            Stages sorted by stage_order
        """
        pass
