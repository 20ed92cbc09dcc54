"""In-memory stage catalog repository adapter."""

from typing import Optional

from app.adapters.outbound.stage_catalog.default_catalog import (
    DEFAULT_PIPELINES,
    build_default_stages,
)
from app.application.ports.stage_catalog_repository import StageCatalogRepository
from app.domain.entities.pipeline import Pipeline, PipelineStage


class InMemoryStageCatalogRepository(StageCatalogRepository):
    """In-memory implementation of the stage catalog, seeded with the default pipelines."""

    def __init__(
        self,
        pipelines: Optional[list[Pipeline]] = None,
        stages: Optional[list[PipelineStage]] = None,
    ) -> None:
        """
        Initialize in-memory catalog.

        Args:
            pipelines: Pipelines to serve (defaults to the agency's pipelines)
            stages: Stages to serve (defaults to the agency's stages)
        """
        if pipelines is None:
            pipelines = DEFAULT_PIPELINES
        if stages is None:
            stages = build_default_stages()
        self._pipelines: dict[str, Pipeline] = {p.id: p for p in pipelines}
        self._stages: dict[str, PipelineStage] = {s.id: s for s in stages}

    async def get_stage(self, stage_id: str) -> Optional[PipelineStage]:
        """Get a stage by id."""
        return self._stages.get(stage_id)

    async def get_pipeline(self, pipeline_id: str) -> Optional[Pipeline]:
        """Get a pipeline by id."""
        return self._pipelines.get(pipeline_id)

    async def list_stages(self, pipeline_id: str) -> list[PipelineStage]:
        """List a pipeline's stages sorted by stage_order."""
        stages = [s for s in self._stages.values() if s.pipeline_id == pipeline_id]
        return sorted(stages, key=lambda s: s.stage_order)
