"""List pipeline stages use case."""

from app.application.dtos.pipeline import PipelineStages, StageSummary
from app.application.ports.stage_catalog_repository import StageCatalogRepository
from app.domain.errors import PipelineNotFound


class ListPipelineStages:
    """Use case for the CSR stage picker."""

    def __init__(self, stage_catalog: StageCatalogRepository) -> None:
        """
        Initialize use case.

        Args:
            stage_catalog: Repository for pipelines and stages
        """
        self._stage_catalog = stage_catalog

    async def execute(self, pipeline_id: str) -> PipelineStages:
        """
        List a pipeline's stages in stage_order.

        Args:
            pipeline_id: Pipeline identifier

        Returns:
            PipelineStages DTO

        Raises:
            PipelineNotFound: If the pipeline does not exist
        """
        pipeline = await self._stage_catalog.get_pipeline(pipeline_id)
        if pipeline is None:
            raise PipelineNotFound(pipeline_id)

        stages = await self._stage_catalog.list_stages(pipeline_id)
        return PipelineStages(
            pipeline_id=pipeline.id,
            name=pipeline.name,
            category=pipeline.category,
            is_renewal=pipeline.is_renewal,
            stages=[
                StageSummary(
                    id=stage.id,
                    stage_name=stage.stage_name,
                    stage_order=stage.stage_order,
                    required_fields=stage.checklist.required_fields,
                    optional_fields=[
                        name
                        for name, required in stage.checklist.fields.items()
                        if not required
                    ],
                    is_terminal=stage.is_terminal,
                    rule=stage.rule.value if stage.rule else None,
                )
                for stage in stages
            ],
        )
