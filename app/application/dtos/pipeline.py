"""Pipeline catalog DTOs."""

from typing import Optional

from app.application.dtos.base import DTO


class StageSummary(DTO):
    """Stage as shown in a CSR stage picker."""

    id: str
    stage_name: str
    stage_order: int
    required_fields: list[str]
    optional_fields: list[str]
    is_terminal: bool
    rule: Optional[str] = None


class PipelineStages(DTO):
    """Pipeline with its ordered stages."""

    pipeline_id: str
    name: str
    category: str
    is_renewal: bool
    stages: list[StageSummary]
