"""Stage transition DTOs."""

from datetime import date, datetime
from typing import Optional, Union

from pydantic import ConfigDict, Field

from app.application.dtos.base import DTO

MetadataInput = Union[bool, int, float, str, datetime, date, None]


class StageTransitionRequest(DTO):
    """Request to move a lead to a target stage."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "leadId": "lead_123",
                "targetStageId": "cl_quote_emailed",
                "metadataUpdate": {
                    "follow_up_date": "2025-01-20",
                    "carrier_name": "Travelers",
                    "quoted_premium": 4200,
                    "email_sent": True,
                },
            }
        },
    )

    lead_id: str = Field(alias="leadId", min_length=1)
    target_stage_id: str = Field(alias="targetStageId", min_length=1)
    metadata_update: dict[str, MetadataInput] = Field(
        default_factory=dict, alias="metadataUpdate"
    )


class AdvanceStageRequest(DTO):
    """Request to move a lead to the next stage by stage_order."""

    metadata_update: dict[str, MetadataInput] = Field(
        default_factory=dict, alias="metadataUpdate"
    )


class StageTransitionResponse(DTO):
    """Successful transition result."""

    success: bool = True
    stage_id: str = Field(alias="stageId")
    x_date: Optional[str] = Field(default=None, alias="xDate")
    warning: Optional[str] = None


class StageTransitionErrorResponse(DTO):
    """Rejected transition result."""

    error: str
    missing_fields: Optional[list[str]] = Field(default=None, alias="missingFields")
