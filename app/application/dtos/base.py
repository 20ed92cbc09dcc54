"""Base DTO class."""

from pydantic import BaseModel, ConfigDict


class DTO(BaseModel):
    """
    Base class for application DTOs.

    DTOs are immutable and accept either the snake_case field name or its
    camelCase alias, so CRM clients may send {"leadId": ...} or {"lead_id": ...}.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)
