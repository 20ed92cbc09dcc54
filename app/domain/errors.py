"""Domain errors for pipeline stage transitions."""

from typing import Optional


class StageTransitionError(Exception):
    """Base class for stage transition errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TransitionRejected(StageTransitionError):
    """Transition failed validation (client-fixable input error)."""

    def __init__(self, message: str, missing_fields: Optional[list[str]] = None) -> None:
        """
        Initialize rejection.

        Args:
            message: Human-readable reason shown to the CSR
            missing_fields: Every required checklist field that is still empty
        """
        super().__init__(message)
        self.missing_fields = missing_fields or []


class LeadNotFound(StageTransitionError):
    """Lead id does not exist."""

    def __init__(self, lead_id: str) -> None:
        super().__init__("Invalid lead")
        self.lead_id = lead_id


class StageNotFound(StageTransitionError):
    """Stage id does not exist or belongs to another pipeline."""

    def __init__(self, stage_id: str) -> None:
        super().__init__("Invalid stage")
        self.stage_id = stage_id


class PipelineNotFound(StageTransitionError):
    """Pipeline id does not exist."""

    def __init__(self, pipeline_id: str) -> None:
        super().__init__("Invalid pipeline")
        self.pipeline_id = pipeline_id


class LeadUpdateConflict(StageTransitionError):
    """Lead changed between read and write; the request can be retried."""

    def __init__(self, lead_id: str) -> None:
        super().__init__("Lead was modified concurrently, please retry")
        self.lead_id = lead_id


class LeadStoreError(StageTransitionError):
    """Record store unreachable or write failed."""

    def __init__(self, message: str = "Failed to update stage") -> None:
        super().__init__(message)


class StoredDataError(LeadStoreError):
    """Stored lead or catalog row does not decode into a valid entity."""

    def __init__(self, message: str = "Stored data is invalid") -> None:
        super().__init__(message)
