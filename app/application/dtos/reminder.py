"""Follow-up reminder DTOs."""

from app.application.dtos.base import DTO


class ReminderSweepResult(DTO):
    """Outcome of one reminder sweep."""

    success: bool = True
    processed: int = 0
    sent: int = 0
    errors: int = 0
