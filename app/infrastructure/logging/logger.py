"""Structured logger for observability."""

import logging
from typing import Any

# Configure root logger with JSON-like structured format
_logger = logging.getLogger("insurance_crm_pipeline")
_logger.setLevel(logging.INFO)

# Create console handler if not exists
if not _logger.handlers:
    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO)
    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    _logger.addHandler(handler)


def log_transition(
    lead_id: str,
    request_id: str,
    component: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """
    Log structured event for a lead request.

    Args:
        lead_id: Lead identifier
        request_id: Request identifier (UUID string)
        component: Component name (e.g., 'http', 'stage_engine', 'reminder')
        level: Log level (default: INFO)
        **kwargs: Additional structured fields to log
    """
    fields = {
        "lead_id": lead_id,
        "request_id": request_id,
        "component": component,
    }
    fields.update(kwargs)

    # Format as key=value pairs for readability
    log_parts = [f"{k}={v!r}" for k, v in fields.items()]
    log_message = " | ".join(log_parts)

    _logger.log(level, log_message)


def log_reminder_sweep(
    request_id: str,
    processed: int,
    sent: int,
    errors: int,
    **kwargs: Any,
) -> None:
    """
    Log reminder sweep totals.

    Args:
        request_id: Request identifier
        processed: Leads examined
        sent: Reminders sent
        errors: Per-lead failures
        **kwargs: Additional fields
    """
    log_transition(
        lead_id="*",
        request_id=request_id,
        component="reminder_sweep",
        level=logging.WARNING if errors else logging.INFO,
        processed=processed,
        sent=sent,
        errors=errors,
        **kwargs,
    )


# Export logger instance for backward compatibility
logger = _logger
