"""Dependency injection factory functions."""

from typing import Optional

from app.adapters.outbound.idempotency.noop_idempotency_store import NoOpIdempotencyStore
from app.adapters.outbound.idempotency.redis_idempotency_store import RedisIdempotencyStore
from app.adapters.outbound.lead import (
    InMemoryLeadRepository,
    PostgresLeadRepository,
)
from app.adapters.outbound.notification import LoggingEmailSender, SMTPEmailSender
from app.adapters.outbound.stage_catalog import (
    InMemoryStageCatalogRepository,
    PostgresStageCatalogRepository,
)
from app.application.ports.email_sender import EmailSender
from app.application.ports.idempotency_store import IdempotencyStore
from app.application.ports.lead_repository import LeadRepository
from app.application.ports.stage_catalog_repository import StageCatalogRepository
from app.application.use_cases.calculate_x_date import CalculateXDate
from app.application.use_cases.list_pipeline_stages import ListPipelineStages
from app.application.use_cases.send_follow_up_reminders import SendFollowUpReminders
from app.application.use_cases.transition_lead_stage import TransitionLeadStage
from app.infrastructure.config.settings import settings
from app.infrastructure.logging.logger import log_transition


def create_lead_repository() -> LeadRepository:
    """
    Factory function to create lead repository.

    Returns:
        LeadRepository instance
    """
    if settings.lead_repository == "postgres":
        if not settings.database_url:
            raise ValueError("DATABASE_URL is required when LEAD_REPOSITORY=postgres")
        return PostgresLeadRepository()
    else:
        return InMemoryLeadRepository()


def create_stage_catalog_repository() -> StageCatalogRepository:
    """
    Factory function to create stage catalog repository.

    Returns:
        StageCatalogRepository instance
    """
    if settings.stage_catalog_repository == "postgres":
        if not settings.database_url:
            raise ValueError("DATABASE_URL is required when STAGE_CATALOG_REPOSITORY=postgres")
        return PostgresStageCatalogRepository()
    else:
        return InMemoryStageCatalogRepository()


def create_email_sender() -> EmailSender:
    """
    Factory function to create email sender.

    Returns:
        EmailSender instance (SMTP or logging)
    """
    if settings.email_sender == "smtp":
        return SMTPEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username or None,
            password=settings.smtp_password or None,
            use_tls=settings.smtp_use_tls,
            from_email=settings.sender_email or "noreply@example.com",
        )
    return LoggingEmailSender()


def create_idempotency_store() -> IdempotencyStore:
    """
    Factory function to create idempotency store.

    Returns:
        IdempotencyStore instance (Redis or NoOp)
    """
    if not settings.transition_idempotency_enabled:
        return NoOpIdempotencyStore()

    if not settings.redis_url:
        # Idempotency requested but Redis is not configured: replay is disabled
        return NoOpIdempotencyStore()

    return RedisIdempotencyStore(settings.redis_url)


def _logger_func(lead_id, request_id, component, **kwargs):
    log_transition(lead_id, request_id, component, **kwargs)


def create_transition_lead_stage_use_case(
    lead_repository: Optional[LeadRepository] = None,
    stage_catalog: Optional[StageCatalogRepository] = None,
) -> TransitionLeadStage:
    """
    Factory function to create TransitionLeadStage with dependencies.

    Args:
        lead_repository: Shared lead repository (created if omitted)
        stage_catalog: Shared stage catalog (created if omitted)

    Returns:
        TransitionLeadStage instance
    """
    email_sender = None
    if settings.transition_notifications_enabled:
        email_sender = create_email_sender()

    return TransitionLeadStage(
        lead_repository or create_lead_repository(),
        stage_catalog or create_stage_catalog_repository(),
        x_date_calculator=CalculateXDate(settings.x_date_lead_days),
        email_sender=email_sender,
        default_sender=settings.sender_email or None,
        admin_email=settings.admin_notification_email or None,
        logger=_logger_func,
    )


def create_send_follow_up_reminders_use_case(
    lead_repository: Optional[LeadRepository] = None,
) -> SendFollowUpReminders:
    """
    Factory function to create SendFollowUpReminders with dependencies.

    Args:
        lead_repository: Shared lead repository (created if omitted)

    Returns:
        SendFollowUpReminders instance
    """
    return SendFollowUpReminders(
        lead_repository or create_lead_repository(),
        create_email_sender(),
        site_url=settings.site_url,
        default_sender=settings.sender_email or None,
        admin_email=settings.admin_notification_email or None,
        logger=_logger_func,
    )


def create_list_pipeline_stages_use_case(
    stage_catalog: Optional[StageCatalogRepository] = None,
) -> ListPipelineStages:
    """
    Factory function to create ListPipelineStages.

    Args:
        stage_catalog: Shared stage catalog (created if omitted)

    Returns:
        ListPipelineStages instance
    """
    return ListPipelineStages(stage_catalog or create_stage_catalog_repository())
