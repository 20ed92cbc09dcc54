"""Transition lead stage use case (pipeline stage engine)."""

import html
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Optional

from app.application.dtos.stage_transition import StageTransitionRequest, StageTransitionResponse
from app.application.ports.email_sender import EmailDeliveryError, EmailSender
from app.application.ports.lead_repository import LeadRepository
from app.application.ports.stage_catalog_repository import StageCatalogRepository
from app.application.use_cases.calculate_x_date import CalculateXDate
from app.application.use_cases.notification_recipients import resolve_recipients
from app.domain.entities.lead import Lead, LeadStageChange
from app.domain.entities.pipeline import Pipeline, PipelineStage
from app.domain.errors import (
    LeadNotFound,
    PipelineNotFound,
    StageNotFound,
    TransitionRejected,
)
from app.domain.stage_rules import (
    NEW_BUSINESS_X_DATE_RULES,
    RENEWAL_X_DATE_RULES,
    StageRule,
    drifted_rule_name,
)
from app.domain.value_objects.calendar_date import to_calendar_date
from app.domain.value_objects.stage_metadata import StageMetadata

MISSING_FIELDS_MESSAGE = "Missing required checklist fields"
BACKDATED_MESSAGE = "Backdated target completion date is not allowed"
INVALID_DATE_MESSAGE = "Target completion date is not a valid date"
EMAIL_NOT_SENT_MESSAGE = "Initial email must be sent before moving to this stage"
DOCUMENTS_MISSING_MESSAGE = "You must receive all required documents before proceeding"
RENEWAL_DATE_MISSING_MESSAGE = "Renewal Date is missing. Cannot calculate X-Date."
FINAL_STAGE_MESSAGE = "This is the final stage"
TERMINAL_STAGE_MESSAGE = "Lead is in a final stage and cannot be moved"


@dataclass(frozen=True)
class StageTransitionPlan:
    """Validated outcome of a transition, ready to be committed."""

    change: LeadStageChange
    x_date: Optional[str] = None


class TransitionLeadStage:
    """
    Use case for moving a lead between pipeline stages.

    Validation runs completely before the single write: checklist, target
    completion date, business-rule gate, then X-Date derivation. Any failure
    raises TransitionRejected and leaves the stored lead untouched.
    """

    def __init__(
        self,
        lead_repository: LeadRepository,
        stage_catalog: StageCatalogRepository,
        x_date_calculator: Optional[CalculateXDate] = None,
        email_sender: Optional[EmailSender] = None,
        default_sender: Optional[str] = None,
        admin_email: Optional[str] = None,
        today: Callable[[], date] = date.today,
        logger: Optional[Callable[..., None]] = None,
    ) -> None:
        """
        Initialize transition use case.

        Args:
            lead_repository: Repository for leads
            stage_catalog: Repository for pipelines and stages
            x_date_calculator: X-Date calculator (defaults to 60 lead days)
            email_sender: Optional sender for transition notifications
            default_sender: Recipient used when no CSR is assigned
            admin_email: Admin notification address
            today: Clock returning the current calendar day
            logger: Optional logger function (lead_id, request_id, component, **kwargs)
        """
        self._lead_repository = lead_repository
        self._stage_catalog = stage_catalog
        self._x_date_calculator = x_date_calculator or CalculateXDate()
        self._email_sender = email_sender
        self._default_sender = default_sender
        self._admin_email = admin_email
        self._today = today
        self._logger = logger

    def _log(self, lead_id: str, request_id: str, component: str, **kwargs: Any) -> None:
        """Log event if logger is available."""
        if self._logger:
            self._logger(lead_id, request_id, component, **kwargs)

    async def execute(
        self,
        request: StageTransitionRequest,
        request_id: Optional[str] = None,
    ) -> StageTransitionResponse:
        """
        Move a lead to the requested stage.

        Args:
            request: Transition request DTO
            request_id: Optional request identifier for logging

        Returns:
            Transition response DTO

        Raises:
            TransitionRejected: If any validation fails
            LeadNotFound: If the lead does not exist
            StageNotFound: If the stage does not exist or is in another pipeline
            PipelineNotFound: If the stage's pipeline is missing
            LeadUpdateConflict: If the lead changed while validating
            LeadStoreError: If the store fails
        """
        request_id = request_id or "unknown"

        lead = await self._lead_repository.get(request.lead_id)
        if lead is None:
            raise LeadNotFound(request.lead_id)

        stage = await self._stage_catalog.get_stage(request.target_stage_id)
        if stage is None or stage.pipeline_id != lead.pipeline_id:
            raise StageNotFound(request.target_stage_id)

        pipeline = await self._stage_catalog.get_pipeline(stage.pipeline_id)
        if pipeline is None:
            raise PipelineNotFound(stage.pipeline_id)

        current_stage = await self._stage_catalog.get_stage(lead.current_stage_id)
        if current_stage is not None and current_stage.is_terminal and current_stage.id != stage.id:
            self._reject(lead.id, request_id, TERMINAL_STAGE_MESSAGE)

        plan = self.plan(lead, stage, pipeline, request.metadata_update, request_id=request_id)

        await self._lead_repository.apply_stage_change(lead.id, plan.change, expected=lead)

        self._log(
            lead.id,
            request_id,
            "stage_engine",
            stage_before=lead.current_stage_id,
            stage_after=stage.id,
            stage_name=stage.stage_name,
            x_date=plan.x_date,
            reminder_reset=plan.change.reminder_sent is False,
        )

        warning = await self._notify(lead, stage, request_id)

        return StageTransitionResponse(
            success=True,
            stage_id=stage.id,
            x_date=plan.x_date,
            warning=warning,
        )

    async def advance(
        self,
        lead_id: str,
        metadata_update: Optional[dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ) -> StageTransitionResponse:
        """
        Move a lead to the next stage by stage_order.

        Args:
            lead_id: Lead identifier
            metadata_update: Partial checklist answers
            request_id: Optional request identifier for logging

        Returns:
            Transition response DTO

        Raises:
            TransitionRejected: If there is no next stage or validation fails
        """
        request_id = request_id or "unknown"

        lead = await self._lead_repository.get(lead_id)
        if lead is None:
            raise LeadNotFound(lead_id)

        current_stage = await self._stage_catalog.get_stage(lead.current_stage_id)
        if current_stage is None:
            raise StageNotFound(lead.current_stage_id)

        next_stage = None
        if not current_stage.is_terminal:
            stages = await self._stage_catalog.list_stages(lead.pipeline_id)
            next_stage = next(
                (s for s in stages if s.stage_order > current_stage.stage_order),
                None,
            )

        if next_stage is None:
            self._reject(lead.id, request_id, FINAL_STAGE_MESSAGE)

        request = StageTransitionRequest(
            lead_id=lead_id,
            target_stage_id=next_stage.id,
            metadata_update=metadata_update or {},
        )
        return await self.execute(request, request_id=request_id)

    def plan(
        self,
        lead: Lead,
        stage: PipelineStage,
        pipeline: Pipeline,
        metadata_update: Optional[dict[str, Any]],
        request_id: str = "unknown",
    ) -> StageTransitionPlan:
        """
        Validate a transition and compute the fields to write.

        Pure computation over its inputs; nothing is persisted.

        Args:
            lead: Lead as currently stored
            stage: Target stage
            pipeline: Target stage's pipeline
            metadata_update: Caller-supplied partial metadata
            request_id: Request identifier for logging

        Returns:
            StageTransitionPlan

        Raises:
            TransitionRejected: If any validation fails
        """
        try:
            update = StageMetadata.from_mapping(metadata_update)
        except ValueError as err:
            self._reject(lead.id, request_id, str(err))

        merged = lead.stage_metadata.merge(update)

        # Mandatory checklist
        missing_fields = stage.checklist.missing_from(merged)
        if missing_fields:
            self._reject(lead.id, request_id, MISSING_FIELDS_MESSAGE, missing_fields)

        # Target completion date may not be backdated
        if update.is_present("target_completion_date"):
            try:
                target_date = to_calendar_date(update.get("target_completion_date"))
            except ValueError:
                self._reject(lead.id, request_id, INVALID_DATE_MESSAGE)
            if target_date is not None and target_date < self._today():
                self._reject(lead.id, request_id, BACKDATED_MESSAGE)

        rule = stage.rule
        if rule is None:
            canonical = drifted_rule_name(stage.stage_name)
            if canonical is not None:
                self._log(
                    lead.id,
                    request_id,
                    "stage_rules",
                    level=logging.WARNING,
                    stage_id=stage.id,
                    stage_name=stage.stage_name,
                    resembles=canonical,
                    detail="stage name differs from rule name only by case; no rule applied",
                )

        # Business-rule gate
        if rule == StageRule.QUOTE_EMAILED:
            if not (lead.stage_metadata.is_true("email_sent") or merged.is_true("email_sent")):
                self._reject(lead.id, request_id, EMAIL_NOT_SENT_MESSAGE)

        if rule == StageRule.QUOTING_IN_PROGRESS and pipeline.is_commercial:
            if not merged.is_true("required_documents_received"):
                self._reject(lead.id, request_id, DOCUMENTS_MISSING_MESSAGE)

        # Derived X-Date
        x_date = self._derive_x_date(lead, pipeline, rule, update, request_id)
        computed: dict[str, Any] = {}
        if x_date is not None:
            computed["x_date"] = x_date

        reminder_sent = None
        if rule == StageRule.COMPLETED and pipeline.is_commercial:
            reminder_sent = False

        self._log(
            lead.id,
            request_id,
            "stage_rules",
            stage_name=stage.stage_name,
            rule=rule.value if rule else None,
            checklist_fields=len(stage.checklist.required_fields),
        )

        return StageTransitionPlan(
            change=LeadStageChange(
                current_stage_id=stage.id,
                stage_metadata=merged.merge(computed),
                reminder_sent=reminder_sent,
            ),
            x_date=x_date,
        )

    def _derive_x_date(
        self,
        lead: Lead,
        pipeline: Pipeline,
        rule: Optional[StageRule],
        update: StageMetadata,
        request_id: str,
    ) -> Optional[str]:
        """
        Compute x_date for stages that require it.

        Returns:
            ISO calendar date string, or None when not applicable
        """
        if rule is None:
            return None

        if pipeline.is_commercial_new_business and rule in NEW_BUSINESS_X_DATE_RULES:
            effective_date = lead.effective_date
            if effective_date is None:
                try:
                    effective_date = to_calendar_date(update.get("effective_date"))
                except ValueError:
                    self._reject(lead.id, request_id, "Effective date is not a valid date")
            if effective_date is None:
                return None
            return self._x_date_calculator.from_effective_date(effective_date).isoformat()

        if pipeline.is_commercial_renewal and rule in RENEWAL_X_DATE_RULES:
            if lead.renewal_date is None:
                self._reject(lead.id, request_id, RENEWAL_DATE_MISSING_MESSAGE)
            return self._x_date_calculator.from_renewal_date(lead.renewal_date).isoformat()

        return None

    def _reject(
        self,
        lead_id: str,
        request_id: str,
        message: str,
        missing_fields: Optional[list[str]] = None,
    ) -> None:
        """
        Log and raise a client-fixable rejection.

        Raises:
            TransitionRejected: Always
        """
        self._log(
            lead_id,
            request_id,
            "stage_engine",
            rejected=message,
            missing_fields=missing_fields or [],
        )
        raise TransitionRejected(message, missing_fields=missing_fields)

    async def _notify(self, lead: Lead, stage: PipelineStage, request_id: str) -> Optional[str]:
        """
        Notify CSR and admin about a completed transition.

        A delivery failure never undoes the transition.

        Returns:
            Warning message when delivery failed, None otherwise
        """
        if self._email_sender is None:
            return None

        recipients = resolve_recipients(lead, self._default_sender, self._admin_email)
        if not recipients:
            return None

        client = lead.client_name or "Lead"
        subject = f"{client} moved to {stage.stage_name}"
        body = (
            f"<p>The lead <strong>{html.escape(client)}</strong> was moved to "
            f"<strong>{html.escape(stage.stage_name)}</strong>.</p>"
        )
        try:
            await self._email_sender.send(recipients, subject, body)
        except EmailDeliveryError as err:
            self._log(
                lead.id,
                request_id,
                "notification",
                level=logging.WARNING,
                notification_failed=str(err),
            )
            return f"Email notification failed: {err}"
        return None
