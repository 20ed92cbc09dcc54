"""HTTP routes."""

import json
from typing import Optional
from uuid import uuid4

from fastapi import APIRouter, Header, HTTPException, status
from fastapi.responses import JSONResponse

from app.application.dtos.pipeline import PipelineStages
from app.application.dtos.reminder import ReminderSweepResult
from app.application.dtos.stage_transition import (
    AdvanceStageRequest,
    StageTransitionErrorResponse,
    StageTransitionRequest,
)
from app.domain.errors import (
    LeadNotFound,
    LeadStoreError,
    LeadUpdateConflict,
    PipelineNotFound,
    StageNotFound,
    StageTransitionError,
    StoredDataError,
    TransitionRejected,
)
from app.infrastructure.config.settings import settings
from app.infrastructure.logging.logger import log_reminder_sweep, log_transition, logger
from app.infrastructure.wiring.dependencies import (
    create_idempotency_store,
    create_lead_repository,
    create_list_pipeline_stages_use_case,
    create_send_follow_up_reminders_use_case,
    create_stage_catalog_repository,
    create_transition_lead_stage_use_case,
)

router = APIRouter()

# Shared repositories so every use case sees the same leads and catalog
_lead_repository = create_lead_repository()
_stage_catalog = create_stage_catalog_repository()
_transition_lead_stage = create_transition_lead_stage_use_case(_lead_repository, _stage_catalog)
_send_follow_up_reminders = create_send_follow_up_reminders_use_case(_lead_repository)
_list_pipeline_stages = create_list_pipeline_stages_use_case(_stage_catalog)
_idempotency_store = create_idempotency_store()

_ERROR_STATUS: dict[type, int] = {
    TransitionRejected: status.HTTP_400_BAD_REQUEST,
    StageNotFound: status.HTTP_400_BAD_REQUEST,
    LeadNotFound: status.HTTP_404_NOT_FOUND,
    PipelineNotFound: status.HTTP_404_NOT_FOUND,
    LeadUpdateConflict: status.HTTP_409_CONFLICT,
    LeadStoreError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    StoredDataError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _error_response(err: StageTransitionError) -> JSONResponse:
    """
    Map a stage transition error to its HTTP response.

    Args:
        err: Domain error

    Returns:
        JSON response with {"error": ..., "missingFields"?: [...]}
    """
    status_code = _ERROR_STATUS.get(type(err), status.HTTP_500_INTERNAL_SERVER_ERROR)
    missing_fields = None
    if isinstance(err, TransitionRejected) and err.missing_fields:
        missing_fields = err.missing_fields
    body = StageTransitionErrorResponse(error=err.message, missing_fields=missing_fields)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> dict[str, str]:
    """
    Health check endpoint for liveness/readiness.

    Returns:
        Health status
    """
    return {"status": "ok"}


@router.post("/update-stage")
async def update_stage(
    request: StageTransitionRequest,
    idempotency_key: Optional[str] = Header(default=None, alias="Idempotency-Key"),
) -> JSONResponse:
    """
    Move a lead to any stage of its pipeline.

    Args:
        request: Lead id, target stage id and partial checklist answers
        idempotency_key: Optional key; a repeated key replays the first success

    Returns:
        {"success": true, ...} or {"error": ..., "missingFields"?: [...]}
    """
    request_id = str(uuid4())

    if idempotency_key:
        stored_response = await _idempotency_store.get_response(idempotency_key)
        if stored_response:
            log_transition(
                request.lead_id,
                request_id,
                "http",
                idempotent_replay=True,
            )
            return JSONResponse(status_code=status.HTTP_200_OK, content=json.loads(stored_response))

    log_transition(
        request.lead_id,
        request_id,
        "http",
        target_stage_id=request.target_stage_id,
        update_fields=sorted(request.metadata_update),
    )

    try:
        response = await _transition_lead_stage.execute(request, request_id=request_id)
    except StageTransitionError as err:
        return _error_response(err)

    content = response.model_dump(by_alias=True, exclude_none=True)
    if idempotency_key:
        await _idempotency_store.store_response(
            idempotency_key,
            json.dumps(content),
            settings.transition_idempotency_ttl_seconds,
        )

    return JSONResponse(status_code=status.HTTP_200_OK, content=content)


@router.post("/leads/{lead_id}/advance")
async def advance_stage(lead_id: str, request: AdvanceStageRequest) -> JSONResponse:
    """
    Move a lead to the next stage by stage_order.

    Args:
        lead_id: Lead identifier
        request: Partial checklist answers for the next stage

    Returns:
        {"success": true, ...} or {"error": ..., "missingFields"?: [...]}
    """
    request_id = str(uuid4())
    log_transition(lead_id, request_id, "http", action="advance")

    try:
        response = await _transition_lead_stage.advance(
            lead_id,
            dict(request.metadata_update),
            request_id=request_id,
        )
    except StageTransitionError as err:
        return _error_response(err)

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=response.model_dump(by_alias=True, exclude_none=True),
    )


@router.get("/pipelines/{pipeline_id}/stages", response_model=PipelineStages)
async def list_pipeline_stages(pipeline_id: str):
    """
    List a pipeline's stages for the CSR stage picker.

    Args:
        pipeline_id: Pipeline identifier

    Returns:
        Pipeline with ordered stages and their checklists
    """
    try:
        return await _list_pipeline_stages.execute(pipeline_id)
    except StageTransitionError as err:
        return _error_response(err)


@router.get("/reminder-check")
async def reminder_check():
    """
    Send follow-up reminders for leads past their follow-up date.

    Returns:
        Sweep totals
    """
    request_id = str(uuid4())
    try:
        result: ReminderSweepResult = await _send_follow_up_reminders.execute(
            request_id=request_id
        )
    except LeadStoreError as err:
        logger.error(f"Reminder check failed: {err.message}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal Server Error"},
        )

    log_reminder_sweep(request_id, result.processed, result.sent, result.errors)
    if result.processed == 0:
        return {"message": "No reminders to send", "count": 0}
    return result.model_dump()


@router.get("/debug/leads/{lead_id}", status_code=status.HTTP_200_OK)
async def get_lead_debug(lead_id: str) -> dict:
    """
    Get stored lead state (only enabled if DEBUG_MODE=true).

    Args:
        lead_id: Lead identifier

    Returns:
        Lead fields including stage metadata

    Raises:
        HTTPException: 404 if DEBUG_MODE is disabled or the lead is unknown
    """
    if not settings.debug_mode:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Debug endpoint is disabled",
        )

    lead = await _lead_repository.get(lead_id)
    if lead is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Lead not found",
        )

    return {
        "lead_id": lead.id,
        "lead": {
            "pipeline_id": lead.pipeline_id,
            "current_stage_id": lead.current_stage_id,
            "insurance_category": lead.insurance_category.value,
            "policy_flow": lead.policy_flow.value,
            "effective_date": lead.effective_date.isoformat() if lead.effective_date else None,
            "renewal_date": lead.renewal_date.isoformat() if lead.renewal_date else None,
            "reminder_sent": lead.reminder_sent,
            "stage_metadata": lead.stage_metadata.to_json_dict(),
        },
    }
