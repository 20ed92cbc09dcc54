"""Postgres-backed lead repository adapter."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.application.ports.lead_repository import LeadRepository
from app.domain.entities.lead import Lead, LeadStageChange, PolicyFlow
from app.domain.entities.pipeline import InsuranceCategory
from app.domain.errors import (
    LeadNotFound,
    LeadStoreError,
    LeadUpdateConflict,
    StoredDataError,
)
from app.domain.value_objects.calendar_date import as_utc
from app.domain.value_objects.stage_metadata import StageMetadata
from app.infrastructure.db import get_db_session
from app.infrastructure.logging.logger import logger

from .models import LeadModel


class PostgresLeadRepository(LeadRepository):
    """Postgres implementation of lead repository."""

    def __init__(self) -> None:
        """Initialize Postgres repository."""
        pass

    def _model_to_entity(self, model: LeadModel) -> Lead:
        """
        Convert LeadModel to Lead entity.

        Args:
            model: SQLAlchemy model instance

        Returns:
            Lead entity

        Raises:
            StoredDataError: If a column value does not decode
        """
        # Ensure follow_up_date is timezone-aware (SQLite returns naive datetimes)
        follow_up_date = model.follow_up_date
        if follow_up_date is not None:
            follow_up_date = as_utc(follow_up_date)

        try:
            return Lead(
                id=model.id,
                pipeline_id=model.pipeline_id,
                current_stage_id=model.current_stage_id,
                insurance_category=InsuranceCategory(model.insurance_category),
                policy_flow=PolicyFlow(model.policy_flow),
                effective_date=model.effective_date,
                renewal_date=model.renewal_date,
                follow_up_date=follow_up_date,
                target_completion_date=model.target_completion_date,
                stage_metadata=StageMetadata.from_mapping(model.stage_metadata),
                reminder_sent=bool(model.reminder_sent),
                client_name=model.client_name,
                email=model.email,
                assigned_csr_email=model.assigned_csr_email,
            )
        except ValueError as e:
            logger.error(f"Invalid stored data for lead {model.id}: {str(e)}")
            raise StoredDataError("Invalid stored lead data") from e

    def _entity_to_model(self, lead: Lead, model: Optional[LeadModel] = None) -> LeadModel:
        """
        Convert Lead entity to LeadModel (for upsert).

        Args:
            lead: Lead entity
            model: Existing model instance (for update) or None (for insert)

        Returns:
            LeadModel instance
        """
        if model is None:
            model = LeadModel(id=lead.id, created_at=datetime.now(timezone.utc))

        model.pipeline_id = lead.pipeline_id
        model.current_stage_id = lead.current_stage_id
        model.insurance_category = lead.insurance_category.value
        model.policy_flow = lead.policy_flow.value
        model.effective_date = lead.effective_date
        model.renewal_date = lead.renewal_date
        model.follow_up_date = lead.follow_up_date
        model.target_completion_date = lead.target_completion_date
        model.stage_metadata = lead.stage_metadata.to_json_dict()
        model.reminder_sent = lead.reminder_sent
        model.client_name = lead.client_name
        model.email = lead.email
        model.assigned_csr_email = lead.assigned_csr_email
        model.updated_at = datetime.now(timezone.utc)
        return model

    async def get(self, lead_id: str) -> Optional[Lead]:
        """
        Get a lead by id.

        Args:
            lead_id: Lead identifier

        Returns:
            Lead entity, or None if not found

        Raises:
            LeadStoreError: On database failure
        """
        db: Session = get_db_session()
        try:
            model = db.query(LeadModel).filter(LeadModel.id == lead_id).first()
            if model is None:
                return None
            return self._model_to_entity(model)
        except SQLAlchemyError as e:
            logger.error(f"Database error while getting lead {lead_id}: {str(e)}")
            raise LeadStoreError() from e
        finally:
            db.close()

    async def save(self, lead: Lead) -> None:
        """
        Save a lead (upsert by id).

        Args:
            lead: Lead entity to save

        Raises:
            LeadStoreError: On database failure
        """
        db: Session = get_db_session()
        try:
            model = db.query(LeadModel).filter(LeadModel.id == lead.id).first()
            if model:
                self._entity_to_model(lead, model)
            else:
                db.add(self._entity_to_model(lead))
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database error while saving lead {lead.id}: {str(e)}")
            raise LeadStoreError() from e
        finally:
            db.close()

    async def apply_stage_change(
        self,
        lead_id: str,
        change: LeadStageChange,
        expected: Lead,
    ) -> None:
        """
        Write a stage change if the lead still matches what was read.

        Compare-and-set on current_stage_id and stage_metadata inside one
        transaction; the row is locked where the backend supports it.

        Args:
            lead_id: Lead identifier
            change: Fields to write
            expected: Lead as read before validation

        Raises:
            LeadNotFound: If the lead no longer exists
            LeadUpdateConflict: If stage or metadata changed since the read
            LeadStoreError: On database failure
        """
        db: Session = get_db_session()
        try:
            model = db.query(LeadModel).filter(LeadModel.id == lead_id).with_for_update().first()
            if model is None:
                raise LeadNotFound(lead_id)

            stored_metadata = model.stage_metadata or {}
            if (
                model.current_stage_id != expected.current_stage_id
                or stored_metadata != expected.stage_metadata.to_json_dict()
            ):
                raise LeadUpdateConflict(lead_id)

            model.current_stage_id = change.current_stage_id
            model.stage_metadata = change.stage_metadata.to_json_dict()
            if change.reminder_sent is not None:
                model.reminder_sent = change.reminder_sent
            model.updated_at = datetime.now(timezone.utc)
            db.commit()
        except (LeadNotFound, LeadUpdateConflict):
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database error while updating stage for lead {lead_id}: {str(e)}")
            raise LeadStoreError() from e
        finally:
            db.close()

    async def list_due_for_reminder(self, now: datetime) -> list[Lead]:
        """
        List leads whose follow-up is due and not yet reminded.

        Args:
            now: Current timestamp

        Returns:
            Matching leads

        Raises:
            LeadStoreError: On database failure
        """
        db: Session = get_db_session()
        try:
            models = (
                db.query(LeadModel)
                .filter(LeadModel.reminder_sent == False)  # noqa: E712
                .filter(LeadModel.follow_up_date.isnot(None))
                .filter(LeadModel.follow_up_date <= as_utc(now))
                .all()
            )
            # JSON boolean check runs here so SQLite and Postgres agree
            return [
                self._model_to_entity(model)
                for model in models
                if (model.stage_metadata or {}).get("email_sent") is True
            ]
        except SQLAlchemyError as e:
            logger.error(f"Database error while listing leads due for reminder: {str(e)}")
            raise LeadStoreError() from e
        finally:
            db.close()

    async def mark_reminder_sent(self, lead_id: str) -> bool:
        """
        Set reminder_sent to true only if it is still false.

        Args:
            lead_id: Lead identifier

        Returns:
            True if this call flipped the flag

        Raises:
            LeadStoreError: On database failure
        """
        db: Session = get_db_session()
        try:
            updated = (
                db.query(LeadModel)
                .filter(
                    LeadModel.id == lead_id,
                    LeadModel.reminder_sent == False,  # noqa: E712
                )
                .update(
                    {"reminder_sent": True, "updated_at": datetime.now(timezone.utc)},
                    synchronize_session=False,
                )
            )
            db.commit()
            return updated > 0
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database error while marking reminder for lead {lead_id}: {str(e)}")
            raise LeadStoreError() from e
        finally:
            db.close()
