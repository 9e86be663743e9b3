"""Event-request service — creation, listing and the review workflow.

Responsibilities:
- Input validation before any storage access
- Role authorization via the static tables in ``review_workflow``
- Every transition as one conditional UPDATE keyed on the expected prior
  state, committed together with its status-history row
- Diagnosing a failed conditional update into NotFound / NotPending /
  StepMismatch / NotDraft errors
"""
import logging
from datetime import datetime
from typing import Callable, Optional, Union

import pytz
from pydantic import TypeAdapter, ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from portal.errors import NotFoundError, StepMismatchError, ValidationError
from portal.models.event_request import EventRequestStatus, ReviewStep
from portal.models.staff import Role
from portal.repositories.event_request_repository import (
    EventRequestRepository,
    RequestState,
    to_record,
)
from portal.schemas.event_request import EventRequestCreate, EventRequestRecord
from portal.services import review_workflow
from portal.services.authorization import require_role, resolve_actor
from portal.services.review_workflow import Decision, Transition

logger = logging.getLogger(__name__)

_datetime_adapter = TypeAdapter(datetime)

DELETE_ROLES = frozenset({Role.HR, Role.SENIOR_CUSTOMER_SERVICE})


def parse_instant(value: str, default_timezone: str = "UTC") -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Naive timestamps are interpreted in ``default_timezone``.
    """
    try:
        parsed = _datetime_adapter.validate_python(value)
    except PydanticValidationError:
        raise ValidationError("Invalid start or finish time supplied.") from None
    if parsed.tzinfo is None:
        parsed = pytz.timezone(default_timezone).localize(parsed)
    return parsed.astimezone(pytz.utc)


def _trimmed_or_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


def build_insert_values(payload: EventRequestCreate, default_timezone: str = "UTC") -> dict:
    """Validate a create payload and turn it into column values."""
    if payload.client_id is None or payload.client_id <= 0:
        raise ValidationError("Please select a client before submitting.")
    if not payload.start_time or not payload.finish_time:
        raise ValidationError("Start time and finish time are required.")

    return {
        "client_id": payload.client_id,
        "event_type": payload.event_type,
        "start_time": parse_instant(payload.start_time, default_timezone),
        "finish_time": parse_instant(payload.finish_time, default_timezone),
        "location": _trimmed_or_none(payload.location),
        "note": _trimmed_or_none(payload.note),
        "preferences": list(dict.fromkeys(pref.value for pref in payload.preferences)),
    }


class EventRequestService:
    """Service layer for event requests; one instance per database session."""

    def __init__(self, db: Session, default_timezone: str = "UTC"):
        self.db = db
        self.repo = EventRequestRepository(db)
        self.default_timezone = default_timezone

    def _actor_role(self, actor_id: str) -> Role:
        return resolve_actor(self.db, actor_id).role

    # ── Reads ──────────────────────────────────────────────────────

    def list_event_requests(self) -> list[EventRequestRecord]:
        return [to_record(row) for row in self.repo.list_all()]

    def get_event_request(self, request_id: int) -> EventRequestRecord:
        row = self.repo.get(request_id)
        if row is None:
            raise NotFoundError("Event request not found.")
        return to_record(row)

    def list_status_history(self, request_id: int):
        if self.repo.fetch_state(request_id) is None:
            raise NotFoundError("Event request not found.")
        return self.repo.list_history(request_id)

    # ── Writes ─────────────────────────────────────────────────────

    def create_event_request(self, actor_id: str, payload: EventRequestCreate) -> EventRequestRecord:
        """Validate and insert a new DRAFT request submitted by ``actor_id``."""
        values = build_insert_values(payload, self.default_timezone)
        review_workflow.authorize_submitter(self._actor_role(actor_id))

        row = self.repo.create(submitter_id=actor_id, **values)
        logger.info("Created event request %s for client %s by %s", row.id, row.client_id, actor_id)
        return self.get_event_request(row.id)

    def submit_for_review(
        self, actor_id: str, request_id: int, feedback: Optional[str] = None
    ) -> EventRequestRecord:
        """DRAFT → PENDING at the first review step."""
        text = review_workflow.normalize_feedback(feedback)
        review_workflow.authorize_draft_decision(self._actor_role(actor_id))
        transition = review_workflow.plan_submit(EventRequestStatus.DRAFT)
        return self._apply(
            request_id,
            actor_id,
            RequestState(EventRequestStatus.DRAFT, None),
            transition,
            text,
            diagnose=lambda state: review_workflow.plan_submit(state.status),
        )

    def reject_draft(
        self, actor_id: str, request_id: int, feedback: Optional[str] = None
    ) -> EventRequestRecord:
        """DRAFT → REJECTED without entering review."""
        text = review_workflow.normalize_feedback(feedback)
        review_workflow.authorize_draft_decision(self._actor_role(actor_id))
        transition = review_workflow.plan_reject_draft(EventRequestStatus.DRAFT)
        return self._apply(
            request_id,
            actor_id,
            RequestState(EventRequestStatus.DRAFT, None),
            transition,
            text,
            diagnose=lambda state: review_workflow.plan_reject_draft(state.status),
        )

    def review(
        self,
        actor_id: str,
        request_id: int,
        step: Union[ReviewStep, str, None],
        decision: Union[Decision, str, None],
        feedback: Optional[str] = None,
    ) -> EventRequestRecord:
        """Approve or reject the request at ``step``, which must be its current step."""
        step = review_workflow.parse_step(step)
        decision = review_workflow.parse_decision(decision)
        text = review_workflow.normalize_feedback(feedback)
        review_workflow.authorize_review(self._actor_role(actor_id), step)

        expected = RequestState(EventRequestStatus.PENDING, step)
        transition = review_workflow.plan_review(expected.status, expected.review_step, step, decision)
        return self._apply(
            request_id,
            actor_id,
            expected,
            transition,
            text,
            diagnose=lambda state: review_workflow.plan_review(
                state.status, state.review_step, step, decision
            ),
        )

    def delete_event_request(self, actor_id: str, request_id: int) -> None:
        """Administrative delete; not part of the review workflow."""
        require_role(
            self.db,
            actor_id,
            DELETE_ROLES,
            "Only HR or senior customer service staff may delete event requests.",
        )
        row = self.repo.get(request_id)
        if row is None:
            raise NotFoundError("Event request not found.")
        self.repo.delete(row)
        logger.info("Deleted event request %s by %s", request_id, actor_id)

    def _apply(
        self,
        request_id: int,
        actor_id: str,
        expected: RequestState,
        transition: Transition,
        feedback: Optional[str],
        diagnose: Callable[[RequestState], Transition],
    ) -> EventRequestRecord:
        values = {
            "status": transition.status,
            "review_step": transition.review_step,
            transition.feedback_column: feedback,
        }
        affected = self.repo.conditional_update(
            request_id, expected.status, expected.review_step, values
        )
        if affected == 0:
            self.repo.rollback()
            state = self.repo.fetch_state(request_id)
            if state is None:
                raise NotFoundError("Event request not found.")
            logger.warning(
                "Rejected transition on event request %s: expected %s/%s, found %s/%s",
                request_id,
                expected.status.value,
                expected.review_step.value if expected.review_step else None,
                state.status.value,
                state.review_step.value if state.review_step else None,
            )
            diagnose(state)
            # State matched on re-read, so it changed underneath the update.
            raise StepMismatchError("Event request changed concurrently. Refresh and try again.")

        self.repo.add_history(
            request_id,
            changed_by=actor_id,
            previous=expected,
            new=RequestState(transition.status, transition.review_step),
            change_reason=feedback,
        )
        self.repo.commit()
        logger.info(
            "Event request %s moved %s -> %s (step %s) by %s",
            request_id,
            expected.status.value,
            transition.status.value,
            transition.review_step.value if transition.review_step else None,
            actor_id,
        )
        return self.get_event_request(request_id)
