"""EventRequest repository — all SQL issued for the review workflow.

The repository owns one ``Session`` handed to it by the caller. Mutating
methods never commit on their own except ``create`` and ``delete``; the
workflow service commits a transition together with its history row.
"""
import logging
from contextlib import contextmanager
from typing import Any, NamedTuple, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from portal.errors import StorageError
from portal.models.event_request import EventRequest, EventRequestStatus, ReviewStep
from portal.models.status_history import EventRequestStatusHistory
from portal.schemas.event_request import ClientSummary, EventRequestRecord, SubmitterSummary

logger = logging.getLogger(__name__)

RECORD_COLUMNS = (
    "id",
    "client_id",
    "submitter_id",
    "event_type",
    "status",
    "review_step",
    "start_time",
    "finish_time",
    "location",
    "preferences",
    "note",
    "scso_feedback",
    "financial_manager_feedback",
    "administration_manager_feedback",
    "customer_meeting_feedback",
    "created_at",
)


class RequestState(NamedTuple):
    status: EventRequestStatus
    review_step: Optional[ReviewStep]


def unwrap_relation(value: Any) -> Any:
    """Surface exactly one related object or None.

    A relation lookup can yield nothing, a single object, or (for malformed
    data) a list of rows; the first row wins.
    """
    if not value:
        return None
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def to_record(row: EventRequest) -> EventRequestRecord:
    """Build the read model for one request, joining client and submitter summaries."""
    data = {column: getattr(row, column) for column in RECORD_COLUMNS}
    client = unwrap_relation(row.client)
    submitter = unwrap_relation(row.submitter)
    data["client"] = ClientSummary.model_validate(client) if client is not None else None
    data["submitter"] = SubmitterSummary.model_validate(submitter) if submitter is not None else None
    return EventRequestRecord.model_validate(data)


class EventRequestRepository:
    """Persistence operations on the ``event_request`` table."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _storage(self, action: str):
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            message = str(getattr(exc, "orig", None) or exc)
            logger.error("Storage failure during %s: %s", action, message)
            raise StorageError(message) from exc

    def create(self, **values: Any) -> EventRequest:
        """Insert a new request in DRAFT with no active review step."""
        request = EventRequest(status=EventRequestStatus.DRAFT, review_step=None, **values)
        with self._storage("create event request"):
            self.db.add(request)
            self.db.commit()
            self.db.refresh(request)
        return request

    def list_all(self) -> list[EventRequest]:
        with self._storage("list event requests"):
            return (
                self.db.query(EventRequest)
                .options(joinedload(EventRequest.client), joinedload(EventRequest.submitter))
                .order_by(EventRequest.created_at.desc(), EventRequest.id.desc())
                .all()
            )

    def get(self, request_id: int) -> Optional[EventRequest]:
        with self._storage("fetch event request"):
            return (
                self.db.query(EventRequest)
                .options(joinedload(EventRequest.client), joinedload(EventRequest.submitter))
                .filter(EventRequest.id == request_id)
                .first()
            )

    def fetch_state(self, request_id: int) -> Optional[RequestState]:
        """Minimal (status, review_step) pair for one request."""
        with self._storage("fetch event request state"):
            row = (
                self.db.query(EventRequest.status, EventRequest.review_step)
                .filter(EventRequest.id == request_id)
                .first()
            )
        if row is None:
            return None
        return RequestState(status=row.status, review_step=row.review_step)

    def conditional_update(
        self,
        request_id: int,
        expected_status: EventRequestStatus,
        expected_step: Optional[ReviewStep],
        values: dict[str, Any],
    ) -> int:
        """Apply ``values`` only if the row is still in the expected state.

        Compare-and-set in a single UPDATE; returns the affected row count
        (0 or 1). When ``expected_step`` is None the step is not pinned.
        """
        stmt = update(EventRequest).where(
            EventRequest.id == request_id,
            EventRequest.status == expected_status,
        )
        if expected_step is not None:
            stmt = stmt.where(EventRequest.review_step == expected_step)
        stmt = stmt.values(**values).execution_options(synchronize_session=False)
        with self._storage("update event request"):
            result = self.db.execute(stmt)
        return result.rowcount or 0

    def add_history(
        self,
        request_id: int,
        changed_by: str,
        previous: RequestState,
        new: RequestState,
        change_reason: Optional[str] = None,
    ) -> EventRequestStatusHistory:
        entry = EventRequestStatusHistory(
            event_request_id=request_id,
            previous_status=previous.status,
            previous_step=previous.review_step,
            new_status=new.status,
            new_step=new.review_step,
            changed_by=changed_by,
            change_reason=change_reason,
        )
        with self._storage("record status history"):
            self.db.add(entry)
            self.db.flush()
        return entry

    def list_history(self, request_id: int) -> list[EventRequestStatusHistory]:
        with self._storage("list status history"):
            return (
                self.db.query(EventRequestStatusHistory)
                .filter(EventRequestStatusHistory.event_request_id == request_id)
                .order_by(EventRequestStatusHistory.history_id.desc())
                .all()
            )

    def delete(self, request: EventRequest) -> None:
        with self._storage("delete event request"):
            self.db.delete(request)
            self.db.commit()

    def commit(self) -> None:
        with self._storage("commit"):
            self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
