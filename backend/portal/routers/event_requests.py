"""EventRequest API routes — delegates to EventRequestService for the review workflow."""
import logging
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from portal.config import settings
from portal.database import get_db
from portal.schemas.event_request import (
    ActionResult,
    DraftDecisionIn,
    EventRequestCreate,
    EventRequestRecord,
    ReviewDecisionIn,
    StatusHistoryOut,
)
from portal.services.event_request_service import EventRequestService

logger = logging.getLogger(__name__)
router = APIRouter()


def get_event_request_service(db: Session = Depends(get_db)) -> EventRequestService:
    return EventRequestService(db, default_timezone=settings.DEFAULT_TIMEZONE)


@router.post("/", response_model=EventRequestRecord, status_code=status.HTTP_201_CREATED)
def create_event_request(
    payload: EventRequestCreate,
    actor_id: str = Query(..., description="ID of the staff member submitting the request"),
    service: EventRequestService = Depends(get_event_request_service),
):
    """Create a new event request in DRAFT."""
    return service.create_event_request(actor_id, payload)


@router.get("/", response_model=list[EventRequestRecord])
def list_event_requests(service: EventRequestService = Depends(get_event_request_service)):
    """List all event requests, newest first, with client and submitter summaries."""
    return service.list_event_requests()


@router.get("/{request_id}", response_model=EventRequestRecord)
def get_event_request(request_id: int, service: EventRequestService = Depends(get_event_request_service)):
    return service.get_event_request(request_id)


@router.get("/{request_id}/history", response_model=list[StatusHistoryOut])
def list_status_history(request_id: int, service: EventRequestService = Depends(get_event_request_service)):
    """Workflow transitions recorded for one request, newest first."""
    return service.list_status_history(request_id)


@router.post("/{request_id}/submit", response_model=ActionResult)
def submit_for_review(
    request_id: int,
    payload: DraftDecisionIn,
    actor_id: str = Query(..., description="ID of the senior customer service reviewer"),
    service: EventRequestService = Depends(get_event_request_service),
):
    """Send a DRAFT request into review at the first step."""
    record = service.submit_for_review(actor_id, request_id, payload.feedback)
    return ActionResult(success=True, record=record)


@router.post("/{request_id}/reject", response_model=ActionResult)
def reject_draft(
    request_id: int,
    payload: DraftDecisionIn,
    actor_id: str = Query(..., description="ID of the senior customer service reviewer"),
    service: EventRequestService = Depends(get_event_request_service),
):
    """Reject a DRAFT request before it enters review."""
    record = service.reject_draft(actor_id, request_id, payload.feedback)
    return ActionResult(success=True, record=record)


@router.post("/{request_id}/review", response_model=ActionResult)
def review_event_request(
    request_id: int,
    payload: ReviewDecisionIn,
    actor_id: str = Query(..., description="ID of the reviewer acting on the current step"),
    service: EventRequestService = Depends(get_event_request_service),
):
    """Approve or reject the request at its current review step."""
    record = service.review(actor_id, request_id, payload.step, payload.decision, payload.feedback)
    return ActionResult(success=True, record=record)


@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event_request(
    request_id: int,
    actor_id: str = Query(..., description="ID of the staff member performing the delete"),
    service: EventRequestService = Depends(get_event_request_service),
):
    service.delete_event_request(actor_id, request_id)
