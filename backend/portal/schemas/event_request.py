"""Pydantic schemas for EventRequests and their review workflow."""
from __future__ import annotations
from datetime import datetime
from typing import Optional

import pytz
from pydantic import BaseModel, field_validator

from portal.models.event_request import EventPreference, EventRequestStatus, EventType, ReviewStep


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive values read back from backends that drop the offset."""
    if value is None:
        return None
    if value.tzinfo is None:
        return pytz.utc.localize(value)
    return value.astimezone(pytz.utc)


class EventRequestCreate(BaseModel):
    # Presence and timestamp format are checked by the service so that the
    # caller gets the portal's own validation messages.
    client_id: Optional[int] = None
    event_type: EventType = EventType.OTHER
    start_time: Optional[str] = None
    finish_time: Optional[str] = None
    location: Optional[str] = None
    preferences: list[EventPreference] = []
    note: Optional[str] = None


class DraftDecisionIn(BaseModel):
    feedback: Optional[str] = None


class ReviewDecisionIn(BaseModel):
    step: Optional[str] = None
    decision: Optional[str] = None
    feedback: Optional[str] = None


class ClientSummary(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    phone_number: Optional[str] = None

    model_config = {"from_attributes": True}


class SubmitterSummary(BaseModel):
    id: str
    username: Optional[str] = None
    email: Optional[str] = None

    model_config = {"from_attributes": True}


class EventRequestRecord(BaseModel):
    id: int
    client_id: int
    client: Optional[ClientSummary] = None
    submitter_id: str
    submitter: Optional[SubmitterSummary] = None
    event_type: EventType
    status: EventRequestStatus
    review_step: Optional[ReviewStep] = None
    start_time: datetime
    finish_time: datetime
    location: Optional[str] = None
    preferences: Optional[list[EventPreference]] = None
    note: Optional[str] = None
    scso_feedback: Optional[str] = None
    financial_manager_feedback: Optional[str] = None
    administration_manager_feedback: Optional[str] = None
    customer_meeting_feedback: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("start_time", "finish_time", "created_at")
    @classmethod
    def restore_utc(cls, value):
        return as_utc(value)


class ActionResult(BaseModel):
    success: bool = True
    record: Optional[EventRequestRecord] = None


class StatusHistoryOut(BaseModel):
    history_id: int
    event_request_id: int
    previous_status: EventRequestStatus
    new_status: EventRequestStatus
    previous_step: Optional[ReviewStep] = None
    new_step: Optional[ReviewStep] = None
    changed_by: str
    change_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @field_validator("created_at")
    @classmethod
    def restore_utc(cls, value):
        return as_utc(value)
