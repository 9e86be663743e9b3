"""EventRequestStatusHistory ORM model — append-only ledger of workflow transitions."""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from portal.database import Base
from portal.models.event_request import EventRequestStatus, ReviewStep


class EventRequestStatusHistory(Base):
    __tablename__ = "event_request_status_history"

    history_id = Column(Integer, primary_key=True, autoincrement=True)
    event_request_id = Column(Integer, ForeignKey("event_request.id"), nullable=False, index=True)
    previous_status = Column(SAEnum(EventRequestStatus, native_enum=False), nullable=False)
    new_status = Column(SAEnum(EventRequestStatus, native_enum=False), nullable=False)
    previous_step = Column(SAEnum(ReviewStep, native_enum=False), nullable=True)
    new_step = Column(SAEnum(ReviewStep, native_enum=False), nullable=True)
    changed_by = Column(String(36), ForeignKey("staff_profiles.id"), nullable=False)
    change_reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    event_request = relationship("EventRequest", back_populates="history")
