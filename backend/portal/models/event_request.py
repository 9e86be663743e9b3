"""EventRequest ORM model — the only entity with a review lifecycle."""
import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, ForeignKey, CheckConstraint, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from portal.database import Base


class EventRequestStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PENDING = "PENDING"
    REJECTED = "REJECTED"
    APPROVED = "APPROVED"
    OPEN = "OPEN"


class ReviewStep(str, enum.Enum):
    FINANCIAL_MANAGER = "FINANCIAL_MANAGER"
    ADMINISTRATION_MANAGER = "ADMINISTRATION_MANAGER"
    CUSTOMER_MEETING = "CUSTOMER_MEETING"


class EventType(str, enum.Enum):
    CONFERENCE = "CONFERENCE"
    WORKSHOP = "WORKSHOP"
    CONCERT = "CONCERT"
    WEDDING = "WEDDING"
    OTHER = "OTHER"


class EventPreference(str, enum.Enum):
    DECORATION = "DECORATION"
    FILMING = "FILMING"
    BREAKFAST = "BREAKFAST"
    LUNCH = "LUNCH"
    DINNER = "DINNER"
    BEVERAGE = "BEVERAGE"
    PHOTOGRAPHY = "PHOTOGRAPHY"
    MUSIC = "MUSIC"
    GRAPHIC_DESIGN = "GRAPHIC_DESIGN"
    WAITER = "WAITER"


class EventRequest(Base):
    __tablename__ = "event_request"
    __table_args__ = (
        # PENDING <=> review_step set
        CheckConstraint(
            "(status = 'PENDING') = (review_step IS NOT NULL)",
            name="ck_event_request_pending_has_step",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(Integer, ForeignKey("client.id"), nullable=False)
    submitter_id = Column(String(36), ForeignKey("staff_profiles.id"), nullable=False)
    event_type = Column(SAEnum(EventType), nullable=False, default=EventType.OTHER)
    status = Column(SAEnum(EventRequestStatus, native_enum=False), nullable=False, default=EventRequestStatus.DRAFT)
    review_step = Column(SAEnum(ReviewStep, native_enum=False), nullable=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    finish_time = Column(DateTime(timezone=True), nullable=False)
    location = Column(String(500), nullable=True)
    preferences = Column(JSON, nullable=True, default=list)
    note = Column(Text, nullable=True)
    scso_feedback = Column(Text, nullable=True)
    financial_manager_feedback = Column(Text, nullable=True)
    administration_manager_feedback = Column(Text, nullable=True)
    customer_meeting_feedback = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    client = relationship("Client")
    submitter = relationship("StaffProfile")
    history = relationship(
        "EventRequestStatusHistory",
        back_populates="event_request",
        cascade="all, delete-orphan",
        order_by="EventRequestStatusHistory.history_id.desc()",
    )
