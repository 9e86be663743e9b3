"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-16

Creates all tables for the Event Portal backend:
client, staff_profiles, event_request, event_request_status_history.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

EVENT_REQUEST_STATUS = ("DRAFT", "PENDING", "REJECTED", "APPROVED", "OPEN")
REVIEW_STEP = ("FINANCIAL_MANAGER", "ADMINISTRATION_MANAGER", "CUSTOMER_MEETING")


def upgrade() -> None:
    # --- client ---
    op.create_table(
        "client",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("phone_number", sa.String(50), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("discount_flag", sa.Boolean, nullable=True),
    )

    # --- staff_profiles ---
    op.create_table(
        "staff_profiles",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column(
            "department",
            sa.Enum("CUSTOMER_SERVICE", "FINANCE", "ADMINISTRATION", "PRODUCTION", "SERVICE", "HR",
                    name="department"),
            nullable=False,
        ),
        sa.Column(
            "role",
            sa.Enum("CUSTOMER_SERVICE", "SENIOR_CUSTOMER_SERVICE", "FINANCIAL_MANAGER",
                    "ADMINISTRATION_MANAGER", "PRODUCTION_MANAGER", "SERVICE_MANAGER", "HR",
                    name="role"),
            nullable=False,
        ),
        sa.Column("permissions", sa.JSON, nullable=False),
    )

    # --- event_request ---
    op.create_table(
        "event_request",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("client_id", sa.Integer, sa.ForeignKey("client.id"), nullable=False),
        sa.Column("submitter_id", sa.String(36), sa.ForeignKey("staff_profiles.id"), nullable=False),
        sa.Column(
            "event_type",
            sa.Enum("CONFERENCE", "WORKSHOP", "CONCERT", "WEDDING", "OTHER", name="eventtype"),
            nullable=False,
        ),
        sa.Column("status", sa.Enum(*EVENT_REQUEST_STATUS, name="eventrequeststatus", native_enum=False), nullable=False),
        sa.Column("review_step", sa.Enum(*REVIEW_STEP, name="reviewstep", native_enum=False), nullable=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("finish_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location", sa.String(500), nullable=True),
        sa.Column("preferences", sa.JSON, nullable=True),
        sa.Column("note", sa.Text, nullable=True),
        sa.Column("scso_feedback", sa.Text, nullable=True),
        sa.Column("financial_manager_feedback", sa.Text, nullable=True),
        sa.Column("administration_manager_feedback", sa.Text, nullable=True),
        sa.Column("customer_meeting_feedback", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        # PENDING <=> review_step set
        sa.CheckConstraint(
            "(status = 'PENDING') = (review_step IS NOT NULL)",
            name="ck_event_request_pending_has_step",
        ),
    )
    op.create_index("ix_event_request_created_at", "event_request", ["created_at"])

    # --- event_request_status_history ---
    op.create_table(
        "event_request_status_history",
        sa.Column("history_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("event_request_id", sa.Integer, sa.ForeignKey("event_request.id"), nullable=False),
        sa.Column("previous_status", sa.Enum(*EVENT_REQUEST_STATUS, name="eventrequeststatus", native_enum=False),
                  nullable=False),
        sa.Column("new_status", sa.Enum(*EVENT_REQUEST_STATUS, name="eventrequeststatus", native_enum=False),
                  nullable=False),
        sa.Column("previous_step", sa.Enum(*REVIEW_STEP, name="reviewstep", native_enum=False), nullable=True),
        sa.Column("new_step", sa.Enum(*REVIEW_STEP, name="reviewstep", native_enum=False), nullable=True),
        sa.Column("changed_by", sa.String(36), sa.ForeignKey("staff_profiles.id"), nullable=False),
        sa.Column("change_reason", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(
        "ix_event_request_status_history_event_request_id",
        "event_request_status_history",
        ["event_request_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_event_request_status_history_event_request_id", "event_request_status_history")
    op.drop_table("event_request_status_history")
    op.drop_index("ix_event_request_created_at", "event_request")
    op.drop_table("event_request")
    op.drop_table("staff_profiles")
    op.drop_table("client")
