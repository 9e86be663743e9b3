"""Event-request review state machine.

Pure logic, no database access. Maps the persisted state of a request plus
the caller's intent onto the next (status, review_step, feedback column)
tuple, or raises a typed error when the transition is not allowed.

    DRAFT --submit--> PENDING/FINANCIAL_MANAGER
    DRAFT --reject--> REJECTED
    PENDING/step --APPROVE--> PENDING/next step | APPROVED (last step)
    PENDING/step --REJECT---> REJECTED
"""
import enum
from dataclasses import dataclass
from typing import Optional, Union

from portal.errors import (
    ForbiddenError,
    InvalidStepError,
    NotDraftError,
    NotPendingError,
    StepMismatchError,
    ValidationError,
)
from portal.models.event_request import EventRequestStatus, ReviewStep
from portal.models.staff import Role


class Decision(str, enum.Enum):
    APPROVE = "APPROVE"
    REJECT = "REJECT"


STEP_SEQUENCE: tuple[ReviewStep, ...] = (
    ReviewStep.FINANCIAL_MANAGER,
    ReviewStep.ADMINISTRATION_MANAGER,
    ReviewStep.CUSTOMER_MEETING,
)

SENIOR_SUBMITTER_ROLE = Role.SENIOR_CUSTOMER_SERVICE
SUBMITTER_ROLES = frozenset({Role.CUSTOMER_SERVICE, Role.SENIOR_CUSTOMER_SERVICE})

REQUIRED_ROLE_BY_STEP: dict[ReviewStep, Role] = {
    ReviewStep.FINANCIAL_MANAGER: Role.FINANCIAL_MANAGER,
    ReviewStep.ADMINISTRATION_MANAGER: Role.ADMINISTRATION_MANAGER,
    ReviewStep.CUSTOMER_MEETING: SENIOR_SUBMITTER_ROLE,
}

DRAFT_FEEDBACK_COLUMN = "scso_feedback"
FEEDBACK_COLUMN_BY_STEP: dict[ReviewStep, str] = {
    ReviewStep.FINANCIAL_MANAGER: "financial_manager_feedback",
    ReviewStep.ADMINISTRATION_MANAGER: "administration_manager_feedback",
    ReviewStep.CUSTOMER_MEETING: "customer_meeting_feedback",
}


@dataclass(frozen=True)
class Transition:
    """Target state of a single workflow move."""

    status: EventRequestStatus
    review_step: Optional[ReviewStep]
    feedback_column: str


def normalize_feedback(text: Optional[str]) -> Optional[str]:
    """Trim feedback; blank or missing feedback is stored as NULL."""
    if text is None:
        return None
    return text.strip() or None


def parse_step(value: Union[ReviewStep, str, None]) -> ReviewStep:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("Review step is required.")
    if isinstance(value, ReviewStep):
        return value
    try:
        return ReviewStep(value.strip().upper())
    except ValueError:
        raise InvalidStepError("Invalid review step provided.") from None


def parse_decision(value: Union[Decision, str, None]) -> Decision:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("Review decision is required.")
    if isinstance(value, Decision):
        return value
    try:
        return Decision(value.strip().upper())
    except ValueError:
        raise ValidationError(f"Unknown review decision '{value}'.") from None


def next_step(step: ReviewStep) -> Optional[ReviewStep]:
    """Step following ``step`` in the sequence, or None for the last one."""
    if step not in STEP_SEQUENCE:
        raise InvalidStepError("Invalid review step provided.")
    index = STEP_SEQUENCE.index(step)
    if index + 1 < len(STEP_SEQUENCE):
        return STEP_SEQUENCE[index + 1]
    return None


# ── Authorization ──────────────────────────────────────────────────


def authorize_submitter(role: Optional[Role]) -> None:
    if role not in SUBMITTER_ROLES:
        raise ForbiddenError("Only customer service staff may create event requests.")


def authorize_draft_decision(role: Optional[Role]) -> None:
    if role != SENIOR_SUBMITTER_ROLE:
        raise ForbiddenError("Only senior customer service staff may submit or reject drafts.")


def authorize_review(role: Optional[Role], step: ReviewStep) -> None:
    required = REQUIRED_ROLE_BY_STEP[step]
    if role != required:
        raise ForbiddenError(f"Step {step.value} must be reviewed by a {required.value} user.")


# ── Transitions ────────────────────────────────────────────────────


def plan_submit(current_status: EventRequestStatus) -> Transition:
    if current_status != EventRequestStatus.DRAFT:
        raise NotDraftError("Only draft event requests can be submitted for review.")
    return Transition(
        status=EventRequestStatus.PENDING,
        review_step=STEP_SEQUENCE[0],
        feedback_column=DRAFT_FEEDBACK_COLUMN,
    )


def plan_reject_draft(current_status: EventRequestStatus) -> Transition:
    if current_status != EventRequestStatus.DRAFT:
        raise NotDraftError("Only draft event requests can be rejected before review.")
    return Transition(
        status=EventRequestStatus.REJECTED,
        review_step=None,
        feedback_column=DRAFT_FEEDBACK_COLUMN,
    )


def plan_review(
    current_status: EventRequestStatus,
    current_step: Optional[ReviewStep],
    step: ReviewStep,
    decision: Decision,
) -> Transition:
    """Compute the transition for a reviewer acting on ``step``.

    Checks run in order: pending status, then step match, then step validity.
    """
    if current_status != EventRequestStatus.PENDING:
        raise NotPendingError("Event request is not pending review.")
    if current_step != step:
        raise StepMismatchError("Review step mismatch. Refresh and try again.")
    following = next_step(step)
    column = FEEDBACK_COLUMN_BY_STEP[step]

    if decision == Decision.REJECT:
        return Transition(EventRequestStatus.REJECTED, None, column)
    if following is not None:
        return Transition(EventRequestStatus.PENDING, following, column)
    return Transition(EventRequestStatus.APPROVED, None, column)
