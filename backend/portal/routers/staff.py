"""Staff directory API routes — HR only."""
import logging
import uuid
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portal.database import get_db
from portal.errors import NotFoundError, ValidationError
from portal.models.staff import Role, StaffProfile
from portal.schemas.staff import StaffCreate, StaffOut, StaffUpdate
from portal.services.authorization import require_role
from portal.services.staff_directory import HR_ONLY_MESSAGE, normalize_permissions, validate_profile

logger = logging.getLogger(__name__)
router = APIRouter()


def _require_hr(db: Session, actor_id: str) -> None:
    require_role(db, actor_id, [Role.HR], HR_ONLY_MESSAGE)


def _commit_profile(db: Session, profile: StaffProfile) -> StaffProfile:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("A staff account with this email already exists.") from None
    db.refresh(profile)
    return profile


@router.get("/", response_model=list[StaffOut])
def list_staff(
    actor_id: str = Query(..., description="ID of the staff member performing the action"),
    db: Session = Depends(get_db),
):
    """List the staff directory ordered by username."""
    _require_hr(db, actor_id)
    return db.query(StaffProfile).order_by(StaffProfile.username.asc()).all()


@router.post("/", response_model=StaffOut, status_code=status.HTTP_201_CREATED)
def create_staff(
    payload: StaffCreate,
    actor_id: str = Query(..., description="ID of the staff member performing the action"),
    db: Session = Depends(get_db),
):
    """Create a staff profile for an account issued by the auth provider."""
    _require_hr(db, actor_id)
    validate_profile(payload.email, payload.username, payload.department, payload.role)

    profile = StaffProfile(
        id=payload.id or str(uuid.uuid4()),
        email=payload.email.strip(),
        username=payload.username.strip(),
        phone=payload.phone,
        department=payload.department,
        role=payload.role,
        permissions=normalize_permissions(payload.permissions),
    )
    db.add(profile)
    _commit_profile(db, profile)
    logger.info("Created staff profile %s (%s, %s)", profile.id, profile.username, profile.role.value)
    return profile


@router.put("/{staff_id}", response_model=StaffOut)
def update_staff(
    staff_id: str,
    payload: StaffUpdate,
    actor_id: str = Query(..., description="ID of the staff member performing the action"),
    db: Session = Depends(get_db),
):
    """Replace a staff profile's directory fields."""
    _require_hr(db, actor_id)
    validate_profile(payload.email, payload.username, payload.department, payload.role)

    profile = db.query(StaffProfile).filter(StaffProfile.id == staff_id).first()
    if not profile:
        raise NotFoundError("Staff member not found.")
    profile.email = payload.email.strip()
    profile.username = payload.username.strip()
    profile.phone = payload.phone
    profile.department = payload.department
    profile.role = payload.role
    profile.permissions = normalize_permissions(payload.permissions)
    _commit_profile(db, profile)
    logger.info("Updated staff profile %s", staff_id)
    return profile


@router.delete("/{staff_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_staff(
    staff_id: str,
    actor_id: str = Query(..., description="ID of the staff member performing the action"),
    db: Session = Depends(get_db),
):
    _require_hr(db, actor_id)
    profile = db.query(StaffProfile).filter(StaffProfile.id == staff_id).first()
    if not profile:
        raise NotFoundError("Staff member not found.")
    db.delete(profile)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("Staff member is referenced by event requests and cannot be deleted.") from None
    logger.info("Deleted staff profile %s", staff_id)
