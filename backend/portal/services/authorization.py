"""Resolve the acting staff member supplied by the auth collaborator."""
import logging
from typing import Iterable

from sqlalchemy.orm import Session

from portal.errors import ForbiddenError
from portal.models.staff import Role, StaffProfile

logger = logging.getLogger(__name__)


def resolve_actor(db: Session, actor_id: str) -> StaffProfile:
    """Load the staff profile of the caller; unknown callers are forbidden."""
    if not actor_id:
        raise ForbiddenError("An acting staff member is required.")
    actor = db.query(StaffProfile).filter(StaffProfile.id == actor_id).first()
    if actor is None:
        logger.warning("Rejected request from unknown staff id %s", actor_id)
        raise ForbiddenError("Unknown staff member.")
    return actor


def require_role(db: Session, actor_id: str, roles: Iterable[Role], message: str) -> StaffProfile:
    actor = resolve_actor(db, actor_id)
    if actor.role not in set(roles):
        logger.warning("Staff %s (%s) denied: %s", actor_id, actor.role.value, message)
        raise ForbiddenError(message)
    return actor
