"""Client record API routes."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portal.database import get_db
from portal.errors import NotFoundError, ValidationError
from portal.models.client import Client
from portal.schemas.client import ClientCreate, ClientOut

logger = logging.getLogger(__name__)
router = APIRouter()


def _blank_to_none(value):
    if value is None:
        return None
    return value.strip() or None


@router.get("/", response_model=list[ClientOut])
def list_clients(db: Session = Depends(get_db)):
    """List all clients alphabetically."""
    return db.query(Client).order_by(Client.name.asc()).all()


@router.post("/", response_model=ClientOut, status_code=status.HTTP_201_CREATED)
def create_client(payload: ClientCreate, db: Session = Depends(get_db)):
    """Create a client record; only the name is mandatory."""
    name = payload.name.strip()
    if not name:
        raise ValidationError("Client name is required.")

    client = Client(
        name=name,
        address=_blank_to_none(payload.address),
        phone_number=_blank_to_none(payload.phone_number),
        email=_blank_to_none(payload.email),
    )
    db.add(client)
    db.commit()
    db.refresh(client)
    logger.info("Created client %s (%s)", client.id, client.name)
    return client


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(client_id: int, db: Session = Depends(get_db)):
    client = db.query(Client).filter(Client.id == client_id).first()
    if not client:
        raise NotFoundError("Client not found.")
    db.delete(client)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("Client is referenced by event requests and cannot be deleted.") from None
    logger.info("Deleted client %s", client_id)
