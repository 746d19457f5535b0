# File: app/api/v1/endpoints/registration_fields.py
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app import crud, schemas
from app.api import deps
from app.core.context import ActorContext
from app.core.exceptions import NotFoundError
from app.db.database import get_db
from app.services.registration_field_service import registration_field_service

router = APIRouter()

SEQUENCE_STEP = 10

def _get_event_or_404(db: Session, event_id: int):
    event = crud.event.get(db, event_id)
    if not event:
        raise NotFoundError("Event not found")
    return event

def _get_field_or_404(db: Session, field_id: int, event_id: Optional[int] = None):
    field = registration_field_service.find_by_id(db, field_id)
    if not field or (event_id is not None and field.event_id != event_id):
        raise NotFoundError("Field definition not found")
    return field

@router.get("/events/{event_id}/registration-fields", response_model=List[schemas.RegistrationField])
def list_registration_fields(
    event_id: int,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(deps.require_admin)
) -> Any:
    """Field definitions for an event in display order"""
    _get_event_or_404(db, event_id)
    fields = registration_field_service.list_for_event(db, event_id)
    return [schemas.RegistrationField.from_model(field) for field in fields]

@router.get("/events/{event_id}/registration-fields/next-sequence", response_model=schemas.NextSequenceNumber)
def suggest_next_sequence_number(
    event_id: int,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(deps.require_admin)
) -> Any:
    """Suggested sequence number for a new field"""
    _get_event_or_404(db, event_id)
    max_seq = registration_field_service.get_max_sequence_number(db, event_id)
    return {"sequence_number": max_seq + SEQUENCE_STEP}

@router.post("/events/{event_id}/registration-fields", status_code=status.HTTP_201_CREATED)
def create_registration_field(
    event_id: int,
    field_in: schemas.RegistrationFieldCreate,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(deps.require_admin)
) -> Any:
    """Create a field definition for an event"""
    _get_event_or_404(db, event_id)
    field_id = registration_field_service.create(db, actor, event_id, field_in.model_dump())
    return {"message": "Field definition created successfully.", "id": field_id}

@router.get("/registration-fields/{field_id}", response_model=schemas.RegistrationField)
def get_registration_field(
    field_id: int,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(deps.require_admin)
) -> Any:
    return schemas.RegistrationField.from_model(_get_field_or_404(db, field_id))

@router.put("/registration-fields/{field_id}")
def update_registration_field(
    field_id: int,
    field_in: schemas.RegistrationFieldUpdate,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(deps.require_admin)
) -> Any:
    """Update the supplied attributes of a field definition"""
    _get_field_or_404(db, field_id)
    updated = registration_field_service.update(db, actor, field_id, field_in.model_dump(exclude_unset=True))
    return {"updated": updated}

@router.delete("/registration-fields/{field_id}")
def delete_registration_field(
    field_id: int,
    event_id: Optional[int] = None,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(deps.require_admin)
) -> Any:
    """Delete a field definition and every answer stored for it"""
    _get_field_or_404(db, field_id, event_id)
    count = registration_field_service.delete(db, actor, field_id)
    return {"deleted": count}
