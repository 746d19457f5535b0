# File: app/crud/registration_field.py
from typing import Any, Dict, List
from sqlalchemy import func
from sqlalchemy.orm import Session
from app.crud.base import CRUDBase
from app.models.registration_field import RegistrationFieldDefinition

class CRUDRegistrationFieldDefinition(CRUDBase[RegistrationFieldDefinition, Any, Dict[str, Any]]):

    def list_for_event(self, db: Session, *, event_id: int) -> List[RegistrationFieldDefinition]:
        return (
            db.query(RegistrationFieldDefinition)
            .filter(RegistrationFieldDefinition.event_id == event_id)
            .order_by(RegistrationFieldDefinition.sequence_number.asc(), RegistrationFieldDefinition.id.asc())
            .all()
        )

    def get_max_sequence_number(self, db: Session, *, event_id: int) -> int:
        max_seq = (
            db.query(func.coalesce(func.max(RegistrationFieldDefinition.sequence_number), 0))
            .filter(RegistrationFieldDefinition.event_id == event_id)
            .scalar()
        )
        return int(max_seq or 0)

registration_field = CRUDRegistrationFieldDefinition(RegistrationFieldDefinition)
