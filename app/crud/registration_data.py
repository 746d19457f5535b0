# File: app/crud/registration_data.py
import logging
from typing import Dict, Iterable, List, Optional
from sqlalchemy import and_, or_, func
from sqlalchemy.orm import Session
from app.models.participant import ParticipantRef, ParticipantType
from app.models.registration_field import RegistrationFieldData, RegistrationFieldDefinition

logger = logging.getLogger(__name__)

KEY_COLUMNS = ["event_registration_field_definition_id", "participant_type", "participant_id"]

def field_data_key(field_definition_id: int, participant_type: ParticipantType, participant_id: int) -> str:
    """Lookup key used by bulk reads: "{fieldDefId}_{type}_{id}"."""
    return f"{field_definition_id}_{ParticipantType(participant_type).value}_{participant_id}"

class CRUDRegistrationFieldData:

    def save_field_data(
        self,
        db: Session,
        *,
        field_definition_id: int,
        participant_type: ParticipantType,
        participant_id: int,
        value: Optional[str],
        commit: bool = True,
    ) -> None:
        """Insert or overwrite the single value stored for a (field, participant) pair.

        With ``commit=False`` the write joins the caller's transaction.
        """
        participant_type = ParticipantType(participant_type)
        values = {
            "event_registration_field_definition_id": field_definition_id,
            "participant_type": participant_type,
            "participant_id": participant_id,
            "value": value,
        }

        stmt = self._upsert_statement(db, values)
        if stmt is not None:
            db.execute(stmt)
        else:
            existing = (
                db.query(RegistrationFieldData)
                .filter(
                    RegistrationFieldData.event_registration_field_definition_id == field_definition_id,
                    RegistrationFieldData.participant_type == participant_type,
                    RegistrationFieldData.participant_id == participant_id,
                )
                .with_for_update()
                .first()
            )
            if existing:
                existing.value = value
            else:
                db.add(RegistrationFieldData(**values))
            db.flush()

        if commit:
            db.commit()

    def _upsert_statement(self, db: Session, values: Dict):
        dialect = db.get_bind().dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
        else:
            return None

        stmt = insert(RegistrationFieldData).values(**values)
        return stmt.on_conflict_do_update(
            index_elements=KEY_COLUMNS,
            set_={"value": stmt.excluded.value, "updated_at": func.now()},
        )

    def get_field_data_for_participants(
        self, db: Session, *, participants: Iterable[ParticipantRef]
    ) -> Dict[str, Optional[str]]:
        """Stored values for the given participants, keyed by `field_data_key`.

        Pairs that were never saved are absent; a saved empty answer is present with ``None``.
        """
        conditions = []
        seen = set()
        for participant_type, participant_id in participants:
            try:
                participant_type = ParticipantType(participant_type)
            except ValueError:
                continue
            if int(participant_id) <= 0 or (participant_type, participant_id) in seen:
                continue
            seen.add((participant_type, participant_id))
            conditions.append(and_(
                RegistrationFieldData.participant_type == participant_type,
                RegistrationFieldData.participant_id == int(participant_id),
            ))

        if not conditions:
            return {}

        rows = (
            db.query(
                RegistrationFieldData.event_registration_field_definition_id,
                RegistrationFieldData.participant_type,
                RegistrationFieldData.participant_id,
                RegistrationFieldData.value,
            )
            .filter(or_(*conditions))
            .all()
        )
        return {
            field_data_key(field_id, participant_type, participant_id): value
            for field_id, participant_type, participant_id, value in rows
        }

    def delete_for_participant(self, db: Session, *, participant_type: ParticipantType, participant_id: int) -> int:
        participant_type = ParticipantType(participant_type)
        count = (
            db.query(RegistrationFieldData)
            .filter(
                RegistrationFieldData.participant_type == participant_type,
                RegistrationFieldData.participant_id == participant_id,
            )
            .delete(synchronize_session=False)
        )
        db.commit()
        logger.info(f"Deleted {count} registration answers for {participant_type.value} {participant_id}")
        return int(count)

    def has_data_for_event(self, db: Session, *, event_id: int) -> bool:
        row = (
            db.query(RegistrationFieldData.id)
            .join(
                RegistrationFieldDefinition,
                RegistrationFieldDefinition.id == RegistrationFieldData.event_registration_field_definition_id,
            )
            .filter(RegistrationFieldDefinition.event_id == event_id)
            .first()
        )
        return row is not None

    def list_for_field(self, db: Session, *, field_definition_id: int) -> List[RegistrationFieldData]:
        return (
            db.query(RegistrationFieldData)
            .filter(RegistrationFieldData.event_registration_field_definition_id == field_definition_id)
            .all()
        )

registration_data = CRUDRegistrationFieldData()
