"""Read-side views over registration answers: admin grid, participant form, completion."""
import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app import crud
from app.core.exceptions import NotFoundError
from app.crud.registration_data import field_data_key
from app.models.event import Event
from app.models.participant import Participant, ParticipantRef, ParticipantType
from app.models.registration_field import RegistrationFieldDefinition
from app.schemas.registration_data import (
    CompletionStatus, FormInput, FormParticipant, ParticipantRow, RegistrationForm, RegistrationGrid,
)
from app.schemas.registration_field import RegistrationField
from app.services.participant_resolver import ParticipantResolver, participant_resolver
from app.services.registration_submission_service import FieldKey, participant_marker_name

logger = logging.getLogger(__name__)


class RegistrationDataService:

    def __init__(self, resolver: Optional[ParticipantResolver] = None):
        self.resolver = resolver or participant_resolver

    def get_event(self, db: Session, event_id: int) -> Event:
        event = crud.event.get(db, event_id)
        if event is None:
            raise NotFoundError("Event not found")
        return event

    def get_registration_data_for_event(self, db: Session, event_id: int) -> RegistrationGrid:
        """Dense fields x participants grid over every "yes" RSVP; missing cells are ""."""
        fields = crud.registration_field.list_for_event(db, event_id=event_id)
        if not fields:
            return RegistrationGrid(fields=[], participants=[])

        participants = self.resolver.resolve_event_participants(db, event_id)
        stored = crud.registration_data.get_field_data_for_participants(
            db, participants=[participant.ref for participant in participants]
        )

        rows = []
        for participant in participants:
            field_data: Dict[int, str] = {}
            for field in fields:
                value = stored.get(field_data_key(field.id, participant.type, participant.id))
                field_data[field.id] = value if value is not None else ""
            rows.append(self._row(participant, field_data))

        return RegistrationGrid(
            fields=[RegistrationField.from_model(field) for field in fields],
            participants=rows,
        )

    def build_form(self, db: Session, event: Event, user_id: int) -> RegistrationForm:
        """Inputs for each participant on the user's family "yes" RSVP, pre-filled with stored answers."""
        form = RegistrationForm(event_id=event.id, event_name=event.name, participants=[])

        fields = crud.registration_field.list_for_event(db, event_id=event.id)
        if not fields:
            return form

        rsvp = self.resolver.find_yes_rsvp_for_adult(db, event.id, user_id)
        if rsvp is None:
            return form

        participants = self.resolver.resolve_participants(db, event.id, rsvp.id)
        stored = crud.registration_data.get_field_data_for_participants(
            db, participants=[participant.ref for participant in participants]
        )

        for participant in participants:
            inputs = []
            for field in fields:
                if not field.applies_to(participant.type):
                    continue
                key = FieldKey(field.id, participant.type, participant.id)
                current = stored.get(field_data_key(field.id, participant.type, participant.id))
                inputs.append(FormInput(
                    input_name=key.input_name(),
                    field=RegistrationField.from_model(field),
                    current_value=current or "",
                ))
            if not inputs:
                continue
            form.participants.append(FormParticipant(
                type=participant.type.value,
                id=participant.id,
                display_name=participant.display_name,
                marker_name=participant_marker_name(participant.ref),
                inputs=inputs,
            ))

        return form

    def check_required_fields_complete(
        self, db: Session, event_id: int, participants: List[ParticipantRef]
    ) -> CompletionStatus:
        fields = crud.registration_field.list_for_event(db, event_id=event_id)
        required = [field for field in fields if field.required]
        if not required:
            return CompletionStatus(complete=True, missing=[])

        stored = crud.registration_data.get_field_data_for_participants(db, participants=participants)

        missing: List[str] = []
        for field in required:
            for participant_type, participant_id in participants:
                if not field.applies_to(ParticipantType(participant_type)):
                    continue
                value = stored.get(field_data_key(field.id, participant_type, participant_id))
                if value is None or value.strip() == "":
                    if field.name not in missing:
                        missing.append(field.name)
                    break

        return CompletionStatus(complete=not missing, missing=missing)

    def get_completion_status_for_user_rsvp(self, db: Session, event_id: int, user_id: int) -> CompletionStatus:
        if not crud.registration_field.list_for_event(db, event_id=event_id):
            return CompletionStatus(complete=True, missing=[], has_fields=False)

        rsvp = self.resolver.find_yes_rsvp_for_adult(db, event_id, user_id)
        if rsvp is None:
            return CompletionStatus(complete=True, missing=[])

        adult_ids, youth_ids = crud.rsvp.get_member_ids_by_type(db, rsvp_id=rsvp.id)
        participants = [ParticipantRef(ParticipantType.ADULT, adult_id) for adult_id in adult_ids]
        participants += [ParticipantRef(ParticipantType.YOUTH, youth_id) for youth_id in youth_ids]
        if not participants:
            return CompletionStatus(complete=True, missing=[])

        return self.check_required_fields_complete(db, event_id, participants)

    def _row(self, participant: Participant, field_data: Dict[int, str]) -> ParticipantRow:
        return ParticipantRow(
            type=participant.type.value,
            id=participant.id,
            rsvp_id=participant.rsvp_id,
            display_name=participant.display_name,
            last_name=participant.last_name,
            first_name=participant.first_name,
            phone=participant.phone,
            email=participant.email,
            field_data=field_data,
        )


registration_data_service = RegistrationDataService()
