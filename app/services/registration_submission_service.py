"""Validation and authorization of submitted registration answers.

A submission is a flat mapping of form keys to raw strings. Answer inputs are
named ``field_{fieldDefinitionId}_{participantType}_{participantId}``; a form may
also declare each participant it rendered with ``participant_{type}_{id}`` so that
participants whose only inputs are unchecked checkboxes are still processed.

Processing is all-or-nothing: keys are parsed, every referenced participant is
authorized, every answer is normalized and validated, and only then are the
values written inside a single transaction.
"""
import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Mapping, NamedTuple, Optional, Set

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app import crud
from app.core.config import settings
from app.core.context import ActorContext
from app.core.exceptions import AuthorizationError, ValidationError
from app.models.participant import ParticipantRef, ParticipantType
from app.models.registration_field import FieldType, RegistrationFieldDefinition
from app.services.participant_resolver import ParticipantResolver, participant_resolver

logger = logging.getLogger(__name__)

FIELD_KEY_PATTERN = re.compile(r"^field_(\d+)_(adult|youth)_(\d+)$")
PARTICIPANT_MARKER_PATTERN = re.compile(r"^participant_(adult|youth)_(\d+)$")
NUMERIC_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


class FieldKey(NamedTuple):
    field_definition_id: int
    participant_type: ParticipantType
    participant_id: int

    @property
    def participant(self) -> ParticipantRef:
        return ParticipantRef(self.participant_type, self.participant_id)

    def input_name(self) -> str:
        return f"field_{self.field_definition_id}_{self.participant_type.value}_{self.participant_id}"


def parse_field_key(key: str) -> Optional[FieldKey]:
    """Decode an answer input name; anything not of the exact four-part shape yields None."""
    match = FIELD_KEY_PATTERN.match(key)
    if not match:
        return None
    field_id, participant_type, participant_id = match.groups()
    return FieldKey(int(field_id), ParticipantType(participant_type), int(participant_id))


def parse_participant_marker(key: str) -> Optional[ParticipantRef]:
    match = PARTICIPANT_MARKER_PATTERN.match(key)
    if not match:
        return None
    participant_type, participant_id = match.groups()
    return ParticipantRef(ParticipantType(participant_type), int(participant_id))


def participant_marker_name(participant: ParticipantRef) -> str:
    return f"participant_{ParticipantType(participant.type).value}_{participant.id}"


def is_numeric(value: str) -> bool:
    return bool(NUMERIC_PATTERN.match(value))


@dataclass
class ParsedSubmission:
    answers: Dict[FieldKey, str]
    participants: List[ParticipantRef]


@dataclass
class PendingWrite:
    key: FieldKey
    value: Optional[str]


def parse_submission(form: Mapping[str, str]) -> ParsedSubmission:
    """Collect answer keys and the distinct set of participants they reference, in submission order."""
    answers: Dict[FieldKey, str] = {}
    participants: List[ParticipantRef] = []

    for key, raw in form.items():
        if key.startswith("field_"):
            field_key = parse_field_key(key)
            if field_key is None:
                logger.debug(f"Ignoring malformed field key '{key}'")
                continue
            answers[field_key] = "" if raw is None else str(raw)
            participant = field_key.participant
        elif key.startswith("participant_"):
            participant = parse_participant_marker(key)
            if participant is None:
                continue
        else:
            continue

        if participant not in participants:
            participants.append(participant)

    return ParsedSubmission(answers=answers, participants=participants)


class RegistrationSubmissionService:

    def __init__(self, resolver: Optional[ParticipantResolver] = None):
        self.resolver = resolver or participant_resolver

    def authorize(self, db: Session, actor: ActorContext, participants: List[ParticipantRef]) -> None:
        """Raise unless the actor may write every participant: self, co-parents, own children, or admin."""
        if actor.is_admin:
            return

        allowed = self.resolver.resolve_authorized_participants_for_actor(db, actor.id)
        for participant in participants:
            if participant.type == ParticipantType.ADULT:
                permitted = participant.id in allowed.self_and_co_parent_ids
            else:
                permitted = participant.id in allowed.child_ids
            if not permitted:
                logger.warning(
                    f"User {actor.id} attempted to save registration data for "
                    f"{participant.type.value} {participant.id}"
                )
                raise AuthorizationError("You are not authorized to edit registration data for one or more participants.")

    def normalize_and_validate(
        self,
        fields: Dict[int, RegistrationFieldDefinition],
        parsed: ParsedSubmission,
        event_id: int,
    ) -> List[PendingWrite]:
        """Build the writes for a submission, or raise one ValidationError describing every problem."""
        writes: List[PendingWrite] = []
        errors: List[str] = []

        for key, raw in parsed.answers.items():
            field = fields.get(key.field_definition_id)
            if field is None:
                logger.debug(f"Skipping {key.input_name()}: no such field for event {event_id}")
                continue
            if not field.applies_to(key.participant_type):
                logger.debug(f"Skipping {key.input_name()}: '{field.name}' does not apply to {key.participant_type.value}")
                continue

            if field.field_type == FieldType.BOOLEAN:
                # Checked boxes are present, whatever value the browser posted
                value = "1"
            else:
                value = raw.strip()

            error = self._check(field, value)
            if error:
                errors.append(error)
                continue
            writes.append(PendingWrite(key, value))

        # Unchecked checkboxes are omitted from form posts
        for participant in parsed.participants:
            for field in fields.values():
                if field.field_type != FieldType.BOOLEAN or not field.applies_to(participant.type):
                    continue
                key = FieldKey(field.id, participant.type, participant.id)
                if key not in parsed.answers:
                    writes.append(PendingWrite(key, "0"))

        if errors:
            raise ValidationError(" ".join(errors))

        for write in writes:
            if write.value == "":
                write.value = None
        return writes

    def _check(self, field: RegistrationFieldDefinition, value: str) -> Optional[str]:
        if field.field_type == FieldType.NUMERIC and value != "" and not is_numeric(value):
            return f"{field.name} must be numeric"
        if field.required and value == "":
            return f"{field.name} is required"
        if field.field_type == FieldType.SELECT and value != "":
            options = field.options or []
            if value not in options:
                if settings.ENFORCE_SELECT_OPTIONS:
                    return f"{field.name} must be one of: {', '.join(options)}"
                logger.warning(f"Value '{value}' for field {field.id} '{field.name}' is not one of its options")
        return None

    def save_submission(self, db: Session, actor: ActorContext, event_id: int, form: Mapping[str, str]) -> int:
        """Validate and persist a submission for one event. Returns the number of answers written.

        On any failure nothing is written.
        """
        parsed = parse_submission(form)
        self.authorize(db, actor, parsed.participants)

        fields = {field.id: field for field in crud.registration_field.list_for_event(db, event_id=event_id)}
        writes = self.normalize_and_validate(fields, parsed, event_id)

        try:
            for write in writes:
                crud.registration_data.save_field_data(
                    db,
                    field_definition_id=write.key.field_definition_id,
                    participant_type=write.key.participant_type,
                    participant_id=write.key.participant_id,
                    value=write.value,
                    commit=False,
                )
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception(f"Failed to save registration data for event {event_id}")
            raise

        logger.info(
            f"User {actor.id} saved {len(writes)} registration answers for "
            f"{len(parsed.participants)} participants of event {event_id}"
        )
        return len(writes)


registration_submission_service = RegistrationSubmissionService()
