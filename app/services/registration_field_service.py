"""Field definition management: validation and admin-only writes."""
import json
import logging
from typing import Any, Dict, List, Optional, Union

from sqlalchemy.orm import Session

from app import crud
from app.core.context import ActorContext
from app.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from app.models.registration_field import FieldScope, FieldType, RegistrationFieldDefinition

logger = logging.getLogger(__name__)

VALID_SCOPES = [scope.value for scope in FieldScope]
VALID_FIELD_TYPES = [field_type.value for field_type in FieldType]
UPDATABLE_KEYS = ["name", "description", "scope", "field_type", "required", "option_list", "sequence_number"]


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def parse_scope(value: Any) -> FieldScope:
    scope = _clean(value)
    if not scope:
        raise ValidationError("Scope is required.")
    if scope not in VALID_SCOPES:
        raise ValidationError(f"Invalid scope. Must be one of: {', '.join(VALID_SCOPES)}")
    return FieldScope(scope)


def parse_field_type(value: Any) -> FieldType:
    field_type = _clean(value)
    if not field_type:
        raise ValidationError("Field type is required.")
    if field_type not in VALID_FIELD_TYPES:
        raise ValidationError(f"Invalid field type. Must be one of: {', '.join(VALID_FIELD_TYPES)}")
    return FieldType(field_type)


def parse_option_list(raw: Union[None, str, List[Any]]) -> Optional[List[str]]:
    """Normalize a select field's options to a list of strings.

    Accepts the JSON array text typed into the admin form or an already-decoded list.
    Returns ``None`` when nothing was supplied.
    """
    if raw is None:
        return None

    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        try:
            decoded = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Option list must be valid JSON: {e.msg}")
    else:
        decoded = raw

    if not isinstance(decoded, list):
        raise ValidationError("Option list must be a JSON array")
    if not decoded:
        raise ValidationError("Option list cannot be empty for select fields")

    return [str(option) for option in decoded]


class RegistrationFieldService:
    """Reads are open to any caller; writes require an admin actor."""

    def _assert_admin(self, actor: Optional[ActorContext]) -> None:
        if actor is None:
            raise AuthorizationError("Login required")
        if not actor.is_admin:
            raise AuthorizationError("Admins only")

    def list_for_event(self, db: Session, event_id: int) -> List[RegistrationFieldDefinition]:
        return crud.registration_field.list_for_event(db, event_id=event_id)

    def find_by_id(self, db: Session, field_id: int) -> Optional[RegistrationFieldDefinition]:
        return crud.registration_field.get(db, field_id)

    def get_max_sequence_number(self, db: Session, event_id: int) -> int:
        return crud.registration_field.get_max_sequence_number(db, event_id=event_id)

    def create(self, db: Session, actor: ActorContext, event_id: int, data: Dict[str, Any]) -> int:
        self._assert_admin(actor)

        if event_id <= 0:
            raise ValidationError("Valid event_id is required.")
        if crud.event.get(db, event_id) is None:
            raise NotFoundError("Event not found")

        name = _clean(data.get("name"))
        if not name:
            raise ValidationError("Name is required.")
        scope = parse_scope(data.get("scope"))
        field_type = parse_field_type(data.get("field_type"))

        option_list = None
        if field_type == FieldType.SELECT:
            options = parse_option_list(data.get("option_list"))
            if options is None:
                raise ValidationError("Option list is required for select fields.")
            option_list = json.dumps(options)

        field = crud.registration_field.create(db, obj_in={
            "event_id": event_id,
            "name": name,
            "description": _clean(data.get("description")),
            "scope": scope,
            "field_type": field_type,
            "required": bool(data.get("required")),
            "option_list": option_list,
            "sequence_number": int(data.get("sequence_number") or 0),
            "created_by": actor.id,
        })

        logger.info(f"Created registration field {field.id} '{name}' ({field_type.value}) for event {event_id}")
        crud.activity_log.log(db, user_id=actor.id, action_type="event_registration_field_def.create", meta={
            "field_def_id": field.id,
            "event_id": event_id,
            "name": name,
            "field_type": field_type.value,
            "scope": scope.value,
        })
        return field.id

    def update(self, db: Session, actor: ActorContext, field_id: int, data: Dict[str, Any]) -> bool:
        """Apply the supplied keys only. Returns False when no field matched or nothing changed."""
        self._assert_admin(actor)

        field = crud.registration_field.get(db, field_id)
        if field is None:
            return False

        changes: Dict[str, Any] = {}
        for key in UPDATABLE_KEYS:
            if key not in data:
                continue
            value = data[key]
            if key == "name":
                name = _clean(value)
                if not name:
                    raise ValidationError("Name is required.")
                changes["name"] = name
            elif key == "description":
                changes["description"] = _clean(value)
            elif key == "scope":
                changes["scope"] = parse_scope(value)
            elif key == "field_type":
                changes["field_type"] = parse_field_type(value)
            elif key == "required":
                changes["required"] = bool(value)
            elif key == "sequence_number":
                changes["sequence_number"] = int(value or 0)

        new_type = changes.get("field_type", field.field_type)
        if new_type == FieldType.SELECT:
            if "option_list" in data:
                options = parse_option_list(data["option_list"])
                if options is None:
                    raise ValidationError("Option list is required for select fields.")
                changes["option_list"] = json.dumps(options)
            elif field.option_list is None:
                raise ValidationError("Option list is required for select fields.")
        elif field.option_list is not None or "option_list" in data:
            changes["option_list"] = None

        if not changes:
            return False

        crud.registration_field.update(db, db_obj=field, obj_in=changes)

        logger.info(f"Updated registration field {field_id}: {sorted(changes)}")
        crud.activity_log.log(db, user_id=actor.id, action_type="event_registration_field_def.update", meta={
            "field_def_id": field_id,
            "fields": sorted(changes),
        })
        return True

    def delete(self, db: Session, actor: ActorContext, field_id: int) -> int:
        """Delete a definition together with every answer stored against it."""
        self._assert_admin(actor)

        field = crud.registration_field.get(db, field_id)
        if field is None:
            return 0
        event_id, name = field.event_id, field.name

        count = crud.registration_field.remove(db, id=field_id)
        if count:
            logger.info(f"Deleted registration field {field_id} '{name}' from event {event_id}")
            crud.activity_log.log(db, user_id=actor.id, action_type="event_registration_field_def.delete", meta={
                "field_def_id": field_id,
                "event_id": event_id,
                "name": name,
            })
        return count


registration_field_service = RegistrationFieldService()
