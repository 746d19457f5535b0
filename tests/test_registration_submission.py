import pytest
from sqlalchemy.exc import SQLAlchemyError

from app import crud
from app.core.config import settings
from app.core.exceptions import AuthorizationError, ValidationError
from app.crud.registration_data import field_data_key
from app.models.participant import ParticipantRef, ParticipantType
from app.models.registration_field import FieldScope, FieldType
from app.services.registration_submission_service import (
    FieldKey, is_numeric, parse_field_key, parse_participant_marker, parse_submission,
    registration_submission_service,
)
from tests.conftest import add_field

ADULT = ParticipantType.ADULT
YOUTH = ParticipantType.YOUTH


def stored(db, *refs):
    return crud.registration_data.get_field_data_for_participants(db, participants=list(refs))


def name(field, participant_type, participant_id):
    return FieldKey(field.id, participant_type, participant_id).input_name()


def test_parse_field_key():
    assert parse_field_key("field_12_youth_34") == FieldKey(12, YOUTH, 34)
    assert parse_field_key("field_12_adult_34").participant == ParticipantRef(ADULT, 34)


@pytest.mark.parametrize("key", [
    "field_12_youth",
    "field_12_parent_34",
    "field_x_youth_34",
    "field_12_youth_34_extra",
    "field__youth_34",
    "xfield_12_youth_34",
])
def test_parse_field_key_rejects_malformed(key):
    assert parse_field_key(key) is None


def test_parse_participant_marker():
    assert parse_participant_marker("participant_adult_5") == ParticipantRef(ADULT, 5)
    assert parse_participant_marker("participant_pet_5") is None


@pytest.mark.parametrize("value, expected", [
    ("42", True), ("-3.5", True), ("+.5", True), ("1e3", True), ("7.", True),
    ("abc", False), ("1,000", False), ("", False), ("1.2.3", False),
])
def test_is_numeric(value, expected):
    assert is_numeric(value) is expected


def test_parse_submission_ignores_malformed_keys_and_other_inputs():
    parsed = parse_submission({
        "csrf_token": "abc",
        "field_1_youth": "x",
        "field_1_youth_2": "peanuts",
        "participant_adult_3": "1",
        "field_4_youth_2": "",
    })

    assert parsed.answers == {FieldKey(1, YOUTH, 2): "peanuts", FieldKey(4, YOUTH, 2): ""}
    assert parsed.participants == [ParticipantRef(YOUTH, 2), ParticipantRef(ADULT, 3)]


def test_parent_saves_answers_for_own_family(db, pack, pat_actor):
    allergies = add_field(db, pack.event.id, "Allergies", scope=FieldScope.PER_YOUTH)
    shirt = add_field(db, pack.event.id, "Shirt", field_type=FieldType.SELECT, options=["S", "M"])

    count = registration_submission_service.save_submission(db, pat_actor, pack.event.id, {
        name(allergies, YOUTH, pack.sam.id): "  peanuts ",
        name(shirt, ADULT, pack.chris.id): "M",
    })

    assert count == 2
    data = stored(db, ParticipantRef(YOUTH, pack.sam.id), ParticipantRef(ADULT, pack.chris.id))
    assert data[field_data_key(allergies.id, YOUTH, pack.sam.id)] == "peanuts"
    assert data[field_data_key(shirt.id, ADULT, pack.chris.id)] == "M"


def test_field_outside_scope_is_skipped_not_validated(db, pack, pat_actor):
    age = add_field(db, pack.event.id, "Age", field_type=FieldType.NUMERIC, scope=FieldScope.PER_YOUTH, required=True)

    count = registration_submission_service.save_submission(db, pat_actor, pack.event.id, {
        name(age, ADULT, pack.pat.id): "not a number",
    })

    assert count == 0
    assert stored(db, ParticipantRef(ADULT, pack.pat.id)) == {}


def test_family_scope_applies_to_adults_only(db, pack, pat_actor):
    carpool = add_field(db, pack.event.id, "Carpool seats", scope=FieldScope.PER_FAMILY)

    registration_submission_service.save_submission(db, pat_actor, pack.event.id, {
        name(carpool, ADULT, pack.pat.id): "3",
        name(carpool, YOUTH, pack.sam.id): "1",
    })

    data = stored(db, ParticipantRef(ADULT, pack.pat.id), ParticipantRef(YOUTH, pack.sam.id))
    assert data == {field_data_key(carpool.id, ADULT, pack.pat.id): "3"}


def test_select_value_outside_options_is_accepted_by_default(db, pack, pat_actor):
    shirt = add_field(db, pack.event.id, "Shirt", field_type=FieldType.SELECT, options=["A", "B"])

    registration_submission_service.save_submission(db, pat_actor, pack.event.id, {
        name(shirt, YOUTH, pack.sam.id): "C",
    })

    assert stored(db, ParticipantRef(YOUTH, pack.sam.id))[field_data_key(shirt.id, YOUTH, pack.sam.id)] == "C"


def test_select_value_outside_options_can_be_rejected(db, pack, pat_actor, monkeypatch):
    monkeypatch.setattr(settings, "ENFORCE_SELECT_OPTIONS", True)
    shirt = add_field(db, pack.event.id, "Shirt", field_type=FieldType.SELECT, options=["A", "B"])

    with pytest.raises(ValidationError) as exc_info:
        registration_submission_service.save_submission(db, pat_actor, pack.event.id, {
            name(shirt, YOUTH, pack.sam.id): "C",
        })

    assert exc_info.value.message == "Shirt must be one of: A, B"
    assert stored(db, ParticipantRef(YOUTH, pack.sam.id)) == {}


def test_one_invalid_answer_blocks_every_write(db, pack, pat_actor):
    allergies = add_field(db, pack.event.id, "Allergies")
    medical = add_field(db, pack.event.id, "Medical form", required=True)

    with pytest.raises(ValidationError) as exc_info:
        registration_submission_service.save_submission(db, pat_actor, pack.event.id, {
            name(allergies, YOUTH, pack.sam.id): "peanuts",
            name(medical, YOUTH, pack.sam.id): "   ",
        })

    assert exc_info.value.message == "Medical form is required"
    assert stored(db, ParticipantRef(YOUTH, pack.sam.id)) == {}


def test_every_problem_is_reported(db, pack, pat_actor):
    age = add_field(db, pack.event.id, "Age", field_type=FieldType.NUMERIC)
    medical = add_field(db, pack.event.id, "Medical form", required=True)

    with pytest.raises(ValidationError) as exc_info:
        registration_submission_service.save_submission(db, pat_actor, pack.event.id, {
            name(age, YOUTH, pack.sam.id): "seven",
            name(medical, YOUTH, pack.alex.id): "",
        })

    assert exc_info.value.message == "Age must be numeric Medical form is required"


def test_numeric_and_empty_values(db, pack, pat_actor):
    age = add_field(db, pack.event.id, "Age", field_type=FieldType.NUMERIC)
    notes = add_field(db, pack.event.id, "Notes")

    registration_submission_service.save_submission(db, pat_actor, pack.event.id, {
        name(age, YOUTH, pack.sam.id): " 8.5 ",
        name(age, YOUTH, pack.alex.id): "",
        name(notes, YOUTH, pack.sam.id): "   ",
    })

    data = stored(db, ParticipantRef(YOUTH, pack.sam.id), ParticipantRef(YOUTH, pack.alex.id))
    assert data[field_data_key(age.id, YOUTH, pack.sam.id)] == "8.5"
    assert data[field_data_key(age.id, YOUTH, pack.alex.id)] is None
    assert data[field_data_key(notes.id, YOUTH, pack.sam.id)] is None


def test_unchecked_boolean_is_saved_as_zero(db, pack, pat_actor):
    camping = add_field(db, pack.event.id, "Camping overnight", field_type=FieldType.BOOLEAN)
    notes = add_field(db, pack.event.id, "Notes")

    registration_submission_service.save_submission(db, pat_actor, pack.event.id, {
        name(camping, ADULT, pack.pat.id): "on",
        name(notes, ADULT, pack.chris.id): "late arrival",
    })

    data = stored(db, ParticipantRef(ADULT, pack.pat.id), ParticipantRef(ADULT, pack.chris.id))
    assert data[field_data_key(camping.id, ADULT, pack.pat.id)] == "1"
    assert data[field_data_key(camping.id, ADULT, pack.chris.id)] == "0"


def test_participant_marker_records_unchecked_boxes(db, pack, pat_actor):
    swim = add_field(db, pack.event.id, "Swimmer", field_type=FieldType.BOOLEAN, scope=FieldScope.PER_YOUTH)
    registration_submission_service.save_submission(db, pat_actor, pack.event.id, {
        name(swim, YOUTH, pack.alex.id): "1",
    })

    registration_submission_service.save_submission(db, pat_actor, pack.event.id, {
        f"participant_youth_{pack.alex.id}": "1",
    })

    data = stored(db, ParticipantRef(YOUTH, pack.alex.id))
    assert data[field_data_key(swim.id, YOUTH, pack.alex.id)] == "0"


def test_resubmission_overwrites_previous_answer(db, pack, pat_actor):
    notes = add_field(db, pack.event.id, "Notes")

    for value in ["first", "second"]:
        registration_submission_service.save_submission(db, pat_actor, pack.event.id, {
            name(notes, YOUTH, pack.sam.id): value,
        })

    assert stored(db, ParticipantRef(YOUTH, pack.sam.id)) == {field_data_key(notes.id, YOUTH, pack.sam.id): "second"}
    assert len(crud.registration_data.list_for_field(db, field_definition_id=notes.id)) == 1


def test_field_of_another_event_is_ignored(db, pack, pat_actor):
    car = add_field(db, pack.other_event.id, "Car class")

    count = registration_submission_service.save_submission(db, pat_actor, pack.event.id, {
        name(car, YOUTH, pack.sam.id): "open",
    })

    assert count == 0
    assert stored(db, ParticipantRef(YOUTH, pack.sam.id)) == {}


def test_parent_cannot_write_for_other_families(db, pack, pat_actor):
    notes = add_field(db, pack.event.id, "Notes")

    with pytest.raises(AuthorizationError):
        registration_submission_service.save_submission(db, pat_actor, pack.event.id, {
            name(notes, YOUTH, pack.sam.id): "ok",
            name(notes, YOUTH, pack.riley.id): "not mine",
        })

    assert stored(db, ParticipantRef(YOUTH, pack.sam.id), ParticipantRef(YOUTH, pack.riley.id)) == {}


def test_marker_for_other_family_is_unauthorized(db, pack, pat_actor):
    add_field(db, pack.event.id, "Swimmer", field_type=FieldType.BOOLEAN)

    with pytest.raises(AuthorizationError):
        registration_submission_service.save_submission(db, pat_actor, pack.event.id, {
            f"participant_adult_{pack.jordan.id}": "1",
        })


def test_admin_may_write_for_anyone(db, pack, admin_actor):
    notes = add_field(db, pack.event.id, "Notes")

    registration_submission_service.save_submission(db, admin_actor, pack.event.id, {
        name(notes, YOUTH, pack.riley.id): "checked in",
        name(notes, ADULT, pack.outsider.id): "guest",
    })

    data = stored(db, ParticipantRef(YOUTH, pack.riley.id), ParticipantRef(ADULT, pack.outsider.id))
    assert len(data) == 2


def test_database_failure_rolls_back_the_whole_submission(db, pack, pat_actor, monkeypatch):
    notes = add_field(db, pack.event.id, "Notes")
    real_save = crud.registration_data.save_field_data
    calls = []

    def flaky_save(session, **kwargs):
        calls.append(kwargs)
        if len(calls) == 2:
            raise SQLAlchemyError("disk full")
        real_save(session, **kwargs)

    monkeypatch.setattr(crud.registration_data, "save_field_data", flaky_save)

    with pytest.raises(SQLAlchemyError):
        registration_submission_service.save_submission(db, pat_actor, pack.event.id, {
            name(notes, YOUTH, pack.sam.id): "one",
            name(notes, YOUTH, pack.alex.id): "two",
        })

    monkeypatch.undo()
    assert stored(db, ParticipantRef(YOUTH, pack.sam.id), ParticipantRef(YOUTH, pack.alex.id)) == {}
