from app import crud
from app.crud.registration_data import field_data_key
from app.models.participant import ParticipantRef, ParticipantType
from tests.conftest import add_field

ADULT = ParticipantType.ADULT
YOUTH = ParticipantType.YOUTH


def save(db, field, participant_type, participant_id, value):
    crud.registration_data.save_field_data(
        db, field_definition_id=field.id, participant_type=participant_type,
        participant_id=participant_id, value=value,
    )


def test_saved_value_reads_back(db, pack):
    field = add_field(db, pack.event.id, "Allergies")
    save(db, field, YOUTH, pack.sam.id, "peanuts")

    data = crud.registration_data.get_field_data_for_participants(
        db, participants=[ParticipantRef(YOUTH, pack.sam.id)]
    )

    assert data == {f"{field.id}_youth_{pack.sam.id}": "peanuts"}


def test_save_overwrites_in_place(db, pack):
    field = add_field(db, pack.event.id, "Allergies")
    save(db, field, ADULT, pack.pat.id, "none")
    save(db, field, ADULT, pack.pat.id, "shellfish")

    rows = crud.registration_data.list_for_field(db, field_definition_id=field.id)
    data = crud.registration_data.get_field_data_for_participants(
        db, participants=[ParticipantRef(ADULT, pack.pat.id)]
    )

    assert len(rows) == 1
    assert data[field_data_key(field.id, ADULT, pack.pat.id)] == "shellfish"


def test_saved_null_differs_from_never_saved(db, pack):
    field = add_field(db, pack.event.id, "Allergies")
    save(db, field, ADULT, pack.pat.id, None)

    data = crud.registration_data.get_field_data_for_participants(
        db, participants=[ParticipantRef(ADULT, pack.pat.id), ParticipantRef(ADULT, pack.chris.id)]
    )

    assert field_data_key(field.id, ADULT, pack.pat.id) in data
    assert data[field_data_key(field.id, ADULT, pack.pat.id)] is None
    assert field_data_key(field.id, ADULT, pack.chris.id) not in data


def test_lookup_is_restricted_to_requested_participants(db, pack):
    field = add_field(db, pack.event.id, "Allergies")
    save(db, field, YOUTH, pack.sam.id, "peanuts")
    save(db, field, YOUTH, pack.riley.id, "gluten")
    # Same numeric id as a youth must not collide
    save(db, field, ADULT, pack.sam.id, "adult answer")

    data = crud.registration_data.get_field_data_for_participants(
        db, participants=[ParticipantRef(YOUTH, pack.sam.id)]
    )

    assert data == {field_data_key(field.id, YOUTH, pack.sam.id): "peanuts"}


def test_lookup_ignores_invalid_participants(db, pack):
    assert crud.registration_data.get_field_data_for_participants(db, participants=[]) == {}
    assert crud.registration_data.get_field_data_for_participants(
        db, participants=[("parent", 1), (YOUTH, 0)]
    ) == {}


def test_delete_for_participant(db, pack):
    first = add_field(db, pack.event.id, "Allergies")
    second = add_field(db, pack.event.id, "Swim level")
    save(db, first, YOUTH, pack.sam.id, "peanuts")
    save(db, second, YOUTH, pack.sam.id, "2")
    save(db, first, YOUTH, pack.alex.id, "none")

    assert crud.registration_data.delete_for_participant(db, participant_type=YOUTH, participant_id=pack.sam.id) == 2

    remaining = crud.registration_data.get_field_data_for_participants(
        db, participants=[ParticipantRef(YOUTH, pack.sam.id), ParticipantRef(YOUTH, pack.alex.id)]
    )
    assert remaining == {field_data_key(first.id, YOUTH, pack.alex.id): "none"}


def test_has_data_for_event(db, pack):
    field = add_field(db, pack.event.id, "Allergies")
    add_field(db, pack.other_event.id, "Car class")

    assert crud.registration_data.has_data_for_event(db, event_id=pack.event.id) is False

    save(db, field, ADULT, pack.jordan.id, "none")

    assert crud.registration_data.has_data_for_event(db, event_id=pack.event.id) is True
    assert crud.registration_data.has_data_for_event(db, event_id=pack.other_event.id) is False
