import json
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import crud
from app.core.context import ActorContext
from app.core.security import create_access_token
from app.db.database import Base, get_db
from app.main import app
from app.models.event import Event
from app.models.registration_field import FieldScope, FieldType, RegistrationFieldDefinition
from app.models.user import User
from app.models.youth import Youth


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def add_field(db, event_id, name, field_type=FieldType.TEXT, scope=FieldScope.PER_PERSON,
              required=False, options=None, sequence_number=0):
    field = RegistrationFieldDefinition(
        event_id=event_id,
        name=name,
        scope=scope,
        field_type=field_type,
        required=required,
        option_list=None if options is None else json.dumps(options),
        sequence_number=sequence_number,
    )
    db.add(field)
    db.commit()
    db.refresh(field)
    return field


@pytest.fixture
def pack(db):
    """Two families RSVP'd "yes" to one event, plus an admin and an unrelated adult.

    Smith family: Pat and Chris (co-parents) with Sam and Alex.
    Lee family: Jordan with Riley.
    """
    admin = User(first_name="Ada", last_name="Admin", email="admin@pack.test", is_admin=True)
    pat = User(first_name="Pat", last_name="Smith", email="pat@pack.test", phone_cell="555-0101")
    chris = User(first_name="Chris", last_name="Smith", email="chris@pack.test", phone_home="555-0102")
    jordan = User(first_name="Jordan", last_name="Lee", email="jordan@pack.test")
    outsider = User(first_name="Olive", last_name="Outsider", email="olive@pack.test")
    sam = Youth(first_name="Sam", last_name="Smith", grade=3)
    alex = Youth(first_name="Alex", last_name="Smith", grade=1)
    riley = Youth(first_name="Riley", last_name="Lee", grade=2)
    event = Event(name="Fall Campout: Lake Side!")
    other_event = Event(name="Pinewood Derby")
    db.add_all([admin, pat, chris, jordan, outsider, sam, alex, riley, event, other_event])
    db.commit()

    for adult, child in [(pat, sam), (pat, alex), (chris, sam), (chris, alex), (jordan, riley)]:
        crud.parent_relationship.link(db, adult_id=adult.id, youth_id=child.id)

    smith_rsvp = crud.rsvp.create_with_members(
        db, event_id=event.id, created_by_user_id=pat.id,
        adult_ids=[pat.id, chris.id], youth_ids=[sam.id, alex.id],
    )
    lee_rsvp = crud.rsvp.create_with_members(
        db, event_id=event.id, created_by_user_id=jordan.id,
        adult_ids=[jordan.id], youth_ids=[riley.id],
    )

    return SimpleNamespace(
        admin=admin, pat=pat, chris=chris, jordan=jordan, outsider=outsider,
        sam=sam, alex=alex, riley=riley, event=event, other_event=other_event,
        smith_rsvp=smith_rsvp, lee_rsvp=lee_rsvp,
    )


@pytest.fixture
def admin_actor(pack):
    return ActorContext(id=pack.admin.id, is_admin=True)


@pytest.fixture
def pat_actor(pack):
    return ActorContext(id=pack.pat.id, is_admin=False)


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}
