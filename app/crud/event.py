# File: app/crud/event.py
from typing import Any, Dict
from app.crud.base import CRUDBase
from app.models.event import Event

class CRUDEvent(CRUDBase[Event, Any, Dict[str, Any]]):
    pass

event = CRUDEvent(Event)
