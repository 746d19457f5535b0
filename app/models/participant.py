# File: app/models/participant.py
import enum
from dataclasses import dataclass
from typing import NamedTuple, Optional

class ParticipantType(str, enum.Enum):
    ADULT = "adult"
    YOUTH = "youth"

class ParticipantRef(NamedTuple):
    """Identity of a participant: adults are users, youth are youth roster rows."""
    type: ParticipantType
    id: int

@dataclass
class Participant:
    """An adult or youth attending an event. Derived per request, never persisted."""
    type: ParticipantType
    id: int
    display_name: str
    last_name: str
    first_name: str
    phone: str = ""
    email: str = ""
    rsvp_id: Optional[int] = None

    @property
    def ref(self) -> ParticipantRef:
        return ParticipantRef(self.type, self.id)
