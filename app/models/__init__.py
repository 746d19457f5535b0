from .base import BaseModel
from .user import User
from .youth import Youth
from .parent_relationship import ParentRelationship
from .event import Event
from .participant import ParticipantType, ParticipantRef, Participant
from .rsvp import Rsvp, RsvpMember
from .registration_field import RegistrationFieldDefinition, RegistrationFieldData, FieldScope, FieldType
from .activity_log import ActivityLog

__all__ = [
    "BaseModel", "User", "Youth", "ParentRelationship", "Event", "ParticipantType", "ParticipantRef", "Participant",
    "Rsvp", "RsvpMember", "RegistrationFieldDefinition", "RegistrationFieldData",
    "FieldScope", "FieldType", "ActivityLog",
]
