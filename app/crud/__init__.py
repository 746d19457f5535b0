from .event import event
from .roster import user, youth
from .parent_relationship import parent_relationship
from .rsvp import rsvp
from .registration_field import registration_field
from .registration_data import registration_data
from .activity_log import activity_log

__all__ = [
    "event", "user", "youth", "parent_relationship", "rsvp",
    "registration_field", "registration_data", "activity_log",
]
