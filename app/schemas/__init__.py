from .registration_field import RegistrationField, RegistrationFieldCreate, RegistrationFieldUpdate, NextSequenceNumber
from .registration_data import (
    ParticipantRow, RegistrationGrid, FormInput, FormParticipant, RegistrationForm, CompletionStatus, SaveResult,
)

__all__ = [
    "RegistrationField", "RegistrationFieldCreate", "RegistrationFieldUpdate", "NextSequenceNumber",
    "ParticipantRow", "RegistrationGrid", "FormInput", "FormParticipant", "RegistrationForm",
    "CompletionStatus", "SaveResult",
]
