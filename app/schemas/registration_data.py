from pydantic import BaseModel
from typing import Dict, List, Optional
from app.schemas.registration_field import RegistrationField

class ParticipantRow(BaseModel):
    type: str
    id: int
    rsvp_id: Optional[int] = None
    display_name: str
    last_name: str
    first_name: str
    phone: str = ""
    email: str = ""
    # field definition id -> value ("" when never answered or answered empty)
    field_data: Dict[int, str] = {}

class RegistrationGrid(BaseModel):
    fields: List[RegistrationField]
    participants: List[ParticipantRow]

class FormInput(BaseModel):
    input_name: str
    field: RegistrationField
    current_value: str = ""

class FormParticipant(BaseModel):
    type: str
    id: int
    display_name: str
    marker_name: str
    inputs: List[FormInput]

class RegistrationForm(BaseModel):
    event_id: int
    event_name: str
    participants: List[FormParticipant]

class CompletionStatus(BaseModel):
    complete: bool
    missing: List[str]
    has_fields: bool = True

class SaveResult(BaseModel):
    success: bool
    message: str
    redirect_to: str
