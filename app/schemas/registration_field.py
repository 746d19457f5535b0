from pydantic import BaseModel
from typing import List, Optional, Union
from datetime import datetime

class RegistrationFieldCreate(BaseModel):
    name: str
    description: Optional[str] = None
    scope: str  # per_person, per_youth, per_family
    field_type: str  # text, numeric, select, boolean
    required: bool = False
    # JSON array text as typed into the admin form, or an already-split list
    option_list: Optional[Union[List[str], str]] = None
    sequence_number: int = 0

class RegistrationFieldUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    scope: Optional[str] = None
    field_type: Optional[str] = None
    required: Optional[bool] = None
    option_list: Optional[Union[List[str], str]] = None
    sequence_number: Optional[int] = None

class RegistrationField(BaseModel):
    id: int
    event_id: int
    name: str
    description: Optional[str] = None
    scope: str
    field_type: str
    required: bool
    option_list: Optional[List[str]] = None
    sequence_number: int
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, field) -> "RegistrationField":
        return cls(
            id=field.id,
            event_id=field.event_id,
            name=field.name,
            description=field.description,
            scope=field.scope.value,
            field_type=field.field_type.value,
            required=bool(field.required),
            option_list=field.options,
            sequence_number=field.sequence_number,
            created_by=field.created_by,
            created_at=field.created_at,
        )

class NextSequenceNumber(BaseModel):
    sequence_number: int
