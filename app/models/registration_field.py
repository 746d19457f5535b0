# File: app/models/registration_field.py
import enum
import json
from typing import List, Optional

from sqlalchemy import Column, String, Integer, Text, Boolean, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from app.models.base import BaseModel
from app.models.participant import ParticipantType

class FieldScope(str, enum.Enum):
    PER_PERSON = "per_person"
    PER_YOUTH = "per_youth"
    PER_FAMILY = "per_family"

class FieldType(str, enum.Enum):
    TEXT = "text"
    NUMERIC = "numeric"
    SELECT = "select"
    BOOLEAN = "boolean"

def _values(enum_cls):
    return [member.value for member in enum_cls]

class RegistrationFieldDefinition(BaseModel):
    __tablename__ = "event_registration_field_definitions"

    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    scope = Column(Enum(FieldScope, values_callable=_values), nullable=False)
    field_type = Column(Enum(FieldType, values_callable=_values), nullable=False)
    required = Column(Boolean, default=False, nullable=False)
    option_list = Column(Text, nullable=True)  # JSON array, select fields only
    sequence_number = Column(Integer, default=0, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    # Relationships
    event = relationship("Event", back_populates="registration_fields")
    data = relationship("RegistrationFieldData", back_populates="field", cascade="all, delete-orphan")

    @property
    def options(self) -> Optional[List[str]]:
        """Option list decoded once from its stored JSON form."""
        if self.option_list is None:
            return None
        return json.loads(self.option_list)

    def applies_to(self, participant_type: ParticipantType) -> bool:
        if self.scope == FieldScope.PER_PERSON:
            return True
        if self.scope == FieldScope.PER_YOUTH:
            return participant_type == ParticipantType.YOUTH
        # Family answers are recorded against the RSVP's adults
        return participant_type == ParticipantType.ADULT

class RegistrationFieldData(BaseModel):
    __tablename__ = "event_registration_field_data"
    __table_args__ = (
        UniqueConstraint(
            "event_registration_field_definition_id",
            "participant_type",
            "participant_id",
            name="uq_field_data_participant",
        ),
    )

    event_registration_field_definition_id = Column(
        Integer,
        ForeignKey("event_registration_field_definitions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    participant_type = Column(Enum(ParticipantType, values_callable=_values), nullable=False)
    participant_id = Column(Integer, nullable=False)
    value = Column(Text, nullable=True)

    # Relationships
    field = relationship("RegistrationFieldDefinition", back_populates="data")
