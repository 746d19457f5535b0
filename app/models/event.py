# File: app/models/event.py
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import relationship
from app.models.base import BaseModel

class Event(BaseModel):
    __tablename__ = "events"

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    starts_at = Column(DateTime, nullable=True)
    ends_at = Column(DateTime, nullable=True)

    # Relationships
    rsvps = relationship("Rsvp", back_populates="event", cascade="all, delete-orphan")
    registration_fields = relationship(
        "RegistrationFieldDefinition",
        back_populates="event",
        cascade="all, delete-orphan",
    )
