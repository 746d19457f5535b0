# File: app/models/rsvp.py
from sqlalchemy import Column, String, Integer, ForeignKey, Enum, Text
from sqlalchemy.orm import relationship
from app.models.base import BaseModel
from app.models.participant import ParticipantType

class Rsvp(BaseModel):
    __tablename__ = "rsvps"

    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    created_by_user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    answer = Column(String(10), nullable=False, default="yes")  # yes, maybe, no
    comments = Column(Text, nullable=True)

    # Relationships
    event = relationship("Event", back_populates="rsvps")
    members = relationship(
        "RsvpMember",
        back_populates="rsvp",
        cascade="all, delete-orphan",
        order_by="RsvpMember.id",
    )

class RsvpMember(BaseModel):
    __tablename__ = "rsvp_members"

    rsvp_id = Column(Integer, ForeignKey("rsvps.id", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    participant_type = Column(Enum(ParticipantType, values_callable=lambda e: [m.value for m in e]), nullable=False)
    youth_id = Column(Integer, ForeignKey("youth.id"), nullable=True)
    adult_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Relationships
    rsvp = relationship("Rsvp", back_populates="members")
