# File: app/models/parent_relationship.py
from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.models.base import BaseModel

class ParentRelationship(BaseModel):
    __tablename__ = "parent_relationships"
    __table_args__ = (
        UniqueConstraint("youth_id", "adult_id", name="uq_parent_relationship"),
    )

    youth_id = Column(Integer, ForeignKey("youth.id", ondelete="CASCADE"), nullable=False, index=True)
    adult_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Relationships
    youth = relationship("Youth", back_populates="parent_links")
    adult = relationship("User", back_populates="child_links")
