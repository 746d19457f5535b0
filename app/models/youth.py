# File: app/models/youth.py
from sqlalchemy import Column, String, Integer
from sqlalchemy.orm import relationship
from app.models.base import BaseModel

class Youth(BaseModel):
    __tablename__ = "youth"

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    preferred_name = Column(String(100), nullable=True)
    grade = Column(Integer, nullable=True)

    # Relationships
    parent_links = relationship("ParentRelationship", back_populates="youth", cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()
