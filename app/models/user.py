# File: app/models/user.py
from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship
from app.models.base import BaseModel

class User(BaseModel):
    """Adult member of the pack roster."""
    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone_cell = Column(String(30), nullable=True)
    phone_home = Column(String(30), nullable=True)
    is_admin = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    child_links = relationship("ParentRelationship", back_populates="adult", cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    @property
    def phone(self) -> str:
        return self.phone_cell or self.phone_home or ""
