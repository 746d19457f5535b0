# File: app/models/activity_log.py
from sqlalchemy import Column, String, Integer, ForeignKey, Text
from app.models.base import BaseModel

class ActivityLog(BaseModel):
    __tablename__ = "activity_log"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    action_type = Column(String(100), nullable=False, index=True)
    json_metadata = Column(Text, nullable=True)  # JSON string
