# File: app/crud/activity_log.py
import json
import logging
from typing import Any, Dict, List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.models.activity_log import ActivityLog

logger = logging.getLogger(__name__)

class CRUDActivityLog:

    def log(self, db: Session, *, user_id: Optional[int], action_type: str, meta: Optional[Dict[str, Any]] = None) -> None:
        """Record an audit entry. Never raises: audit failures must not fail the audited operation."""
        try:
            db.add(ActivityLog(
                user_id=user_id,
                action_type=action_type,
                json_metadata=json.dumps(meta or {}),
            ))
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to write activity log '{action_type}': {str(e)}")

    def list_for_action(self, db: Session, *, action_type: str) -> List[ActivityLog]:
        return (
            db.query(ActivityLog)
            .filter(ActivityLog.action_type == action_type)
            .order_by(ActivityLog.id)
            .all()
        )

activity_log = CRUDActivityLog()
