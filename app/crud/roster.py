# File: app/crud/roster.py
from typing import Any, Dict, Optional
from sqlalchemy.orm import Session
from app.crud.base import CRUDBase
from app.models.user import User
from app.models.youth import Youth

class CRUDUser(CRUDBase[User, Any, Dict[str, Any]]):

    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

class CRUDYouth(CRUDBase[Youth, Any, Dict[str, Any]]):
    pass

user = CRUDUser(User)
youth = CRUDYouth(Youth)
