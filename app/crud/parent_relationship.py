# File: app/crud/parent_relationship.py
from typing import List
from sqlalchemy.orm import Session, aliased
from app.models.parent_relationship import ParentRelationship
from app.models.user import User
from app.models.youth import Youth

class CRUDParentRelationship:

    def list_children_for_adult(self, db: Session, *, adult_id: int) -> List[Youth]:
        return (
            db.query(Youth)
            .join(ParentRelationship, ParentRelationship.youth_id == Youth.id)
            .filter(ParentRelationship.adult_id == adult_id)
            .order_by(Youth.last_name, Youth.first_name)
            .all()
        )

    def list_co_parents_for_adult(self, db: Session, *, adult_id: int) -> List[User]:
        """Adults sharing at least one child with `adult_id`, excluding that adult."""
        mine = aliased(ParentRelationship)
        theirs = aliased(ParentRelationship)
        return (
            db.query(User)
            .join(theirs, theirs.adult_id == User.id)
            .join(mine, mine.youth_id == theirs.youth_id)
            .filter(mine.adult_id == adult_id, theirs.adult_id != adult_id)
            .distinct()
            .order_by(User.last_name, User.first_name)
            .all()
        )

    def link(self, db: Session, *, adult_id: int, youth_id: int) -> ParentRelationship:
        db_obj = ParentRelationship(adult_id=adult_id, youth_id=youth_id)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

parent_relationship = CRUDParentRelationship()
