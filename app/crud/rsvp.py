# File: app/crud/rsvp.py
from typing import List, Optional, Tuple
from sqlalchemy import case, func
from sqlalchemy.orm import Session
from app.crud.parent_relationship import parent_relationship
from app.models.participant import ParticipantType
from app.models.rsvp import Rsvp, RsvpMember

class CRUDRsvp:

    def get(self, db: Session, id: int) -> Optional[Rsvp]:
        return db.get(Rsvp, id)

    def get_for_family_by_adult(self, db: Session, *, event_id: int, adult_id: int) -> Optional[Rsvp]:
        """RSVP created by the adult or any co-parent, preferring the adult's own."""
        if event_id <= 0 or adult_id <= 0:
            return None

        creators = [adult_id] + [
            co_parent.id for co_parent in parent_relationship.list_co_parents_for_adult(db, adult_id=adult_id)
        ]
        return (
            db.query(Rsvp)
            .filter(Rsvp.event_id == event_id, Rsvp.created_by_user_id.in_(creators))
            .order_by(case((Rsvp.created_by_user_id == adult_id, 0), else_=1), Rsvp.id)
            .first()
        )

    def list_yes_for_event(self, db: Session, *, event_id: int) -> List[Rsvp]:
        return (
            db.query(Rsvp)
            .filter(Rsvp.event_id == event_id, func.lower(Rsvp.answer) == "yes")
            .order_by(Rsvp.id)
            .all()
        )

    def get_member_ids_by_type(self, db: Session, *, rsvp_id: int) -> Tuple[List[int], List[int]]:
        """Distinct (adult_ids, youth_ids) selected on an RSVP, in selection order."""
        adult_ids: List[int] = []
        youth_ids: List[int] = []
        if rsvp_id <= 0:
            return adult_ids, youth_ids

        members = db.query(RsvpMember).filter(RsvpMember.rsvp_id == rsvp_id).order_by(RsvpMember.id).all()
        for member in members:
            if member.participant_type == ParticipantType.ADULT and member.adult_id:
                if member.adult_id not in adult_ids:
                    adult_ids.append(member.adult_id)
            elif member.participant_type == ParticipantType.YOUTH and member.youth_id:
                if member.youth_id not in youth_ids:
                    youth_ids.append(member.youth_id)
        return adult_ids, youth_ids

    def create_with_members(
        self,
        db: Session,
        *,
        event_id: int,
        created_by_user_id: int,
        answer: str = "yes",
        adult_ids: Optional[List[int]] = None,
        youth_ids: Optional[List[int]] = None,
    ) -> Rsvp:
        db_obj = Rsvp(event_id=event_id, created_by_user_id=created_by_user_id, answer=answer)
        for adult_id in adult_ids or []:
            db_obj.members.append(RsvpMember(event_id=event_id, participant_type=ParticipantType.ADULT, adult_id=adult_id))
        for youth_id in youth_ids or []:
            db_obj.members.append(RsvpMember(event_id=event_id, participant_type=ParticipantType.YOUTH, youth_id=youth_id))
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

rsvp = CRUDRsvp()
