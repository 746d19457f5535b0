"""Resolve RSVP member selections into participants and family authorization sets."""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Set

from sqlalchemy.orm import Session

from app import crud
from app.models.participant import Participant, ParticipantType
from app.models.rsvp import Rsvp

logger = logging.getLogger(__name__)


class RelationshipQueries(Protocol):
    """Parent/child graph lookups the resolver depends on."""

    def list_children_for_adult(self, db: Session, *, adult_id: int) -> list: ...

    def list_co_parents_for_adult(self, db: Session, *, adult_id: int) -> list: ...


@dataclass
class AuthorizedParticipants:
    """Participants whose answers an adult may write."""
    child_ids: Set[int] = field(default_factory=set)
    self_and_co_parent_ids: Set[int] = field(default_factory=set)


class ParticipantResolver:

    def __init__(self, relationships: Optional[RelationshipQueries] = None):
        self.relationships = relationships or crud.parent_relationship

    def resolve_participants(self, db: Session, event_id: int, rsvp_id: int) -> List[Participant]:
        """Adults then youth selected on one RSVP, skipping ids with no roster row."""
        rsvp = crud.rsvp.get(db, rsvp_id)
        if rsvp is None or rsvp.event_id != event_id:
            logger.warning(f"RSVP {rsvp_id} not found for event {event_id}")
            return []
        return self._participants_for_rsvp(db, rsvp)

    def resolve_event_participants(self, db: Session, event_id: int) -> List[Participant]:
        """Distinct participants across every "yes" RSVP of an event, first RSVP wins."""
        participants: List[Participant] = []
        seen = set()
        for rsvp in crud.rsvp.list_yes_for_event(db, event_id=event_id):
            for participant in self._participants_for_rsvp(db, rsvp):
                if participant.ref in seen:
                    continue
                seen.add(participant.ref)
                participants.append(participant)
        return participants

    def find_yes_rsvp_for_adult(self, db: Session, event_id: int, user_id: int) -> Optional[Rsvp]:
        rsvp = crud.rsvp.get_for_family_by_adult(db, event_id=event_id, adult_id=user_id)
        if rsvp is None or (rsvp.answer or "").lower() != "yes":
            return None
        return rsvp

    def resolve_authorized_participants_for_actor(self, db: Session, actor_user_id: int) -> AuthorizedParticipants:
        children = self.relationships.list_children_for_adult(db, adult_id=actor_user_id)
        co_parents = self.relationships.list_co_parents_for_adult(db, adult_id=actor_user_id)
        return AuthorizedParticipants(
            child_ids={int(child.id) for child in children},
            self_and_co_parent_ids={int(actor_user_id)} | {int(adult.id) for adult in co_parents},
        )

    def _participants_for_rsvp(self, db: Session, rsvp: Rsvp) -> List[Participant]:
        adult_ids, youth_ids = crud.rsvp.get_member_ids_by_type(db, rsvp_id=rsvp.id)
        adults = crud.user.get_many_by_ids(db, ids=adult_ids)
        youths = crud.youth.get_many_by_ids(db, ids=youth_ids)

        participants: List[Participant] = []
        for adult_id in adult_ids:
            adult = adults.get(adult_id)
            if adult is None:
                logger.warning(f"RSVP {rsvp.id} lists unknown adult {adult_id}; skipping")
                continue
            participants.append(Participant(
                type=ParticipantType.ADULT,
                id=adult.id,
                display_name=adult.full_name,
                last_name=adult.last_name or "",
                first_name=adult.first_name or "",
                phone=adult.phone,
                email=adult.email or "",
                rsvp_id=rsvp.id,
            ))

        for youth_id in youth_ids:
            youth = youths.get(youth_id)
            if youth is None:
                logger.warning(f"RSVP {rsvp.id} lists unknown youth {youth_id}; skipping")
                continue
            participants.append(Participant(
                type=ParticipantType.YOUTH,
                id=youth.id,
                display_name=youth.full_name,
                last_name=youth.last_name or "",
                first_name=youth.first_name or "",
                rsvp_id=rsvp.id,
            ))

        return participants


participant_resolver = ParticipantResolver()
