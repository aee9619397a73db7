from __future__ import annotations

import secrets
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from ..db import session_scope
from ..engine.cards import Card
from ..engine.errors import AlreadyJoined
from ..engine.types import ParticipantSnapshot, utcnow
from ..models import Participant, encode_marks

_PARTICIPANT_FIELDS = ("marked_numbers", "has_bingo", "bingo_claimed_at")


def _encode_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for key, value in fields.items():
        if key not in _PARTICIPANT_FIELDS:
            raise ValueError(f"Unknown participant field: {key}")
        if key == "marked_numbers":
            values[key] = encode_marks(value)
        elif key == "has_bingo":
            values[key] = bool(value)
        else:
            values[key] = value
    return values


class ParticipantRepository:
    def create_participant(self, round_id: str, user_id: str, card: Card) -> ParticipantSnapshot:
        try:
            with session_scope() as session:
                participant = Participant(
                    id=secrets.token_hex(8),
                    round_id=round_id,
                    user_id=user_id,
                    has_bingo=False,
                    created_at=utcnow(),
                )
                participant.set_card(card)
                participant.set_marks([])
                session.add(participant)
                session.flush()
                return participant.to_snapshot()
        except IntegrityError as exc:
            raise AlreadyJoined(round_id, user_id) from exc

    def update_participant(
        self,
        participant_id: str,
        fields: Mapping[str, Any],
        expected: Optional[Mapping[str, Any]] = None,
    ) -> Optional[ParticipantSnapshot]:
        stmt = update(Participant).where(Participant.id == participant_id)
        for key, value in _encode_fields(expected or {}).items():
            column = getattr(Participant, key)
            stmt = stmt.where(column.is_(None) if value is None else column == value)
        stmt = stmt.values(**_encode_fields(fields)).execution_options(synchronize_session=False)

        with session_scope() as session:
            result = session.execute(stmt)
            if result.rowcount == 0:
                return None
            participant = session.get(Participant, participant_id, populate_existing=True)
            return participant.to_snapshot()

    def delete_participant(self, participant_id: str) -> bool:
        with session_scope() as session:
            deleted = session.query(Participant).filter(Participant.id == participant_id).delete()
            return deleted > 0

    def get_participant(self, participant_id: str) -> Optional[ParticipantSnapshot]:
        with session_scope() as session:
            participant = session.get(Participant, participant_id)
            return participant.to_snapshot() if participant else None

    def list_participants(
        self,
        round_id: Optional[str] = None,
        user_id: Optional[str] = None,
        has_bingo: Optional[bool] = None,
        order_by: str = "created_at",
    ) -> List[ParticipantSnapshot]:
        with session_scope() as session:
            query = session.query(Participant)
            if round_id is not None:
                query = query.filter(Participant.round_id == round_id)
            if user_id is not None:
                query = query.filter(Participant.user_id == user_id)
            if has_bingo is not None:
                query = query.filter(Participant.has_bingo.is_(bool(has_bingo)))

            if order_by == "created_at":
                query = query.order_by(Participant.created_at, Participant.id)
            elif order_by == "-created_at":
                query = query.order_by(Participant.created_at.desc(), Participant.id)
            elif order_by == "bingo_claimed_at":
                query = query.order_by(
                    Participant.bingo_claimed_at, Participant.created_at, Participant.id
                )
            else:
                raise ValueError(f"Unsupported ordering: {order_by}")
            return [p.to_snapshot() for p in query.all()]
