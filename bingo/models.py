from __future__ import annotations

import json
from typing import Dict, FrozenSet, Iterable, List

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base

from .engine.cards import Card
from .engine.types import ParticipantSnapshot, RoundSnapshot, RoundStatus, utcnow

Base = declarative_base()


def encode_numbers(numbers: Iterable[int]) -> str:
    return json.dumps([int(n) for n in numbers])


def encode_marks(numbers: Iterable[int]) -> str:
    # Marks are a set; persist them sorted so equal sets compare equal as text.
    return encode_numbers(sorted(numbers))


class Round(Base):
    __tablename__ = "rounds"
    __table_args__ = (Index("ix_rounds_status", "status"),)

    id = Column(String(36), primary_key=True)
    status = Column(String(16), nullable=False, default=RoundStatus.ACTIVE.value)
    drawn_numbers = Column(Text, nullable=False, default="[]")
    created_at = Column(DateTime, default=utcnow, nullable=False)
    finished_at = Column(DateTime, nullable=True)

    def set_numbers(self, numbers: Iterable[int]) -> None:
        self.drawn_numbers = encode_numbers(numbers)

    def get_numbers(self) -> List[int]:
        return json.loads(self.drawn_numbers)

    def to_snapshot(self) -> RoundSnapshot:
        return RoundSnapshot(
            id=self.id,
            status=RoundStatus(self.status),
            drawn_numbers=tuple(self.get_numbers()),
            created_at=self.created_at,
            finished_at=self.finished_at,
        )


class Participant(Base):
    __tablename__ = "participants"
    __table_args__ = (
        UniqueConstraint("round_id", "user_id", name="uq_participants_round_user"),
        Index("ix_participants_round_bingo", "round_id", "has_bingo"),
    )

    id = Column(String(36), primary_key=True)
    round_id = Column(String(36), ForeignKey("rounds.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(64), nullable=False, index=True)
    card = Column(Text, nullable=False)
    marked_numbers = Column(Text, nullable=False, default="[]")
    has_bingo = Column(Boolean, nullable=False, default=False)
    bingo_claimed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    def set_card(self, card: Card) -> None:
        self.card = json.dumps(card.to_dict())

    def get_card(self) -> Card:
        return Card.from_dict(json.loads(self.card))

    def set_marks(self, numbers: Iterable[int]) -> None:
        self.marked_numbers = encode_marks(numbers)

    def get_marks(self) -> FrozenSet[int]:
        return frozenset(json.loads(self.marked_numbers))

    def to_snapshot(self) -> ParticipantSnapshot:
        return ParticipantSnapshot(
            id=self.id,
            round_id=self.round_id,
            user_id=self.user_id,
            card=self.get_card(),
            marked_numbers=self.get_marks(),
            has_bingo=bool(self.has_bingo),
            created_at=self.created_at,
            bingo_claimed_at=self.bingo_claimed_at,
        )


def round_to_dict(round_: RoundSnapshot) -> Dict[str, object]:
    return {
        "round_id": round_.id,
        "status": round_.status.value,
        "drawn_numbers": list(round_.drawn_numbers),
        "created_at": round_.created_at.isoformat() if round_.created_at else None,
        "finished_at": round_.finished_at.isoformat() if round_.finished_at else None,
    }


def participant_to_dict(participant: ParticipantSnapshot) -> Dict[str, object]:
    return {
        "participant_id": participant.id,
        "round_id": participant.round_id,
        "user_id": participant.user_id,
        "card": participant.card.to_dict(),
        "marked_numbers": sorted(participant.marked_numbers),
        "has_bingo": participant.has_bingo,
        "bingo_claimed_at": (
            participant.bingo_claimed_at.isoformat() if participant.bingo_claimed_at else None
        ),
        "created_at": participant.created_at.isoformat() if participant.created_at else None,
    }
