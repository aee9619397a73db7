from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Protocol, Tuple

from .cards import Card

Clock = Callable[[], dt.datetime]


def utcnow() -> dt.datetime:
    """Naive UTC timestamp, matching how the store persists ``DateTime`` columns."""
    return dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)


class RoundStatus(str, Enum):
    ACTIVE = "active"
    FINISHED = "finished"


@dataclass(frozen=True)
class RoundSnapshot:
    id: str
    status: RoundStatus
    drawn_numbers: Tuple[int, ...]
    created_at: dt.datetime
    finished_at: Optional[dt.datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status is RoundStatus.ACTIVE


@dataclass(frozen=True)
class ParticipantSnapshot:
    id: str
    round_id: str
    user_id: str
    card: Card
    marked_numbers: FrozenSet[int]
    has_bingo: bool
    created_at: dt.datetime
    bingo_claimed_at: Optional[dt.datetime] = None

    def copy(self, **updates) -> "ParticipantSnapshot":
        return replace(self, **updates)


Fields = Mapping[str, Any]


class RoundStore(Protocol):
    """Durable holder of rounds.

    ``update_round`` is a single-record compare-and-set: ``fields`` are
    written only if every item in ``expected`` still matches, otherwise
    nothing is written and ``None`` is returned.
    """

    def create_round(self) -> RoundSnapshot:
        ...

    def update_round(
        self, round_id: str, fields: Fields, expected: Optional[Fields] = None
    ) -> Optional[RoundSnapshot]:
        ...

    def get_round(self, round_id: str) -> Optional[RoundSnapshot]:
        ...

    def get_active_round(self) -> Optional[RoundSnapshot]:
        ...

    def list_rounds(
        self, ids: Optional[Iterable[str]] = None, status: Optional[RoundStatus] = None
    ) -> List[RoundSnapshot]:
        ...


class ParticipantStore(Protocol):
    def create_participant(self, round_id: str, user_id: str, card: Card) -> ParticipantSnapshot:
        ...

    def update_participant(
        self, participant_id: str, fields: Fields, expected: Optional[Fields] = None
    ) -> Optional[ParticipantSnapshot]:
        ...

    def delete_participant(self, participant_id: str) -> bool:
        ...

    def get_participant(self, participant_id: str) -> Optional[ParticipantSnapshot]:
        ...

    def list_participants(
        self,
        round_id: Optional[str] = None,
        user_id: Optional[str] = None,
        has_bingo: Optional[bool] = None,
        order_by: str = "created_at",
    ) -> List[ParticipantSnapshot]:
        ...


def expected_from(snapshot: Any, *names: str) -> Dict[str, Any]:
    return {name: getattr(snapshot, name) for name in names}
