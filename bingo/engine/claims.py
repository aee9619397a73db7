from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import AbstractSet, Iterable, List, Sequence

from .cards import FREE, REQUIRED_MARKS, Card, card_to_grid
from .errors import Incomplete, IncompleteCard, LedgerFrozen, StaleReference, UnverifiedMark
from .marks import ensure_same_round
from .types import Clock, ParticipantSnapshot, ParticipantStore, RoundSnapshot, utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClaimResult:
    participant: ParticipantSnapshot
    claimed_at: dt.datetime


def check_claim(card: Card, marked: AbstractSet[int], drawn: Sequence[int]) -> None:
    """Raise the first failed bingo precondition, or return if the card is covered."""
    if len(marked) < REQUIRED_MARKS:
        raise Incomplete(REQUIRED_MARKS - len(marked))

    drawn_set = set(drawn)
    undrawn = [n for n in marked if n not in drawn_set]
    if undrawn:
        raise UnverifiedMark(undrawn)

    missing = [n for row in card_to_grid(card) for n in row if n != FREE and n not in marked]
    if missing:
        raise IncompleteCard(missing)


class ClaimVerifier:
    """Server-side verification of bingo claims.

    A claim is accepted only if every non-FREE cell is marked and every
    mark is present in the round's draw history. The win is written once:
    the update is conditional on ``has_bingo`` still being false.
    """

    def __init__(self, store: ParticipantStore, clock: Clock = utcnow) -> None:
        self._store = store
        self._clock = clock

    def claim_bingo(self, participant: ParticipantSnapshot, round_: RoundSnapshot) -> ClaimResult:
        ensure_same_round(participant, round_)
        if participant.has_bingo:
            raise LedgerFrozen(participant.id)

        try:
            check_claim(participant.card, participant.marked_numbers, round_.drawn_numbers)
        except (Incomplete, UnverifiedMark, IncompleteCard) as exc:
            logger.info("Rejected claim from participant %s: %s", participant.id, exc.code)
            raise

        claimed_at = self._clock()
        updated = self._store.update_participant(
            participant.id,
            {"has_bingo": True, "bingo_claimed_at": claimed_at},
            expected={"has_bingo": False, "marked_numbers": participant.marked_numbers},
        )
        if updated is None:
            raise StaleReference(
                "Card changed since it was read; refetch before claiming.",
                details={"participant_id": participant.id},
            )
        logger.info(
            "BINGO: participant %s (user %s) in round %s at %s",
            updated.id,
            updated.user_id,
            round_.id,
            claimed_at.isoformat(),
        )
        return ClaimResult(participant=updated, claimed_at=claimed_at)


def rank_winners(participants: Iterable[ParticipantSnapshot]) -> List[ParticipantSnapshot]:
    """Winners in claim order; equal timestamps fall back to join order, then id."""
    winners = [p for p in participants if p.has_bingo and p.bingo_claimed_at is not None]
    return sorted(winners, key=lambda p: (p.bingo_claimed_at, p.created_at, p.id))
