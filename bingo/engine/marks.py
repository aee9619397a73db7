from __future__ import annotations

import logging

from .cards import FREE
from .errors import FreeCell, LedgerFrozen, NotDrawn, StaleReference
from .types import ParticipantSnapshot, ParticipantStore, RoundSnapshot, expected_from

logger = logging.getLogger(__name__)


def ensure_same_round(participant: ParticipantSnapshot, round_: RoundSnapshot) -> None:
    if participant.round_id != round_.id:
        raise StaleReference(
            "Participant does not belong to this round.",
            details={"participant_id": participant.id, "round_id": round_.id},
        )
    if not round_.is_active:
        raise StaleReference(
            f"Round {round_.id} is no longer active.", details={"round_id": round_.id}
        )


def toggle_mark(
    store: ParticipantStore,
    participant: ParticipantSnapshot,
    round_: RoundSnapshot,
    number: int,
) -> ParticipantSnapshot:
    """Flip ``number`` in the participant's marked set.

    Only drawn numbers may be toggled, the FREE cell never is, and a card
    with a bingo is frozen.
    """
    ensure_same_round(participant, round_)
    if number == FREE:
        raise FreeCell()
    if participant.has_bingo:
        raise LedgerFrozen(participant.id)
    if number not in round_.drawn_numbers:
        raise NotDrawn(number)

    marked = set(participant.marked_numbers)
    if number in marked:
        marked.discard(number)
    else:
        marked.add(number)

    updated = store.update_participant(
        participant.id,
        {"marked_numbers": frozenset(marked)},
        expected=expected_from(participant, "marked_numbers", "has_bingo"),
    )
    if updated is None:
        raise StaleReference(
            "Card changed since it was read; refetch and retry.",
            details={"participant_id": participant.id},
        )
    logger.debug(
        "Participant %s toggled %s (%s marked)", participant.id, number, len(updated.marked_numbers)
    )
    return updated
