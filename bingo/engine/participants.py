from __future__ import annotations

import logging
import random
from typing import Optional

from .cards import generate_card
from .errors import AlreadyJoined, NotFound, StaleReference
from .types import ParticipantSnapshot, ParticipantStore, RoundSnapshot

logger = logging.getLogger(__name__)


def join_round(
    store: ParticipantStore,
    round_: RoundSnapshot,
    user_id: str,
    rng: Optional[random.Random] = None,
) -> ParticipantSnapshot:
    """Give ``user_id`` a freshly generated card in an active round.

    The card is generated exactly once, here; it is never regenerated.
    """
    if not round_.is_active:
        raise StaleReference(
            f"Round {round_.id} is not accepting participants.", details={"round_id": round_.id}
        )
    if store.list_participants(round_id=round_.id, user_id=user_id):
        raise AlreadyJoined(round_.id, user_id)

    participant = store.create_participant(round_.id, user_id, generate_card(rng))
    logger.info("User %s joined round %s as participant %s", user_id, round_.id, participant.id)
    return participant


def remove_participant(store: ParticipantStore, participant_id: str) -> None:
    if not store.delete_participant(participant_id):
        raise NotFound(f"Participant {participant_id} not found")
    logger.info("Removed participant %s", participant_id)
