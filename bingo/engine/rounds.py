from __future__ import annotations

import logging
import random
from typing import Optional

from .draws import DrawPool
from .errors import StaleReference
from .types import Clock, RoundSnapshot, RoundStatus, RoundStore, utcnow

logger = logging.getLogger(__name__)


class RoundStateMachine:
    """Lifecycle of rounds: ``active`` -> ``finished``.

    The only component allowed to append a draw. Callers are expected to
    have passed the operator privilege check before invoking ``create``,
    ``draw_next`` or ``finish``.
    """

    def __init__(
        self,
        store: RoundStore,
        rng: Optional[random.Random] = None,
        clock: Clock = utcnow,
    ) -> None:
        self._store = store
        self._rng = rng
        self._clock = clock

    def current(self) -> Optional[RoundSnapshot]:
        return self._store.get_active_round()

    def create(self) -> RoundSnapshot:
        # Compensating write for the single-active-round rule: finish every
        # active round first, then insert. There is no multi-record
        # transaction, so a concurrent create may briefly leave two.
        now = self._clock()
        for active in self._store.list_rounds(status=RoundStatus.ACTIVE):
            finished = self._store.update_round(
                active.id,
                {"status": RoundStatus.FINISHED, "finished_at": now},
                expected={"status": RoundStatus.ACTIVE},
            )
            if finished is not None:
                logger.info("Auto-finished round %s before creating a new one", active.id)

        round_ = self._store.create_round()
        logger.info("Created round %s", round_.id)
        return round_

    def draw_next(self, round_: RoundSnapshot) -> int:
        if not round_.is_active:
            raise StaleReference(
                f"Round {round_.id} is not active.", details={"round_id": round_.id}
            )

        pool = DrawPool(round_.drawn_numbers)
        number, updated_pool = pool.draw(self._rng)

        updated = self._store.update_round(
            round_.id,
            {"drawn_numbers": updated_pool.drawn},
            expected={"status": RoundStatus.ACTIVE, "drawn_numbers": pool.drawn},
        )
        if updated is None:
            raise StaleReference(
                f"Round {round_.id} changed since it was read; refetch and retry.",
                details={"round_id": round_.id},
            )
        logger.info("Round %s drew %s (%s/75)", round_.id, number, len(updated_pool))
        return number

    def finish(self, round_: RoundSnapshot) -> RoundSnapshot:
        finished = self._store.update_round(
            round_.id,
            {"status": RoundStatus.FINISHED, "finished_at": self._clock()},
            expected={"status": RoundStatus.ACTIVE},
        )
        if finished is None:
            raise StaleReference(
                f"Round {round_.id} is not active.", details={"round_id": round_.id}
            )
        logger.info("Finished round %s after %s draws", finished.id, len(finished.drawn_numbers))
        return finished
