from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol

from bingo.engine.errors import ExhaustedPool

from .config import AutoDrawSettings
from .types import AutoDrawSummary, DrawOutcome, StopReason


class DrawClientProtocol(Protocol):
    async def draw_next(self) -> DrawOutcome:
        ...

    async def close(self) -> None:
        ...


class AutoDrawScheduler:
    """Repeatedly draws the next number on a fixed cadence.

    Stops on ``ExhaustedPool``, ``stop()``, ``max_draws`` or the first
    failed draw. A failed draw is never retried: the server may already
    have committed it. Cancelling the task stops future draws only.
    """

    def __init__(
        self,
        settings: AutoDrawSettings,
        client: DrawClientProtocol,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._settings = settings
        self._client = client
        self._logger = logger or logging.getLogger("bingo.autodraw")
        self._stop_event = asyncio.Event()
        self._draws = 0

    @property
    def draws(self) -> int:
        return self._draws

    def stop(self) -> None:
        self._stop_event.set()

    async def run_forever(self) -> AutoDrawSummary:
        interval = self._settings.draw_interval_seconds
        self._logger.info("Auto-draw started; interval=%ss", interval)
        try:
            reason = await self._loop(interval)
        except asyncio.CancelledError:
            self._logger.info("Auto-draw cancelled after %s draws", self._draws)
            raise
        finally:
            await self._client.close()
        self._logger.info("Auto-draw finished after %s draws (%s)", self._draws, reason.value)
        return AutoDrawSummary(draws=self._draws, reason=reason)

    async def run_once(self) -> Optional[DrawOutcome]:
        try:
            return await self._attempt_draw()
        except ExhaustedPool:
            self._logger.info("Pool exhausted; nothing left to draw.")
            return None
        finally:
            await self._client.close()

    async def _loop(self, interval: float) -> StopReason:
        max_draws = self._settings.max_draws
        while not self._stop_event.is_set():
            try:
                outcome = await self._attempt_draw()
            except ExhaustedPool:
                return StopReason.EXHAUSTED
            except Exception as exc:
                self._logger.exception("Draw failed; stopping auto-draw: %s", exc)
                return StopReason.ERROR

            if outcome.exhausted:
                return StopReason.EXHAUSTED
            if max_draws is not None and self._draws >= max_draws:
                return StopReason.MAX_DRAWS

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=interval)
            except asyncio.TimeoutError:
                continue
        return StopReason.STOPPED

    async def _attempt_draw(self) -> DrawOutcome:
        outcome = await self._client.draw_next()
        self._draws += 1
        self._logger.info(
            "Round %s drew %s-%s (%s/75)",
            outcome.round_id,
            outcome.letter,
            outcome.number,
            outcome.drawn_count,
        )
        return outcome
