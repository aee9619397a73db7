from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StopReason(str, Enum):
    EXHAUSTED = "exhausted"
    STOPPED = "stopped"
    MAX_DRAWS = "max_draws"
    ERROR = "error"


@dataclass(frozen=True)
class DrawOutcome:
    round_id: str
    number: int
    letter: str
    drawn_count: int
    exhausted: bool


@dataclass(frozen=True)
class AutoDrawSummary:
    draws: int
    reason: StopReason
