from __future__ import annotations

import random
import secrets
from typing import Iterable, List, Optional, Tuple

from .errors import ExhaustedPool

POOL_MIN = 1
POOL_MAX = 75
POOL_SIZE = POOL_MAX - POOL_MIN + 1

_system_random = secrets.SystemRandom()


class DrawPool:
    """The ordered draw history of one round.

    Instances are immutable; ``draw`` returns the drawn number together
    with a new pool, leaving persistence to the caller.
    """

    __slots__ = ("_drawn", "_seen")

    def __init__(self, drawn: Iterable[int] = ()) -> None:
        numbers = tuple(int(n) for n in drawn)
        seen = frozenset(numbers)
        if len(seen) != len(numbers):
            raise ValueError("Draw history contains duplicates")
        for n in numbers:
            if not POOL_MIN <= n <= POOL_MAX:
                raise ValueError(f"Drawn numbers must be between {POOL_MIN} and {POOL_MAX}")
        self._drawn = numbers
        self._seen = seen

    @property
    def drawn(self) -> Tuple[int, ...]:
        return self._drawn

    @property
    def last(self) -> Optional[int]:
        return self._drawn[-1] if self._drawn else None

    @property
    def is_exhausted(self) -> bool:
        return len(self._drawn) >= POOL_SIZE

    def remaining(self) -> List[int]:
        return [n for n in range(POOL_MIN, POOL_MAX + 1) if n not in self._seen]

    def draw(self, rng: Optional[random.Random] = None) -> Tuple[int, "DrawPool"]:
        available = self.remaining()
        if not available:
            raise ExhaustedPool()
        rng = rng or _system_random
        number = available[rng.randrange(len(available))]
        return number, DrawPool(self._drawn + (number,))

    def __contains__(self, number: object) -> bool:
        return number in self._seen

    def __len__(self) -> int:
        return len(self._drawn)

    def __repr__(self) -> str:
        return f"DrawPool(drawn={len(self._drawn)}/{POOL_SIZE})"
