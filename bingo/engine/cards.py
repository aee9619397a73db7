from __future__ import annotations

import random
import secrets
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

FREE = 0
CARD_SIZE = 5
FREE_ROW = 2

COLUMN_RANGES: Dict[str, Tuple[int, int]] = {
    "B": (1, 15),
    "I": (16, 30),
    "N": (31, 45),
    "G": (46, 60),
    "O": (61, 75),
}
COLUMNS: Tuple[str, ...] = tuple(COLUMN_RANGES)

# Every card cell except FREE must be covered for a bingo.
REQUIRED_MARKS = CARD_SIZE * CARD_SIZE - 1

_system_random = secrets.SystemRandom()


@dataclass(frozen=True)
class Card:
    """A participant's 5x5 card, stored column by column."""

    B: Tuple[int, ...]
    I: Tuple[int, ...]  # noqa: E741
    N: Tuple[int, ...]
    G: Tuple[int, ...]
    O: Tuple[int, ...]  # noqa: E741

    def column(self, letter: str) -> Tuple[int, ...]:
        return getattr(self, letter)

    def numbers(self) -> List[int]:
        """All non-FREE values on the card."""
        return [n for letter in COLUMNS for n in self.column(letter) if n != FREE]

    def to_dict(self) -> Dict[str, List[int]]:
        return {letter: list(self.column(letter)) for letter in COLUMNS}

    @classmethod
    def from_dict(cls, data: Mapping[str, Sequence[int]]) -> "Card":
        columns = {}
        for letter, (low, high) in COLUMN_RANGES.items():
            try:
                values = tuple(int(n) for n in data[letter])
            except KeyError as exc:
                raise ValueError(f"Card is missing column {letter}") from exc
            if len(values) != CARD_SIZE:
                raise ValueError(f"Column {letter} must hold {CARD_SIZE} numbers")
            if len(set(values)) != CARD_SIZE:
                raise ValueError(f"Column {letter} contains duplicates")
            for row, value in enumerate(values):
                if letter == "N" and row == FREE_ROW:
                    if value != FREE:
                        raise ValueError("Centre cell must be FREE (0)")
                    continue
                if not low <= value <= high:
                    raise ValueError(f"Column {letter} values must be between {low} and {high}")
            columns[letter] = values
        return cls(**columns)


def _draw_without_replacement(low: int, high: int, count: int, rng: random.Random) -> List[int]:
    available = list(range(low, high + 1))
    picked = []
    for _ in range(count):
        picked.append(available.pop(rng.randrange(len(available))))
    return picked


def generate_card(rng: Optional[random.Random] = None) -> Card:
    rng = rng or _system_random
    columns = {
        letter: _draw_without_replacement(low, high, CARD_SIZE, rng)
        for letter, (low, high) in COLUMN_RANGES.items()
    }
    columns["N"][FREE_ROW] = FREE
    return Card(**{letter: tuple(values) for letter, values in columns.items()})


def card_to_grid(card: Card) -> List[List[int]]:
    """Row-major 5x5 grid; ``grid[row][col]``."""
    cols = [card.column(letter) for letter in COLUMNS]
    return [[col[row] for col in cols] for row in range(CARD_SIZE)]


def column_letter(number: int) -> str:
    for letter, (low, high) in COLUMN_RANGES.items():
        if low <= number <= high:
            return letter
    return ""
