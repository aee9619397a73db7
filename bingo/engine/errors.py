"""Structured errors raised by the round and card validation engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional


@dataclass(eq=False)
class BingoError(Exception):
    """Base engine error; rendered by the API as ``{"error": code, ...}``."""

    code: str
    message: str
    status_code: int
    details: Optional[Any] = None

    def __str__(self) -> str:
        return self.message


class ExhaustedPool(BingoError):
    """All 75 numbers of the round have been drawn."""

    def __init__(self, message: str = "All 75 numbers have already been drawn.") -> None:
        super().__init__(code="exhausted_pool", message=message, status_code=409)


class NotDrawn(BingoError):
    def __init__(self, number: int) -> None:
        super().__init__(
            code="not_drawn",
            message=f"Number {number} has not been drawn yet.",
            status_code=422,
            details={"number": number},
        )


class FreeCell(BingoError):
    def __init__(self) -> None:
        super().__init__(
            code="free_cell",
            message="The FREE cell is always marked and cannot be toggled.",
            status_code=422,
        )


class LedgerFrozen(BingoError):
    def __init__(self, participant_id: str) -> None:
        super().__init__(
            code="ledger_frozen",
            message="This card already has a bingo; marks are frozen.",
            status_code=409,
            details={"participant_id": participant_id},
        )


class Incomplete(BingoError):
    def __init__(self, remaining: int) -> None:
        super().__init__(
            code="incomplete",
            message=f"{remaining} more number(s) needed to complete the card.",
            status_code=422,
            details={"remaining": remaining},
        )

    @property
    def remaining(self) -> int:
        return self.details["remaining"]


class UnverifiedMark(BingoError):
    def __init__(self, numbers: Iterable[int]) -> None:
        numbers = sorted(numbers)
        super().__init__(
            code="unverified_mark",
            message="Some marked numbers have not been drawn.",
            status_code=422,
            details={"numbers": numbers},
        )


class IncompleteCard(BingoError):
    def __init__(self, missing: Iterable[int]) -> None:
        missing = sorted(missing)
        super().__init__(
            code="incomplete_card",
            message="The card is not fully covered.",
            status_code=422,
            details={"missing": missing},
        )


class StaleReference(BingoError):
    """The targeted record no longer matches the state the caller saw; refetch."""

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(code="stale_reference", message=message, status_code=409, details=details)


class AlreadyJoined(BingoError):
    def __init__(self, round_id: str, user_id: str) -> None:
        super().__init__(
            code="already_joined",
            message="User already holds a card in this round.",
            status_code=409,
            details={"round_id": round_id, "user_id": user_id},
        )


class NotFound(BingoError):
    def __init__(self, message: str = "Not found") -> None:
        super().__init__(code="not_found", message=message, status_code=404)


class Unauthorized(BingoError):
    def __init__(self, message: str = "unauthorized") -> None:
        super().__init__(code="unauthorized", message=message, status_code=401)


class Forbidden(BingoError):
    def __init__(self, message: str = "forbidden") -> None:
        super().__init__(code="forbidden", message=message, status_code=403)
