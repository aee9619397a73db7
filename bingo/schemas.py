from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from .engine.draws import POOL_MAX


class MarkRequest(BaseModel):
    number: int = Field(..., description="Drawn number to toggle on the card.")

    @field_validator("number")
    @classmethod
    def validate_number(cls, value: int) -> int:
        # 0 is the FREE cell; the engine reports it with a dedicated error.
        if not 0 <= value <= POOL_MAX:
            raise ValueError(f"Numbers must be between 0 and {POOL_MAX}.")
        return value


class RoundResponse(BaseModel):
    round_id: str
    status: str
    drawn_numbers: List[int]
    created_at: Optional[str] = None
    finished_at: Optional[str] = None


class BoardResponse(RoundResponse):
    drawn_count: int
    remaining_count: int
    last_drawn: Optional[int] = None
    last_drawn_letter: Optional[str] = None


class DrawResponse(BaseModel):
    round_id: str
    number: int
    letter: str
    drawn_count: int
    exhausted: bool


class ParticipantResponse(BaseModel):
    participant_id: str
    round_id: str
    user_id: str
    card: Dict[str, List[int]]
    grid: List[List[int]]
    marked_numbers: List[int]
    marked_count: int
    has_bingo: bool
    bingo_claimed_at: Optional[str] = None
    created_at: Optional[str] = None


class MyCardResponse(ParticipantResponse):
    round_status: Optional[str] = None
    drawn_numbers: List[int] = []


class ClaimResponse(BaseModel):
    participant_id: str
    round_id: str
    has_bingo: bool
    bingo_claimed_at: str


class WinnerResponse(BaseModel):
    rank: int
    participant_id: str
    user_id: str
    bingo_claimed_at: str
    card: Dict[str, List[int]]
    marked_numbers: List[int]


class RosterEntryResponse(BaseModel):
    participant_id: str
    user_id: str
    has_bingo: bool
    marked_count: int
    created_at: Optional[str] = None
