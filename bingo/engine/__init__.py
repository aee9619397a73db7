from .cards import Card, card_to_grid, column_letter, generate_card
from .claims import ClaimResult, ClaimVerifier, check_claim, rank_winners
from .draws import DrawPool
from .errors import (
    AlreadyJoined,
    BingoError,
    ExhaustedPool,
    Forbidden,
    FreeCell,
    Incomplete,
    IncompleteCard,
    LedgerFrozen,
    NotDrawn,
    NotFound,
    StaleReference,
    Unauthorized,
    UnverifiedMark,
)
from .marks import toggle_mark
from .participants import join_round, remove_participant
from .rounds import RoundStateMachine
from .types import ParticipantSnapshot, ParticipantStore, RoundSnapshot, RoundStatus, RoundStore

__all__ = [
    "AlreadyJoined",
    "BingoError",
    "Card",
    "ClaimResult",
    "ClaimVerifier",
    "DrawPool",
    "ExhaustedPool",
    "Forbidden",
    "FreeCell",
    "Incomplete",
    "IncompleteCard",
    "LedgerFrozen",
    "NotDrawn",
    "NotFound",
    "ParticipantSnapshot",
    "ParticipantStore",
    "RoundSnapshot",
    "RoundStateMachine",
    "RoundStatus",
    "RoundStore",
    "StaleReference",
    "Unauthorized",
    "UnverifiedMark",
    "card_to_grid",
    "check_claim",
    "column_letter",
    "generate_card",
    "join_round",
    "rank_winners",
    "remove_participant",
    "toggle_mark",
]
