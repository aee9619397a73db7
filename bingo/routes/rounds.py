from __future__ import annotations

from typing import Optional

from flask import Blueprint, jsonify

from ..engine.cards import column_letter
from ..engine.draws import POOL_SIZE
from ..engine.errors import NotFound
from ..engine.participants import join_round
from ..engine.types import RoundSnapshot
from ..models import round_to_dict
from ..schemas import BoardResponse, RosterEntryResponse, RoundResponse
from ..services.participants import ParticipantRepository
from ..services.rounds import RoundRepository
from .participants import current_user_id, participant_payload

bp = Blueprint("rounds", __name__)
round_repo = RoundRepository()
participant_repo = ParticipantRepository()


def round_payload(round_: RoundSnapshot) -> dict:
    return RoundResponse(**round_to_dict(round_)).model_dump()


def board_payload(round_: RoundSnapshot) -> dict:
    last_drawn: Optional[int] = round_.drawn_numbers[-1] if round_.drawn_numbers else None
    response = BoardResponse(
        **round_to_dict(round_),
        drawn_count=len(round_.drawn_numbers),
        remaining_count=POOL_SIZE - len(round_.drawn_numbers),
        last_drawn=last_drawn,
        last_drawn_letter=column_letter(last_drawn) if last_drawn is not None else None,
    )
    return response.model_dump()


def get_round_or_404(round_id: str) -> RoundSnapshot:
    round_ = round_repo.get_round(round_id)
    if round_ is None:
        raise NotFound(f"Round {round_id} not found")
    return round_


@bp.get("/active")
def get_active_round():
    round_ = round_repo.get_active_round()
    if round_ is None:
        return jsonify(None)
    return jsonify(board_payload(round_))


@bp.get("/<round_id>")
def get_round(round_id: str):
    return jsonify(board_payload(get_round_or_404(round_id)))


@bp.post("/<round_id>/participants")
def join(round_id: str):
    user_id = current_user_id()
    round_ = get_round_or_404(round_id)
    participant = join_round(participant_repo, round_, user_id)
    return jsonify(participant_payload(participant)), 201


@bp.get("/<round_id>/participants")
def list_round_participants(round_id: str):
    current_user_id()
    round_ = get_round_or_404(round_id)
    participants = participant_repo.list_participants(round_id=round_.id, order_by="created_at")
    return jsonify(
        [
            RosterEntryResponse(
                participant_id=p.id,
                user_id=p.user_id,
                has_bingo=p.has_bingo,
                marked_count=len(p.marked_numbers),
                created_at=p.created_at.isoformat() if p.created_at else None,
            ).model_dump()
            for p in participants
        ]
    )
