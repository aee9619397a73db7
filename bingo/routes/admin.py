from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from ..config import load_settings
from ..engine.cards import column_letter
from ..engine.claims import rank_winners
from ..engine.draws import POOL_SIZE
from ..engine.participants import remove_participant
from ..engine.rounds import RoundStateMachine
from ..models import participant_to_dict
from ..schemas import DrawResponse, WinnerResponse
from ..services.participants import ParticipantRepository
from ..services.rounds import RoundRepository
from .participants import participant_payload
from .rounds import board_payload, get_round_or_404, round_payload

bp = Blueprint("admin", __name__)
round_repo = RoundRepository()
participant_repo = ParticipantRepository()
state_machine = RoundStateMachine(round_repo)


def _require_admin() -> bool:
    settings = load_settings()
    api_key = settings.admin_api_key
    if api_key:
        provided = request.headers.get("X-Admin-Token")
        if provided != api_key:
            return False
    return True


@bp.before_request
def verify_admin():
    if not _require_admin():
        current_app.logger.warning("Rejected admin request to %s", request.path)
        return jsonify({"error": "unauthorized", "message": "admin token required", "details": None}), 401
    return None


@bp.post("/rounds")
def create_round():
    round_ = state_machine.create()
    return jsonify(round_payload(round_)), 201


@bp.get("/rounds/active")
def get_active_round():
    round_ = state_machine.current()
    if round_ is None:
        return jsonify(None)
    return jsonify(board_payload(round_))


@bp.post("/rounds/<round_id>/draws")
def draw_next(round_id: str):
    round_ = get_round_or_404(round_id)
    number = state_machine.draw_next(round_)
    drawn_count = len(round_.drawn_numbers) + 1
    response = DrawResponse(
        round_id=round_.id,
        number=number,
        letter=column_letter(number),
        drawn_count=drawn_count,
        exhausted=drawn_count >= POOL_SIZE,
    )
    return jsonify(response.model_dump())


@bp.post("/rounds/<round_id>/finish")
def finish_round(round_id: str):
    round_ = get_round_or_404(round_id)
    finished = state_machine.finish(round_)
    return jsonify(round_payload(finished))


@bp.get("/rounds/<round_id>/participants")
def list_participants(round_id: str):
    round_ = get_round_or_404(round_id)
    participants = participant_repo.list_participants(round_id=round_.id)
    return jsonify([participant_payload(p) for p in participants])


@bp.get("/rounds/<round_id>/winners")
def list_winners(round_id: str):
    round_ = get_round_or_404(round_id)
    winners = rank_winners(
        participant_repo.list_participants(
            round_id=round_.id, has_bingo=True, order_by="bingo_claimed_at"
        )
    )
    response = []
    for rank, winner in enumerate(winners, start=1):
        record = participant_to_dict(winner)
        response.append(
            WinnerResponse(
                rank=rank,
                participant_id=record["participant_id"],
                user_id=record["user_id"],
                bingo_claimed_at=record["bingo_claimed_at"],
                card=record["card"],
                marked_numbers=record["marked_numbers"],
            ).model_dump()
        )
    return jsonify(response)


@bp.delete("/participants/<participant_id>")
def delete_participant(participant_id: str):
    remove_participant(participant_repo, participant_id)
    return jsonify({"participant_id": participant_id, "removed": True})
