from __future__ import annotations

from typing import Tuple

from flask import Blueprint, jsonify, request

from ..engine.cards import card_to_grid
from ..engine.claims import ClaimVerifier
from ..engine.errors import Forbidden, NotFound, Unauthorized
from ..engine.marks import toggle_mark
from ..engine.types import ParticipantSnapshot, RoundSnapshot
from ..models import participant_to_dict
from ..schemas import ClaimResponse, MarkRequest, MyCardResponse, ParticipantResponse
from ..services.participants import ParticipantRepository
from ..services.rounds import RoundRepository

bp = Blueprint("participants", __name__)
participant_repo = ParticipantRepository()
round_repo = RoundRepository()
claim_verifier = ClaimVerifier(participant_repo)


def current_user_id() -> str:
    # Authentication happens upstream; the gateway forwards the caller id.
    user_id = (request.headers.get("X-User-Id") or "").strip()
    if not user_id:
        raise Unauthorized("missing X-User-Id header")
    return user_id


def participant_payload(participant: ParticipantSnapshot) -> dict:
    response = ParticipantResponse(
        **participant_to_dict(participant),
        grid=card_to_grid(participant.card),
        marked_count=len(participant.marked_numbers),
    )
    return response.model_dump()


def _load_own_participant(participant_id: str) -> Tuple[ParticipantSnapshot, RoundSnapshot]:
    user_id = current_user_id()
    participant = participant_repo.get_participant(participant_id)
    if participant is None:
        raise NotFound(f"Participant {participant_id} not found")
    if participant.user_id != user_id:
        raise Forbidden("participant belongs to another user")
    round_ = round_repo.get_round(participant.round_id)
    if round_ is None:
        raise NotFound(f"Round {participant.round_id} not found")
    return participant, round_


@bp.get("/mine")
def list_my_cards():
    user_id = current_user_id()
    participants = participant_repo.list_participants(user_id=user_id, order_by="-created_at")
    rounds = {r.id: r for r in round_repo.list_rounds(ids={p.round_id for p in participants})}

    result = []
    for participant in participants:
        round_ = rounds.get(participant.round_id)
        if round_ is None:
            continue
        result.append(
            MyCardResponse(
                **participant_payload(participant),
                round_status=round_.status.value,
                drawn_numbers=list(round_.drawn_numbers),
            ).model_dump()
        )
    return jsonify(result)


@bp.post("/<participant_id>/marks")
def mark_number(participant_id: str):
    participant, round_ = _load_own_participant(participant_id)
    payload = request.get_json(force=True, silent=True)
    data = MarkRequest.model_validate(payload if isinstance(payload, dict) else {})
    updated = toggle_mark(participant_repo, participant, round_, data.number)
    return jsonify(participant_payload(updated))


@bp.post("/<participant_id>/claim")
def claim(participant_id: str):
    participant, round_ = _load_own_participant(participant_id)
    result = claim_verifier.claim_bingo(participant, round_)
    response = ClaimResponse(
        participant_id=result.participant.id,
        round_id=result.participant.round_id,
        has_bingo=result.participant.has_bingo,
        bingo_claimed_at=result.claimed_at.isoformat(),
    )
    return jsonify(response.model_dump())
