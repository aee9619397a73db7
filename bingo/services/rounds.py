from __future__ import annotations

import secrets
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sqlalchemy import update

from ..db import session_scope
from ..engine.types import RoundSnapshot, RoundStatus, utcnow
from ..models import Round, encode_numbers

_ROUND_FIELDS = ("status", "drawn_numbers", "finished_at")


def _encode_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for key, value in fields.items():
        if key not in _ROUND_FIELDS:
            raise ValueError(f"Unknown round field: {key}")
        if key == "drawn_numbers":
            values[key] = encode_numbers(value)
        elif key == "status":
            values[key] = RoundStatus(value).value
        else:
            values[key] = value
    return values


class RoundRepository:
    def create_round(self) -> RoundSnapshot:
        with session_scope() as session:
            round_ = Round(
                id=secrets.token_hex(8),
                status=RoundStatus.ACTIVE.value,
                created_at=utcnow(),
            )
            round_.set_numbers([])
            session.add(round_)
            session.flush()
            return round_.to_snapshot()

    def update_round(
        self,
        round_id: str,
        fields: Mapping[str, Any],
        expected: Optional[Mapping[str, Any]] = None,
    ) -> Optional[RoundSnapshot]:
        stmt = update(Round).where(Round.id == round_id)
        for key, value in _encode_fields(expected or {}).items():
            column = getattr(Round, key)
            stmt = stmt.where(column.is_(None) if value is None else column == value)
        stmt = stmt.values(**_encode_fields(fields)).execution_options(synchronize_session=False)

        with session_scope() as session:
            result = session.execute(stmt)
            if result.rowcount == 0:
                return None
            round_ = session.get(Round, round_id, populate_existing=True)
            return round_.to_snapshot()

    def get_round(self, round_id: str) -> Optional[RoundSnapshot]:
        with session_scope() as session:
            round_ = session.get(Round, round_id)
            return round_.to_snapshot() if round_ else None

    def get_active_round(self) -> Optional[RoundSnapshot]:
        with session_scope() as session:
            round_ = (
                session.query(Round)
                .filter(Round.status == RoundStatus.ACTIVE.value)
                .order_by(Round.created_at.desc())
                .first()
            )
            return round_.to_snapshot() if round_ else None

    def list_rounds(
        self, ids: Optional[Iterable[str]] = None, status: Optional[RoundStatus] = None
    ) -> List[RoundSnapshot]:
        with session_scope() as session:
            query = session.query(Round)
            if ids is not None:
                ids = list(ids)
                if not ids:
                    return []
                query = query.filter(Round.id.in_(ids))
            if status is not None:
                query = query.filter(Round.status == RoundStatus(status).value)
            return [r.to_snapshot() for r in query.order_by(Round.created_at.desc()).all()]
