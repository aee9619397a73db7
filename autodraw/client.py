from __future__ import annotations

import asyncio
from typing import Any, Dict, Mapping, Optional

import requests

from bingo.engine.errors import ExhaustedPool, StaleReference

from .config import AutoDrawSettings
from .types import DrawOutcome


class BingoApiError(RuntimeError):
    def __init__(self, status_code: int, payload: Mapping[str, Any]) -> None:
        self.status_code = status_code
        self.payload = payload
        super().__init__(f"HTTP {status_code}: {payload.get('error')} {payload.get('message', '')}".strip())


class HttpDrawClient:
    """Draws through the admin API of a running bingo server."""

    def __init__(self, settings: AutoDrawSettings, session: Optional[requests.Session] = None) -> None:
        self._settings = settings
        self._session = session or requests.Session()
        if settings.admin_token:
            self._session.headers["X-Admin-Token"] = settings.admin_token

    async def draw_next(self) -> DrawOutcome:
        return await asyncio.to_thread(self._sync_draw_next)

    async def close(self) -> None:
        self._session.close()

    def _sync_draw_next(self) -> DrawOutcome:
        round_ = self._request("GET", "/admin/api/rounds/active")
        if not round_:
            raise StaleReference("No active round to draw from.")

        payload = self._request("POST", f"/admin/api/rounds/{round_['round_id']}/draws")
        return DrawOutcome(
            round_id=str(payload["round_id"]),
            number=int(payload["number"]),
            letter=str(payload["letter"]),
            drawn_count=int(payload["drawn_count"]),
            exhausted=bool(payload["exhausted"]),
        )

    def _request(self, method: str, path: str) -> Optional[Dict[str, Any]]:
        resp = self._session.request(
            method,
            f"{self._settings.api_url}{path}",
            timeout=self._settings.request_timeout_seconds,
        )
        try:
            data = resp.json()
        except ValueError:
            data = None

        if resp.ok:
            return data

        error = data if isinstance(data, Mapping) else {"error": resp.reason}
        if error.get("error") == "exhausted_pool":
            raise ExhaustedPool(error.get("message") or "All 75 numbers have already been drawn.")
        if error.get("error") == "stale_reference":
            raise StaleReference(error.get("message") or "Round changed.", details=error.get("details"))
        raise BingoApiError(resp.status_code, error)
