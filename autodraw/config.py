from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


def _int_from_env(value: Optional[str], default: int) -> int:
    if value is None or value == "":
        return default
    return int(value)


def _float_from_env(value: Optional[str], default: float) -> float:
    if value is None or value == "":
        return default
    return float(value)


def _require_env(key: str) -> str:
    value = os.getenv(key)
    if value is None or value == "":
        raise RuntimeError(f"Missing required environment variable: {key}")
    return value


@dataclass(frozen=True)
class AutoDrawSettings:
    api_url: str
    admin_token: Optional[str] = None
    draw_interval_seconds: float = 3.0
    request_timeout_seconds: int = 10
    max_draws: Optional[int] = None

    def copy(self, **updates) -> "AutoDrawSettings":
        return replace(self, **updates)


def load_from_environment() -> AutoDrawSettings:
    max_draws = os.getenv("MAX_DRAWS")
    return AutoDrawSettings(
        api_url=_require_env("BINGO_API_URL").rstrip("/"),
        admin_token=os.getenv("ADMIN_API_KEY") or None,
        draw_interval_seconds=_float_from_env(os.getenv("DRAW_INTERVAL_SECONDS"), 3.0),
        request_timeout_seconds=_int_from_env(os.getenv("REQUEST_TIMEOUT_SECONDS"), 10),
        max_draws=int(max_draws) if max_draws else None,
    )


@lru_cache(maxsize=1)
def load_config(dotenv_path: Optional[str] = None) -> AutoDrawSettings:
    if dotenv_path:
        load_dotenv(dotenv_path)
    else:
        default_path = pathlib.Path(".env")
        if default_path.exists():
            load_dotenv(default_path)
    return load_from_environment()
