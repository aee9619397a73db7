from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class FlaskSettings:
    secret_key: str = "bingo-dev-secret"
    debug: bool = True


@dataclass(frozen=True)
class AppSettings:
    flask: FlaskSettings
    database_url: str
    admin_api_key: Optional[str]
    log_level: str = "INFO"


@lru_cache(maxsize=1)
def load_settings(dotenv_path: Optional[str] = None) -> AppSettings:
    if dotenv_path:
        load_dotenv(dotenv_path)
    else:
        load_dotenv()

    flask_settings = FlaskSettings(
        secret_key=os.getenv("FLASK_SECRET_KEY", "bingo-dev-secret"),
        debug=os.getenv("FLASK_DEBUG", "1") == "1",
    )

    return AppSettings(
        flask=flask_settings,
        database_url=os.getenv("DATABASE_URL", "sqlite:///bingo.db"),
        admin_api_key=os.getenv("ADMIN_API_KEY") or None,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
