# src/supervision_tracker/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No remote service required at import time (empty API URL => local store only).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "SUPERVISION"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Remote store ----
    api_base_url: str
    http_timeout_seconds: float

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path

    @property
    def remote_enabled(self) -> bool:
        return bool(self.api_base_url.strip())

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "supervision") or "supervision"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        # e.g. http://localhost:8000/api
        api_base_url = _env(_k("API_BASE_URL"), "").strip().rstrip("/")
        http_timeout_seconds = max(0.5, _env_float(_k("HTTP_TIMEOUT_SECONDS"), 10.0))

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/supervision"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "supervision.sqlite3")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            api_base_url=api_base_url,
            http_timeout_seconds=http_timeout_seconds,
            data_dir=data_dir,
            db_path=db_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
