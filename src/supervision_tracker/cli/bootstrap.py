# src/supervision_tracker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the concrete store into AppState (remote with local fallback, or local only).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import SupervisionRepo
from ..core.state import AppState
from ..storage.fallback_store import FallbackSupervisionStore
from ..storage.remote_store import RemoteSupervisionStore
from ..storage.sqlite_store import SQLiteSupervisionStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def build_store(settings) -> SupervisionRepo:
    local = SQLiteSupervisionStore(settings.db_path)
    if not settings.remote_enabled:
        logger.info("No SUPERVISION_API_BASE_URL configured; using the local store only.")
        return local

    remote = RemoteSupervisionStore(
        settings.api_base_url,
        timeout_seconds=settings.http_timeout_seconds,
    )
    return FallbackSupervisionStore(remote, local)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    return AppState(settings=settings, store=build_store(settings))


def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    store = state.store
    remote = store.remote if isinstance(store, FallbackSupervisionStore) else store
    if isinstance(remote, RemoteSupervisionStore):
        try:
            remote.close()
        except Exception:
            logger.debug("Remote store close failed.", exc_info=True)
