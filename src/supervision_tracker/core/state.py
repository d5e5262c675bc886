# src/supervision_tracker/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field

from ..supervision.models import SupervisionReport, SupervisionTask
from .ports import SupervisionRepo


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    store: SupervisionRepo

    # In-memory copies of the store collections (store order preserved).
    tasks: list[SupervisionTask] = field(default_factory=list)
    reports: list[SupervisionReport] = field(default_factory=list)
