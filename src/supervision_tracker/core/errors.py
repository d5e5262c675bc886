# src/supervision_tracker/core/errors.py

from __future__ import annotations


class InvalidDateError(ValueError):
    """A date (YYYY-MM-DD) or month (YYYY-MM) string could not be parsed."""

    def __init__(self, value: object, expected: str = "YYYY-MM-DD") -> None:
        super().__init__(f"Invalid date {value!r}: expected {expected}")
        self.value = value


class NotFoundError(LookupError):
    """Referenced task or report id is absent from the collection/store."""

    def __init__(self, kind: str, record_id: str) -> None:
        super().__init__(f"{kind} not found: {record_id}")
        self.kind = kind
        self.record_id = record_id


class CompletedTaskError(ValueError):
    """Deadline extension requested for a task that is already completed."""


class StoreError(RuntimeError):
    """Remote store failure or a malformed record at the store boundary."""
