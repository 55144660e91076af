"""Custom exceptions for the checklist drafts module."""
from __future__ import annotations

from typing import Optional


class DraftStoreError(RuntimeError):
    """Base exception for draft persistence operations."""

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.key = key


class StoreUnavailable(DraftStoreError):
    """Raised when the backing storage is disabled, full or unreadable."""

    def __init__(self, key: Optional[str], operation: str, reason: object = None) -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(f"Draft storage unavailable during {operation}{detail}", key)
        self.operation = operation
        self.reason = reason


class MalformedRecord(DraftStoreError):
    """Raised when a stored value is not a JSON object, or a snapshot cannot be encoded."""


__all__ = [
    "DraftStoreError",
    "StoreUnavailable",
    "MalformedRecord",
]
