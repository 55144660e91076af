"""Dual-channel change notifications for checklist drafts.

Two delivery paths with different guarantees:

``storageChanged``
    Cross-context. Emitted by the draft backend on every *other* attached
    store context when a key changes. Never delivered to the writer.

``draftChanged``
    Same-context. Emitted only when a writer calls :meth:`ChangeBus.publish`.
    Every direct store mutator must publish, otherwise same-context observers
    only learn about the change on their next poll.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from PySide6.QtCore import QObject, Signal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StorageEvent:
    key: str
    old_value: Optional[str]
    new_value: Optional[str]


@dataclass(frozen=True)
class DraftChange:
    key: str
    value: Any = None


class ChangeBus(QObject):
    """Per-context notifier; one instance per store context (window)."""

    storageChanged = Signal(object)  # StorageEvent
    draftChanged = Signal(object)  # DraftChange

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)

    def publish(self, key: str, value: Any = None) -> None:
        """Announce a local write (``value``) or removal (``None``) of ``key``."""
        logger.debug("[drafts.bus] publish %s (removed=%s)", key, value is None)
        self.draftChanged.emit(DraftChange(key, value))

    def deliver_storage_event(self, event: StorageEvent) -> None:
        """Called by the backend when another context changed ``event.key``."""
        logger.debug("[drafts.bus] storage event for %s", event.key)
        self.storageChanged.emit(event)


__all__ = ["ChangeBus", "DraftChange", "StorageEvent"]
