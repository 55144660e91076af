"""Per-area view of which catalog checklists have unfinished drafts.

The registry is only as fresh as its last :meth:`IncompleteRegistry.refresh`.
Refreshes happen on construction, on :meth:`start`, on any bus event naming a
catalog key, and on a poll timer. The poll is the backstop for changes no
event reports (another process writing the shared SQLite file, or a writer
that forgot to publish); staleness is bounded by the poll interval.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from .change_bus import ChangeBus, DraftChange, StorageEvent
from .emptiness import has_meaningful_data
from .exceptions import MalformedRecord, StoreUnavailable
from .models.catalog import CATALOG, ChecklistDescriptor, IncompleteEntry, is_catalog_key
from .storage import DraftStore, decode_record

logger = logging.getLogger(__name__)

DEFAULT_POLL_MS = 1000

Grouping = Dict[str, List[IncompleteEntry]]


class IncompleteRegistry(QObject):
    incompleteChanged = Signal(object)  # area -> list[IncompleteEntry]

    def __init__(
        self,
        store: DraftStore,
        bus: Optional[ChangeBus] = None,
        *,
        catalog: Optional[Dict[str, ChecklistDescriptor]] = None,
        poll_interval_ms: int = DEFAULT_POLL_MS,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.store = store
        self.bus = bus if bus is not None else store.bus
        self.catalog = CATALOG if catalog is None else catalog
        self.poll_interval_ms = poll_interval_ms
        self._timer: Optional[QTimer] = None
        self._connected = False
        # Synchronous first scan so indicators never flash stale badges.
        self._entries: Grouping = self._scan()

    # ---- Lifecycle ---------------------------------------------------------
    def start(self) -> None:
        if self.bus is not None and not self._connected:
            self.bus.storageChanged.connect(self._on_storage_changed)
            self.bus.draftChanged.connect(self._on_draft_changed)
            self._connected = True
        self.refresh()
        if self._timer is None:
            self._timer = QTimer(self)
            self._timer.timeout.connect(self.refresh)
        if self.poll_interval_ms and self.poll_interval_ms > 0:
            self._timer.start(self.poll_interval_ms)
        logger.debug("[drafts.registry] started (poll %d ms)", self.poll_interval_ms)

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.stop()
        if self.bus is not None and self._connected:
            self.bus.storageChanged.disconnect(self._on_storage_changed)
            self.bus.draftChanged.disconnect(self._on_draft_changed)
            self._connected = False

    @property
    def running(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    # ---- Events ------------------------------------------------------------
    def _on_storage_changed(self, event: StorageEvent) -> None:
        if is_catalog_key(event.key, self.catalog):
            self.refresh()

    def _on_draft_changed(self, change: DraftChange) -> None:
        if is_catalog_key(change.key, self.catalog):
            self.refresh()

    # ---- Refresh -----------------------------------------------------------
    def _scan(self) -> Grouping:
        try:
            stored = self.store.get_many(self.catalog)
        except StoreUnavailable as exc:
            logger.warning("[drafts.registry] could not read drafts: %s", exc)
            return {}
        grouping: Grouping = {}
        for key, descriptor in self.catalog.items():
            raw = stored.get(key)
            if raw is None:
                continue
            try:
                record = decode_record(key, raw)
            except MalformedRecord as exc:
                logger.warning("[drafts.registry] skipping %s: %s", key, exc)
                continue
            if has_meaningful_data(record):
                grouping.setdefault(descriptor.area, []).append(IncompleteEntry(descriptor, key))
        return grouping

    def refresh(self) -> Grouping:
        entries = self._scan()
        if entries != self._entries:
            self._entries = entries
            logger.debug(
                "[drafts.registry] incomplete: %s",
                {area: len(items) for area, items in entries.items()},
            )
            self.incompleteChanged.emit(self.entries())
        return self.entries()

    # ---- Read API ----------------------------------------------------------
    def entries(self) -> Grouping:
        return {area: list(items) for area, items in self._entries.items()}

    def entries_for_area(self, area: str) -> List[IncompleteEntry]:
        return list(self._entries.get(area, []))

    def count_for_area(self, area: str) -> int:
        return len(self._entries.get(area, []))

    def is_incomplete(self, key: str) -> bool:
        return any(entry.key == key for items in self._entries.values() for entry in items)


__all__ = ["IncompleteRegistry", "DEFAULT_POLL_MS"]
