"""Two-way binding between a live checklist form and its stored draft.

The controller owns one storage key for the lifetime of one form panel:

* :meth:`PersistenceController.initial_load` restores the stored draft
  exactly once. Nothing is written before it has run, so the form's
  default state can never clobber a draft that has not been loaded yet.
* :meth:`PersistenceController.on_change` runs after every edit and either
  writes the snapshot, removes the key (snapshot emptied), or does nothing.
* :meth:`PersistenceController.clear_draft` removes the draft after a
  successful submission.

Storage failures never reach the form: they are logged and only that
persistence cycle is lost.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Union

from PySide6.QtCore import QObject, Signal

from .change_bus import ChangeBus
from .emptiness import has_meaningful_data
from .exceptions import MalformedRecord, StoreUnavailable
from .storage import DraftStore, encode_record

logger = logging.getLogger(__name__)

SnapshotProvider = Callable[[], Any]
Loader = Callable[[Dict[str, Any]], None]
SaveOverride = Callable[[], Optional[bool]]


class PersistenceController(QObject):
    draftLoaded = Signal(str, object)  # key, record
    draftSaved = Signal(str)
    draftCleared = Signal(str)

    def __init__(
        self,
        store: DraftStore,
        key: str,
        snapshot: SnapshotProvider,
        loader: Loader,
        *,
        is_submitted: Union[bool, Callable[[], bool]] = False,
        should_save: Optional[SaveOverride] = None,
        bus: Optional[ChangeBus] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.store = store
        self.key = key
        self._snapshot = snapshot
        self._loader = loader
        self._is_submitted = is_submitted
        self._should_save = should_save
        self._bus = bus if bus is not None else store.bus
        self._loaded = False
        self._closed = False

    # ---- State -------------------------------------------------------------
    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def closed(self) -> bool:
        return self._closed

    def is_submitted(self) -> bool:
        flag = self._is_submitted
        return bool(flag()) if callable(flag) else bool(flag)

    def set_submitted(self, submitted: bool) -> None:
        self._is_submitted = bool(submitted)

    def should_persist(self) -> bool:
        if self._should_save is not None:
            override = self._should_save()
            if override is not None:
                return bool(override)
        return not self.is_submitted()

    # ---- Lifecycle ---------------------------------------------------------
    def initial_load(self) -> bool:
        """Hand the stored draft to the loader; returns True if one was loaded."""
        if self._loaded:
            return False
        try:
            record = self.store.read_record(self.key)
            if record is None:
                return False
            try:
                self._loader(record)
            except Exception:
                # A record the form cannot apply counts as no draft.
                logger.exception("[drafts] form rejected stored draft %s", self.key)
                return False
        except MalformedRecord as exc:
            logger.warning("[drafts] ignoring unreadable draft %s: %s", self.key, exc)
            return False
        except StoreUnavailable as exc:
            logger.warning("[drafts] could not load draft %s: %s", self.key, exc)
            return False
        finally:
            self._loaded = True
        logger.debug("[drafts] restored draft %s", self.key)
        self.draftLoaded.emit(self.key, record)
        return True

    def close(self) -> None:
        """Unmount: no further change cycles take effect for this controller."""
        self._closed = True

    def watch(self, signal) -> None:
        """Run :meth:`on_change` whenever ``signal`` fires (arguments ignored)."""
        signal.connect(lambda *_: self.on_change())

    # ---- Change cycle ------------------------------------------------------
    def on_change(self, snapshot: Any = None) -> None:
        if not self._loaded or self._closed:
            return
        if snapshot is None:
            snapshot = self._snapshot()

        persist = self.should_persist()
        meaningful = has_meaningful_data(snapshot)

        try:
            current = self.store.get(self.key)
        except StoreUnavailable as exc:
            logger.warning("[drafts] could not read draft %s: %s", self.key, exc)
            return

        if current is None and not meaningful:
            # Already deleted (or never created) and nothing new typed.
            return
        if not persist:
            return

        if meaningful:
            self._save(snapshot, current)
        else:
            self._remove("emptied")

    def clear_draft(self) -> None:
        """Remove the stored draft, typically after a successful submit."""
        self._remove("cleared")

    def _save(self, snapshot: Any, current: Optional[str]) -> None:
        try:
            raw = encode_record(self.key, snapshot)
        except MalformedRecord as exc:
            logger.warning("[drafts] snapshot for %s not saved: %s", self.key, exc)
            return
        if raw == current:
            return
        try:
            self.store.set(self.key, raw)
        except StoreUnavailable as exc:
            logger.warning("[drafts] could not save draft %s: %s", self.key, exc)
            return
        logger.debug("[drafts] saved draft %s (%d chars)", self.key, len(raw))
        if self._bus is not None:
            self._bus.publish(self.key, snapshot)
        self.draftSaved.emit(self.key)

    def _remove(self, reason: str) -> None:
        try:
            self.store.remove(self.key)
        except StoreUnavailable as exc:
            logger.warning("[drafts] could not clear draft %s: %s", self.key, exc)
            return
        logger.debug("[drafts] %s draft %s", reason, self.key)
        if self._bus is not None:
            self._bus.publish(self.key, None)
        self.draftCleared.emit(self.key)


__all__ = ["PersistenceController"]
