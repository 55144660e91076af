"""Explicit deletion of a checklist draft.

Deleting is a saga rather than one atomic call, because the form's
PersistenceController is still alive and would re-save on its next change
cycle:

1. remove the key from the store;
2. reset the bound form so its live snapshot is empty;
3. publish the removal on the same-context bus;
4. re-remove after a short delay to catch a save that slipped in;
5. navigate to the owning area, which unmounts the form.

Step 5 is what closes the race: once the form is gone no further change
cycle can fire for the key. Without it, removal is not linearizable against
an in-flight save.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from PySide6.QtCore import QObject, Signal

from .change_bus import ChangeBus
from .exceptions import StoreUnavailable
from .models.catalog import CATALOG, ChecklistDescriptor, area_path_for_key, descriptor_for_key
from .models.notice import DraftNotice
from .scheduler import DraftScheduler
from .storage import DraftStore

logger = logging.getLogger(__name__)

DEFAULT_REREMOVE_MS = 50
DEFAULT_REDIRECT_MS = 500


class DraftDeleter(QObject):
    deleted = Signal(str)
    deleteFailed = Signal(str, str)  # key, message
    noticeRaised = Signal(object)  # DraftNotice

    def __init__(
        self,
        store: DraftStore,
        navigate: Callable[[str], None],
        *,
        bus: Optional[ChangeBus] = None,
        catalog: Optional[Dict[str, ChecklistDescriptor]] = None,
        scheduler: Optional[DraftScheduler] = None,
        reremove_delay_ms: int = DEFAULT_REREMOVE_MS,
        redirect_delay_ms: int = DEFAULT_REDIRECT_MS,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.store = store
        self.bus = bus if bus is not None else store.bus
        self.catalog = CATALOG if catalog is None else catalog
        self.scheduler = scheduler or DraftScheduler(self)
        self.reremove_delay_ms = reremove_delay_ms
        self.redirect_delay_ms = redirect_delay_ms
        self._navigate = navigate

    def _display_name(self, key: str) -> str:
        descriptor = descriptor_for_key(key, self.catalog)
        return descriptor.display_name if descriptor else key

    def delete(
        self,
        key: str,
        reset: Optional[Callable[[], None]] = None,
        *,
        display_name: Optional[str] = None,
    ) -> bool:
        """Run the deletion saga for ``key``; returns False if nothing was deleted."""
        name = display_name or self._display_name(key)
        try:
            self.store.remove(key)
        except StoreUnavailable as exc:
            logger.warning("[drafts.delete] could not delete %s: %s", key, exc)
            message = "Error al eliminar el borrador"
            self.noticeRaised.emit(
                DraftNotice("Borrador", message, severity="error", entity_id=key)
            )
            self.deleteFailed.emit(key, message)
            return False

        if reset is not None:
            try:
                reset()
            except Exception:
                # The key is already gone; the remaining steps still have to
                # run so a live form cannot save it back.
                logger.exception("[drafts.delete] form reset failed for %s", key)
        if self.bus is not None:
            self.bus.publish(key, None)

        self.scheduler.schedule(self.reremove_delay_ms, self._reremove, key)
        self.scheduler.schedule(self.redirect_delay_ms, self._redirect, key)

        logger.info("[drafts.delete] deleted draft %s", key)
        self.noticeRaised.emit(
            DraftNotice(
                "Borrador",
                f"Borrador de {name} eliminado exitosamente",
                severity="success",
                entity_id=key,
            )
        )
        self.deleted.emit(key)
        return True

    def _reremove(self, key: str) -> bool:
        try:
            if self.store.get(key) is None:
                return False
            self.store.remove(key)
        except StoreUnavailable as exc:
            logger.warning("[drafts.delete] delayed removal of %s failed: %s", key, exc)
            return False
        logger.info("[drafts.delete] removed %s again after a late save", key)
        if self.bus is not None:
            self.bus.publish(key, None)
        return True

    def _redirect(self, key: str) -> None:
        self._reremove(key)
        target = area_path_for_key(key, self.catalog)
        logger.debug("[drafts.delete] leaving %s for %s", key, target)
        self._navigate(target)


__all__ = ["DraftDeleter", "DEFAULT_REDIRECT_MS", "DEFAULT_REREMOVE_MS"]
