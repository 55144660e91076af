from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QMessageBox, QPushButton, QWidget

from ..change_bus import ChangeBus
from ..deleter import DraftDeleter
from ..storage import DraftStore

logger = logging.getLogger(__name__)


class DeleteDraftButton(QPushButton):
    """'Eliminar Borrador' button shown only while a draft exists for ``key``."""

    def __init__(
        self,
        store: DraftStore,
        deleter: DraftDeleter,
        key: str,
        display_name: str,
        *,
        reset: Optional[Callable[[], None]] = None,
        bus: Optional[ChangeBus] = None,
        confirm: bool = True,
        poll_interval_ms: int = 1000,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__("Eliminar Borrador", parent)
        self.store = store
        self.deleter = deleter
        self.key = key
        self.display_name = display_name
        self.confirm = confirm
        self._reset = reset
        self.setToolTip("Eliminar borrador incompleto")
        self.setStyleSheet(
            "QPushButton { color: #dc2626; background: #fef2f2; border: 1px solid #fecaca;"
            " border-radius: 6px; padding: 4px 10px; }"
            "QPushButton:hover { background: #fee2e2; }"
        )
        self.clicked.connect(self._on_clicked)

        bus = bus if bus is not None else store.bus
        if bus is not None:
            bus.storageChanged.connect(self._on_event)
            bus.draftChanged.connect(self._on_event)

        self._timer = QTimer(self)
        self._timer.timeout.connect(self.refresh)
        if poll_interval_ms > 0:
            self._timer.start(poll_interval_ms)
        self.refresh()

    def _on_event(self, payload) -> None:
        if getattr(payload, "key", None) == self.key:
            self.refresh()

    def refresh(self) -> bool:
        has_draft = self.store.has_draft(self.key)
        self.setVisible(has_draft)
        return has_draft

    def _ask(self) -> bool:
        answer = QMessageBox.question(
            self,
            "¿Eliminar borrador?",
            f"Estás a punto de eliminar el borrador incompleto de {self.display_name}.\n"
            "Esta acción no se puede deshacer y perderás todos los datos guardados.",
            QMessageBox.Yes | QMessageBox.Cancel,
            QMessageBox.Cancel,
        )
        return answer == QMessageBox.Yes

    def _on_clicked(self) -> None:
        if self.confirm and not self._ask():
            return
        self.delete_draft()

    def delete_draft(self) -> bool:
        ok = self.deleter.delete(self.key, self._reset, display_name=self.display_name)
        if ok:
            self.setVisible(False)
        return ok


__all__ = ["DeleteDraftButton"]
