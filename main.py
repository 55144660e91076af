# ===== Part 1: Imports & Logging ============================================
import os
import sys
import logging
from typing import Any, Dict, Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QApplication,
    QFormLayout,
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from modules.drafts import (
    CATALOG,
    ChangeBus,
    DraftDeleter,
    DraftStore,
    IncompleteRegistry,
    PersistenceController,
    open_backend,
)
from modules.drafts.exceptions import StoreUnavailable
from modules.drafts.models import AREAS, DraftNotice, area_path, is_draft_key, storage_key_for
from modules.drafts.panels import AreaStatusBadge, DeleteDraftButton
from utils.app_settings import DEV_MODE, load_draft_settings

logger = logging.getLogger(__name__)
logging.basicConfig(
    level=logging.DEBUG if DEV_MODE else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)


# ===== Part 2: Sample checklist form ========================================
class EnvTempForm(QWidget):
    """Minimal environmental-temperature checklist used to exercise drafts."""

    changed = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QFormLayout(self)
        self.date = QLineEdit(self)
        self.shift = QLineEdit(self)
        self.monitor = QLineEdit(self)
        self.digital_temp = QSpinBox(self)
        self.digital_temp.setRange(-50, 80)
        self.wall_temp = QSpinBox(self)
        self.wall_temp.setRange(-50, 80)
        layout.addRow("Date", self.date)
        layout.addRow("Shift", self.shift)
        layout.addRow("Monitor", self.monitor)
        layout.addRow("Digital temp", self.digital_temp)
        layout.addRow("Wall temp", self.wall_temp)
        for edit in (self.date, self.shift, self.monitor):
            edit.textChanged.connect(lambda *_: self.changed.emit())
        for spin in (self.digital_temp, self.wall_temp):
            spin.valueChanged.connect(lambda *_: self.changed.emit())

    def snapshot(self) -> Dict[str, Any]:
        return {
            "date": self.date.text(),
            "shift": self.shift.text(),
            "monitorName": self.monitor.text(),
            "readings": {
                "digitalTemp": self.digital_temp.value(),
                "wallTemp": self.wall_temp.value(),
            },
        }

    def load(self, data: Dict[str, Any]) -> None:
        self.date.setText(str(data.get("date") or ""))
        self.shift.setText(str(data.get("shift") or ""))
        self.monitor.setText(str(data.get("monitorName") or ""))
        readings = data.get("readings") or {}
        if isinstance(readings, dict):
            self.digital_temp.setValue(int(readings.get("digitalTemp") or 0))
            self.wall_temp.setValue(int(readings.get("wallTemp") or 0))

    def reset(self) -> None:
        self.load({})


# ===== Part 3: Main Window ==================================================
class MainWindow(QMainWindow):
    def __init__(self, store: DraftStore, bus: ChangeBus, settings):
        super().__init__()
        self.setWindowTitle("Checklists")
        self.store = store
        self.bus = bus
        self.settings = settings
        self.registry = IncompleteRegistry(store, bus, poll_interval_ms=settings.poll_ms, parent=self)
        self.deleter = DraftDeleter(
            store,
            self.navigate,
            bus=bus,
            reremove_delay_ms=settings.reremove_ms,
            redirect_delay_ms=settings.redirect_ms,
            parent=self,
        )
        self.deleter.noticeRaised.connect(self._show_notice)
        self._form_frame: Optional[QFrame] = None
        self._controller: Optional[PersistenceController] = None

        central = QWidget(self)
        self._layout = QVBoxLayout(central)
        grid = QGridLayout()
        for col, area in enumerate(AREAS):
            card = QFrame(central)
            card.setFrameShape(QFrame.StyledPanel)
            box = QVBoxLayout(card)
            box.addWidget(QLabel(area.capitalize(), card))
            badge = AreaStatusBadge(self.registry, area, card)
            badge.openRequested.connect(self.navigate)
            box.addWidget(badge, alignment=Qt.AlignRight)
            grid.addWidget(card, 0, col)
        self._layout.addLayout(grid)

        open_btn = QPushButton("Abrir: Process Environmental Temperature Control", central)
        open_btn.clicked.connect(lambda: self.navigate(CATALOG[storage_key_for("envtemp")].navigation_path))
        self._layout.addWidget(open_btn)

        discard_btn = QPushButton("Descartar todos los borradores", central)
        discard_btn.clicked.connect(lambda: self.discard_all_drafts())
        self._layout.addWidget(discard_btn)
        self._layout.addStretch(1)
        self.setCentralWidget(central)
        self.registry.start()

    # ---- Navigation ---------------------------------------------------------
    def navigate(self, path: str) -> None:
        logger.info("navigate -> %s", path)
        self._close_form()
        key = next((k for k, d in CATALOG.items() if d.navigation_path == path), None)
        if key == storage_key_for("envtemp"):
            self._open_envtemp(key)

    def _open_envtemp(self, key: str) -> None:
        descriptor = CATALOG[key]
        frame = QFrame(self.centralWidget())
        frame.setFrameShape(QFrame.StyledPanel)
        box = QVBoxLayout(frame)
        header = QHBoxLayout()
        header.addWidget(QLabel(descriptor.display_name, frame))
        form = EnvTempForm(frame)
        header.addWidget(
            DeleteDraftButton(
                self.store,
                self.deleter,
                key,
                descriptor.display_name,
                reset=form.reset,
                poll_interval_ms=self.settings.poll_ms,
                parent=frame,
            )
        )
        box.addLayout(header)
        box.addWidget(form)

        controller = PersistenceController(self.store, key, form.snapshot, form.load, parent=frame)
        controller.initial_load()
        controller.watch(form.changed)

        submit = QPushButton("Enviar", frame)
        submit.clicked.connect(lambda: self._submit(controller))
        box.addWidget(submit)

        self._layout.insertWidget(self._layout.count() - 1, frame)
        self._form_frame = frame
        self._controller = controller

    def _submit(self, controller: PersistenceController) -> None:
        # Backend submission is external; mark submitted and drop the draft.
        controller.set_submitted(True)
        controller.clear_draft()
        self.statusBar().showMessage("Checklist enviado", 4500)
        self.navigate(area_path(CATALOG[controller.key].area))

    def discard_all_drafts(self, confirm: bool = True) -> int:
        """Purge every checklist draft in the store (end-of-shift / sign-out)."""
        if confirm:
            answer = QMessageBox.question(
                self,
                "Descartar borradores",
                "Se eliminarán todos los borradores guardados en este equipo. ¿Continuar?",
                QMessageBox.Yes | QMessageBox.No,
                QMessageBox.No,
            )
            if answer != QMessageBox.Yes:
                return 0
        self._close_form()
        try:
            removed = self.store.clear_matching(is_draft_key)
        except StoreUnavailable as exc:
            logger.warning("could not discard drafts: %s", exc)
            self._show_notice(
                DraftNotice("Borradores", "Error al eliminar los borradores", severity="error")
            )
            return 0
        self.registry.refresh()
        self._show_notice(
            DraftNotice("Borradores", f"{removed} borrador(es) eliminado(s)", severity="success")
        )
        return removed

    def _close_form(self) -> None:
        if self._controller is not None:
            self._controller.close()
            self._controller = None
        if self._form_frame is not None:
            self._form_frame.setParent(None)
            self._form_frame.deleteLater()
            self._form_frame = None

    def _show_notice(self, notice: DraftNotice) -> None:
        self.statusBar().showMessage(notice.message, notice.duration_ms)

    def closeEvent(self, event):  # noqa: N802
        self._close_form()
        self.registry.stop()
        self.store.close()
        super().closeEvent(event)


# ===== Part 4: Entry Point ==================================================
def main() -> int:
    app = QApplication(sys.argv)
    settings = load_draft_settings()
    bus = ChangeBus()
    store = DraftStore(open_backend(settings), bus, context_id=f"main-{os.getpid()}")
    window = MainWindow(store, bus, settings)
    window.resize(900, 480)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
