from __future__ import annotations

from typing import List, Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QMouseEvent
from PySide6.QtWidgets import QLabel, QWidget

from ..models.catalog import IncompleteEntry
from ..registry import IncompleteRegistry

_BADGE_STYLE = (
    "QLabel { background: #fffbeb; color: #92400e; border: 1px solid #fde68a;"
    " border-radius: 6px; padding: 2px 8px; font-size: 11px; font-weight: 600; }"
)


def pending_label(count: int) -> str:
    return f"{count} pendiente{'s' if count > 1 else ''}"


class AreaStatusBadge(QLabel):
    """Badge on an area card: number of incomplete checklists in that area.

    Hidden when the area has nothing pending. Clicking emits the navigation
    path of the first incomplete checklist so the host can open it.
    """

    openRequested = Signal(str)

    def __init__(self, registry: IncompleteRegistry, area: str, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.registry = registry
        self.area = area
        self._entries: List[IncompleteEntry] = []
        self.setStyleSheet(_BADGE_STYLE)
        self.setCursor(Qt.PointingHandCursor)
        registry.incompleteChanged.connect(self._on_incomplete_changed)
        self._apply(registry.entries_for_area(area))

    def _on_incomplete_changed(self, grouping: dict) -> None:
        self._apply(list(grouping.get(self.area, [])))

    def _apply(self, entries: List[IncompleteEntry]) -> None:
        self._entries = entries
        count = len(entries)
        if count == 0:
            self.clear()
            self.setToolTip("")
            self.setVisible(False)
            return
        self.setText(pending_label(count))
        if count > 1:
            names = "\n".join(f"• {e.display_name}" for e in entries)
            self.setToolTip(f"Checklists incompletos:\n{names}")
        else:
            self.setToolTip(f"{count} checklist incompleto. Click para continuar.")
        self.setVisible(True)

    def entries(self) -> List[IncompleteEntry]:
        return list(self._entries)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if self._entries and event.button() == Qt.LeftButton:
            self.openRequested.emit(self._entries[0].navigation_path)
        super().mouseReleaseEvent(event)


class ChecklistCardBadge(QLabel):
    """'Incompleto' marker on a single checklist card."""

    def __init__(self, registry: IncompleteRegistry, key: str, parent: Optional[QWidget] = None) -> None:
        super().__init__("Incompleto", parent)
        self.registry = registry
        self.key = key
        self.setStyleSheet(_BADGE_STYLE)
        registry.incompleteChanged.connect(self._sync)
        self._sync()

    def _sync(self, *_: object) -> None:
        self.setVisible(self.registry.is_incomplete(self.key))


__all__ = ["AreaStatusBadge", "ChecklistCardBadge", "pending_label"]
