from __future__ import annotations

import logging
from typing import Callable, List, Optional

from PySide6.QtCore import QObject, QTimer

logger = logging.getLogger(__name__)


class DraftScheduler(QObject):
    """Single-shot timers on the owning Qt thread for delayed draft work."""

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._timers: List[QTimer] = []

    def schedule(self, msec: int, func: Callable, *args, **kwargs) -> QTimer:
        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.timeout.connect(lambda: self._fire(timer, func, args, kwargs))
        self._timers.append(timer)
        timer.start(max(0, int(msec)))
        return timer

    def _fire(self, timer: QTimer, func: Callable, args, kwargs) -> None:
        if timer in self._timers:
            self._timers.remove(timer)
        timer.deleteLater()
        try:
            func(*args, **kwargs)
        except Exception:
            logger.exception("[drafts.scheduler] delayed task %r failed", func)

    def pending(self) -> int:
        return len(self._timers)


__all__ = ["DraftScheduler"]
