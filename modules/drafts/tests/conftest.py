from __future__ import annotations

import os

# Qt widgets require a platform plugin.  Offscreen avoids libGL dependencies
# inside the test container.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from PySide6.QtWidgets import QApplication

from modules.drafts.change_bus import ChangeBus
from modules.drafts.storage import DraftStore, MemoryDraftBackend


def _ensure_app() -> QApplication:
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


@pytest.fixture(scope="session")
def qapp() -> QApplication:
    return _ensure_app()


@pytest.fixture()
def backend() -> MemoryDraftBackend:
    return MemoryDraftBackend()


@pytest.fixture()
def bus(qapp) -> ChangeBus:
    return ChangeBus()


@pytest.fixture()
def store(backend, bus):
    s = DraftStore(backend, bus, context_id="A")
    yield s
    s.close()


@pytest.fixture()
def published(bus):
    """Collect same-context DraftChange payloads."""
    events = []
    bus.draftChanged.connect(events.append)
    return events
