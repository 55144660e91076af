from __future__ import annotations

import os

# Qt widgets require a platform plugin.  Offscreen avoids libGL dependencies
# inside the test container.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

_DRAFT_ENV = (
    "CHECKLIST_DRAFTS_DATA_DIR",
    "CHECKIN_DATA_DIR",
    "CHECKLIST_DRAFTS_BACKEND",
    "CHECKLIST_DRAFTS_POLL_MS",
    "CHECKLIST_DRAFTS_REREMOVE_MS",
    "CHECKLIST_DRAFTS_REDIRECT_MS",
)


@pytest.fixture(autouse=True)
def clean_draft_env(monkeypatch):
    for name in _DRAFT_ENV:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtWidgets import QApplication

    return QApplication.instance() or QApplication([])
