from __future__ import annotations

import logging

from PySide6.QtCore import QTimer
from PySide6.QtTest import QTest

from modules.drafts.deleter import DraftDeleter
from modules.drafts.persistence import PersistenceController
from modules.drafts.registry import IncompleteRegistry

KEY = "checklist-envtemp-draft"


class Recorder:
    def __init__(self):
        self.calls = []

    def navigate(self, path):
        self.calls.append(("navigate", path))


def _deleter(store, recorder, **kwargs):
    kwargs.setdefault("reremove_delay_ms", 50)
    kwargs.setdefault("redirect_delay_ms", 100)
    return DraftDeleter(store, recorder.navigate, **kwargs)


def test_saga_removes_resets_publishes_and_redirects(store, published):
    rec = Recorder()
    deleter = _deleter(store, rec)
    notices, deleted = [], []
    deleter.noticeRaised.connect(notices.append)
    deleter.deleted.connect(deleted.append)
    store.write_record(KEY, {"shift": "A"})

    order = []
    published_keys_at_reset = []

    def reset():
        order.append("reset")
        published_keys_at_reset.extend(c.key for c in published)
        assert store.get(KEY) is None

    assert deleter.delete(KEY, reset) is True

    assert order == ["reset"]
    # the removal is broadcast after the form has been reset
    assert published_keys_at_reset == []
    assert [(c.key, c.value) for c in published] == [(KEY, None)]
    assert deleted == [KEY]
    assert notices[0].severity == "success"
    assert "Process Environmental Temperature Control" in notices[0].message
    assert rec.calls == []

    QTest.qWait(200)

    assert rec.calls == [("navigate", "/area/calidad")]
    assert store.get(KEY) is None


def test_late_save_is_removed_again(store):
    rec = Recorder()
    deleter = _deleter(store, rec)
    store.write_record(KEY, {"shift": "A"})

    # a save already scheduled when the user confirms the deletion
    QTimer.singleShot(20, lambda: store.write_record(KEY, {"shift": "A"}))
    deleter.delete(KEY)

    QTest.qWait(200)

    assert store.get(KEY) is None


def test_no_incomplete_entry_after_deletion(store):
    registry = IncompleteRegistry(store, poll_interval_ms=0)
    registry.start()
    try:
        store.write_record(KEY, {"shift": "A"})
        registry.refresh()
        assert registry.is_incomplete(KEY)

        deleter = _deleter(store, Recorder())
        deleter.delete(KEY)

        assert not registry.is_incomplete(KEY)
        QTest.qWait(150)
        assert not registry.is_incomplete(KEY)
    finally:
        registry.stop()


def test_live_controller_does_not_resurrect_draft(store):
    form = {"shift": "A", "monitorName": "Ana"}

    def reset():
        for field in form:
            form[field] = ""

    ctl = PersistenceController(store, KEY, lambda: dict(form), form.update)
    ctl.initial_load()
    ctl.on_change()
    assert store.get(KEY) is not None

    rec = Recorder()
    deleter = _deleter(store, rec)
    deleter.delete(KEY, reset)
    ctl.on_change()

    QTest.qWait(150)

    assert store.get(KEY) is None
    assert rec.calls == [("navigate", "/area/calidad")]


def test_failing_reset_still_finishes_deletion(store, published, caplog):
    rec = Recorder()
    deleter = _deleter(store, rec)
    notices, deleted = [], []
    deleter.noticeRaised.connect(notices.append)
    deleter.deleted.connect(deleted.append)
    store.write_record(KEY, {"shift": "A"})

    def reset():
        raise RuntimeError("form reset failed")

    with caplog.at_level(logging.ERROR):
        assert deleter.delete(KEY, reset) is True

    assert "form reset failed" in caplog.text
    assert [(c.key, c.value) for c in published] == [(KEY, None)]
    assert deleted == [KEY]
    assert notices[0].severity == "success"

    # a save racing the failed reset is still removed and the form is left
    store.write_record(KEY, {"shift": "A"})
    QTest.qWait(200)

    assert store.get(KEY) is None
    assert rec.calls == [("navigate", "/area/calidad")]


def test_unknown_key_redirects_to_dashboard(store):
    rec = Recorder()
    deleter = _deleter(store, rec)
    store.write_record("checklist-custom-draft", {"a": "1"})
    notices = []
    deleter.noticeRaised.connect(notices.append)

    assert deleter.delete("checklist-custom-draft") is True
    QTest.qWait(150)

    assert rec.calls == [("navigate", "/dashboard")]
    assert "checklist-custom-draft" in notices[0].message


def test_deleting_missing_draft_still_succeeds(store):
    rec = Recorder()
    deleter = _deleter(store, rec)
    assert deleter.delete(KEY) is True
    QTest.qWait(150)
    assert rec.calls == [("navigate", "/area/calidad")]


def test_failed_delete_keeps_state_and_notifies(store, backend, published):
    rec = Recorder()
    deleter = _deleter(store, rec)
    store.write_record(KEY, {"shift": "A"})
    notices, failures = [], []
    deleter.noticeRaised.connect(notices.append)
    deleter.deleteFailed.connect(lambda key, message: failures.append((key, message)))
    resets = []

    backend.enabled = False
    assert deleter.delete(KEY, lambda: resets.append(True)) is False
    QTest.qWait(150)
    backend.enabled = True

    assert resets == []
    assert published == []
    assert rec.calls == []
    assert failures and failures[0][0] == KEY
    assert notices[0].severity == "error"
    assert store.read_record(KEY) == {"shift": "A"}
