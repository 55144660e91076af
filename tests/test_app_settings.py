from __future__ import annotations

import logging
from pathlib import Path

from utils.app_settings import DraftSettings, load_draft_settings


def _write_ini(data_dir: Path, body: str) -> None:
    data_dir.mkdir(parents=True, exist_ok=True)
    (data_dir / "app.ini").write_text(body, encoding="utf-8")


def test_defaults_without_ini(tmp_path):
    settings = load_draft_settings(tmp_path)
    assert settings == DraftSettings(data_dir=tmp_path)
    assert settings.backend == "sqlite"
    assert settings.poll_ms == 1000
    assert settings.reremove_ms == 50
    assert settings.redirect_ms == 500
    assert settings.sqlite_path == tmp_path / "drafts.db"


def test_ini_values(tmp_path):
    _write_ini(
        tmp_path,
        "[drafts]\nbackend = memory\npoll_ms = 250\nreremove_ms = 20\nredirect_ms = 300\n",
    )
    settings = load_draft_settings(tmp_path)
    assert settings.backend == "memory"
    assert settings.poll_ms == 250
    assert settings.reremove_ms == 20
    assert settings.redirect_ms == 300


def test_environment_wins_over_ini(tmp_path, monkeypatch):
    _write_ini(tmp_path, "[drafts]\npoll_ms = 250\nbackend = memory\n")
    monkeypatch.setenv("CHECKLIST_DRAFTS_POLL_MS", "750")
    monkeypatch.setenv("CHECKLIST_DRAFTS_BACKEND", "SQLite")
    settings = load_draft_settings(tmp_path)
    assert settings.poll_ms == 750
    assert settings.backend == "sqlite"


def test_data_dir_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("CHECKLIST_DRAFTS_DATA_DIR", str(tmp_path))
    _write_ini(tmp_path, "[drafts]\nredirect_ms = 0\n")
    settings = load_draft_settings()
    assert settings.data_dir == tmp_path
    assert settings.redirect_ms == 0


def test_legacy_data_dir_variable(tmp_path, monkeypatch):
    monkeypatch.setenv("CHECKIN_DATA_DIR", str(tmp_path))
    assert load_draft_settings().data_dir == tmp_path


def test_project_data_dir_wins_over_legacy(tmp_path, monkeypatch):
    project_dir = tmp_path / "drafts"
    monkeypatch.setenv("CHECKIN_DATA_DIR", str(tmp_path / "legacy"))
    monkeypatch.setenv("CHECKLIST_DRAFTS_DATA_DIR", str(project_dir))
    settings = load_draft_settings()
    assert settings.data_dir == project_dir
    assert settings.sqlite_path == project_dir / "drafts.db"


def test_invalid_values_fall_back(tmp_path, monkeypatch, caplog):
    _write_ini(tmp_path, "[drafts]\npoll_ms = soon\nreremove_ms = -5\nbackend = redis\n")
    with caplog.at_level(logging.WARNING):
        settings = load_draft_settings(tmp_path)
    assert settings.poll_ms == 1000
    assert settings.reremove_ms == 50
    assert settings.backend == "sqlite"
    assert "invalid poll_ms" in caplog.text
    assert "unknown drafts backend" in caplog.text


def test_unreadable_ini_is_ignored(tmp_path, caplog):
    _write_ini(tmp_path, "poll_ms = 5\n[drafts\n")
    with caplog.at_level(logging.WARNING):
        settings = load_draft_settings(tmp_path)
    assert settings.poll_ms == 1000
