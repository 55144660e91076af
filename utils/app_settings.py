"""Application settings switches used by the drafts module.

Provides the `DEV_MODE` flag plus the draft persistence settings. Each value
comes from an environment variable first, then from the INI file in the data
directory (`data/app.ini` unless `CHECKLIST_DRAFTS_DATA_DIR` points elsewhere),
then from the built-in default. The older `CHECKIN_DATA_DIR` and `SARAPP_DEV`
variables are still read when the project names are unset.

Example `app.ini`::

    [app]
    dev = true

    [drafts]
    backend = sqlite
    poll_ms = 1000
    reremove_ms = 50
    redirect_ms = 500
"""

from __future__ import annotations

import configparser
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

BACKENDS = ("sqlite", "memory")


def _env(*names: str) -> Optional[str]:
    """First non-blank value among ``names``."""
    for name in names:
        raw = os.environ.get(name)
        if raw is not None and raw.strip():
            return raw
    return None


def _data_dir() -> Path:
    return Path(_env("CHECKLIST_DRAFTS_DATA_DIR", "CHECKIN_DATA_DIR") or "data")


def _read_ini(data_dir: Optional[Path] = None) -> configparser.ConfigParser:
    cp = configparser.ConfigParser()
    ini_path = (data_dir or _data_dir()) / "app.ini"
    if not ini_path.exists():
        return cp
    try:
        cp.read(ini_path)
    except configparser.Error as exc:
        logger.warning("[settings] ignoring unreadable %s: %s", ini_path, exc)
        return configparser.ConfigParser()
    return cp


def _read_ini_flag() -> bool:
    """Read `DEV_MODE` from the `[app]` section (`dev = true/false/1/0`)."""
    raw = _read_ini().get("app", "dev", fallback="0").strip().lower()
    return raw in {"1", "true", "yes", "on"}


DEV_MODE: bool = (
    str(_env("CHECKLIST_DRAFTS_DEV", "SARAPP_DEV") or "0").strip() in {"1", "true", "True"}
    or _read_ini_flag()
)


@dataclass(frozen=True)
class DraftSettings:
    data_dir: Path
    backend: str = "sqlite"
    poll_ms: int = 1000
    reremove_ms: int = 50
    redirect_ms: int = 500

    @property
    def sqlite_path(self) -> Path:
        return self.data_dir / "drafts.db"


def _setting(cp: configparser.ConfigParser, env: str, option: str) -> Optional[str]:
    raw = _env(env)
    if raw is None:
        raw = cp.get("drafts", option, fallback=None)
    return raw.strip() if raw is not None else None


def _int_setting(cp: configparser.ConfigParser, env: str, option: str, default: int) -> int:
    raw = _setting(cp, env, option)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("[settings] invalid %s=%r; using %d", option, raw, default)
        return default
    if value < 0:
        logger.warning("[settings] negative %s=%d; using %d", option, value, default)
        return default
    return value


def load_draft_settings(data_dir: Optional[Path] = None) -> DraftSettings:
    base = Path(data_dir) if data_dir is not None else _data_dir()
    cp = _read_ini(base)

    backend = (_setting(cp, "CHECKLIST_DRAFTS_BACKEND", "backend") or "sqlite").lower()
    if backend not in BACKENDS:
        logger.warning("[settings] unknown drafts backend %r; using sqlite", backend)
        backend = "sqlite"

    return DraftSettings(
        data_dir=base,
        backend=backend,
        poll_ms=_int_setting(cp, "CHECKLIST_DRAFTS_POLL_MS", "poll_ms", 1000),
        reremove_ms=_int_setting(cp, "CHECKLIST_DRAFTS_REREMOVE_MS", "reremove_ms", 50),
        redirect_ms=_int_setting(cp, "CHECKLIST_DRAFTS_REDIRECT_MS", "redirect_ms", 500),
    )


__all__ = ["DEV_MODE", "DraftSettings", "load_draft_settings"]
