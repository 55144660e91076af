"""Key/value persistence for checklist drafts.

A :class:`DraftBackend` is the shared "origin": every window of the app (and,
for the SQLite backend, every process on the workstation) sees the same
keys. A :class:`DraftStore` is one store context on top of a backend. When a
store changes a key, the backend forwards a
:class:`~modules.drafts.change_bus.StorageEvent` to the bus of every *other*
attached store, never to the writer itself.

Values are JSON strings. ``DraftStore`` exposes the raw string contract
(``get``/``set``/``remove``) plus record helpers that encode and decode
DraftRecords.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

from utils.app_settings import DraftSettings, load_draft_settings

from .change_bus import ChangeBus, StorageEvent
from .emptiness import has_meaningful_data
from .exceptions import MalformedRecord, StoreUnavailable

logger = logging.getLogger(__name__)


def _now_utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class QuotaExceededError(OSError):
    """Raised by a backend when a write would exceed its storage quota."""


class DraftBackend:
    """Shared storage origin. Subclasses implement the four raw operations."""

    def __init__(self) -> None:
        self._stores: List["DraftStore"] = []

    # ---- Contexts -----------------------------------------------------------
    def attach(self, store: "DraftStore") -> None:
        if store not in self._stores:
            self._stores.append(store)

    def detach(self, store: "DraftStore") -> None:
        if store in self._stores:
            self._stores.remove(store)

    def broadcast(self, source: "DraftStore", key: str, old: Optional[str], new: Optional[str]) -> None:
        event = StorageEvent(key, old, new)
        for store in list(self._stores):
            if store is source:
                continue
            store.deliver(event)

    # ---- Raw operations -----------------------------------------------------
    def read(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def write(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def keys(self) -> List[str]:
        raise NotImplementedError

    def read_many(self, keys: Iterable[str]) -> Dict[str, str]:
        """Stored values for the present subset of ``keys``."""
        found = {}
        for key in keys:
            value = self.read(key)
            if value is not None:
                found[key] = value
        return found


class MemoryDraftBackend(DraftBackend):
    """Process-local origin.

    ``quota`` caps the summed length of keys and values; ``enabled = False``
    makes every operation fail as if storage were disabled.
    """

    def __init__(self, quota: Optional[int] = None) -> None:
        super().__init__()
        self._data: Dict[str, str] = {}
        self.quota = quota
        self.enabled = True

    def _check_enabled(self) -> None:
        if not self.enabled:
            raise PermissionError("draft storage is disabled")

    def _usage_with(self, key: str, value: str) -> int:
        total = sum(len(k) + len(v) for k, v in self._data.items() if k != key)
        return total + len(key) + len(value)

    def read(self, key: str) -> Optional[str]:
        self._check_enabled()
        return self._data.get(key)

    def write(self, key: str, value: str) -> None:
        self._check_enabled()
        if self.quota is not None and self._usage_with(key, value) > self.quota:
            raise QuotaExceededError(f"quota of {self.quota} exceeded writing {key}")
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._check_enabled()
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        self._check_enabled()
        return list(self._data.keys())


class SqliteDraftBackend(DraftBackend):
    """Origin backed by a SQLite file shared by every process that opens it.

    Other processes get no push notification; their registries pick the
    change up on the next poll.
    """

    def __init__(self, path: Path | str) -> None:
        super().__init__()
        self.path = Path(path)
        self._schema_ready = False

    def _connect(self) -> sqlite3.Connection:
        if not self._schema_ready:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        return conn

    @staticmethod
    def _ensure_schema(conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS drafts (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        conn = self._connect()
        try:
            if not self._schema_ready:
                self._ensure_schema(conn)
                self._schema_ready = True
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def read(self, key: str) -> Optional[str]:
        with self._connection() as conn:
            row = conn.execute("SELECT value FROM drafts WHERE key = ?", (key,)).fetchone()
        return None if row is None else row["value"]

    def write(self, key: str, value: str) -> None:
        with self._connection() as conn:
            conn.execute(
                "INSERT INTO drafts (key, value, updated_at) VALUES (?, ?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at",
                (key, value, _now_utc_iso()),
            )

    def delete(self, key: str) -> None:
        with self._connection() as conn:
            conn.execute("DELETE FROM drafts WHERE key = ?", (key,))

    def keys(self) -> List[str]:
        with self._connection() as conn:
            rows = conn.execute("SELECT key FROM drafts ORDER BY key").fetchall()
        return [row["key"] for row in rows]

    def read_many(self, keys: Iterable[str]) -> Dict[str, str]:
        wanted = list(dict.fromkeys(keys))
        if not wanted:
            return {}
        placeholders = ", ".join("?" for _ in wanted)
        with self._connection() as conn:
            rows = conn.execute(
                f"SELECT key, value FROM drafts WHERE key IN ({placeholders})", wanted
            ).fetchall()
        return {row["key"]: row["value"] for row in rows}


def encode_record(key: str, record: Any) -> str:
    try:
        return json.dumps(record, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        raise MalformedRecord(f"Draft for {key} is not JSON serializable: {exc}", key) from exc


def decode_record(key: str, raw: str) -> Dict[str, Any]:
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise MalformedRecord(f"Stored draft for {key} is not valid JSON", key) from exc
    if not isinstance(parsed, dict):
        raise MalformedRecord(f"Stored draft for {key} is not an object", key)
    return parsed


class DraftStore:
    """One store context over a shared :class:`DraftBackend`."""

    def __init__(
        self,
        backend: DraftBackend,
        bus: Optional[ChangeBus] = None,
        *,
        context_id: Optional[str] = None,
    ) -> None:
        self.backend = backend
        self.bus = bus
        self.context_id = context_id or f"ctx-{id(self):x}"
        backend.attach(self)

    def _guard(self, operation: str, key: Optional[str], func: Callable, *args):
        try:
            return func(*args)
        except (sqlite3.Error, OSError) as exc:
            raise StoreUnavailable(key, operation, exc) from exc

    def deliver(self, event: StorageEvent) -> None:
        if self.bus is not None:
            self.bus.deliver_storage_event(event)

    def close(self) -> None:
        self.backend.detach(self)

    # ---- Raw string contract -----------------------------------------------
    def get(self, key: str) -> Optional[str]:
        return self._guard("get", key, self.backend.read, key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError("DraftStore.set expects a serialized string value")
        old = self._guard("set", key, self.backend.read, key)
        self._guard("set", key, self.backend.write, key, value)
        if old != value:
            self.backend.broadcast(self, key, old, value)

    def remove(self, key: str) -> None:
        old = self._guard("remove", key, self.backend.read, key)
        if old is None:
            return
        self._guard("remove", key, self.backend.delete, key)
        self.backend.broadcast(self, key, old, None)

    def keys(self) -> List[str]:
        return self._guard("keys", None, self.backend.keys)

    def get_many(self, keys: Iterable[str]) -> Dict[str, str]:
        """Raw values for those of ``keys`` that are stored, in one backend call."""
        return self._guard("get_many", None, self.backend.read_many, list(keys))

    # ---- Record helpers ----------------------------------------------------
    def read_record(self, key: str) -> Optional[Dict[str, Any]]:
        raw = self.get(key)
        if raw is None:
            return None
        return decode_record(key, raw)

    def write_record(self, key: str, record: Any) -> str:
        raw = encode_record(key, record)
        self.set(key, raw)
        return raw

    def has_draft(self, key: str) -> bool:
        """True when ``key`` holds a readable record with meaningful data."""
        try:
            record = self.read_record(key)
        except (StoreUnavailable, MalformedRecord) as exc:
            logger.warning("[drafts] unable to check draft %s: %s", key, exc)
            return False
        return record is not None and has_meaningful_data(record)

    def clear_matching(self, predicate: Callable[[str], bool]) -> int:
        """Remove every key for which ``predicate`` is true; returns the count."""
        removed = 0
        for key in self.keys():
            if not predicate(key):
                continue
            self.remove(key)
            removed += 1
            if self.bus is not None:
                self.bus.publish(key, None)
        if removed:
            logger.info("[drafts] cleared %d stored draft(s)", removed)
        return removed


def open_backend(settings: Optional[DraftSettings] = None) -> DraftBackend:
    """Build the backend selected by the application settings."""
    settings = settings or load_draft_settings()
    if settings.backend == "memory":
        logger.info("[drafts] using in-memory draft storage; drafts will not survive restart")
        return MemoryDraftBackend()
    logger.debug("[drafts] using SQLite draft storage at %s", settings.sqlite_path)
    return SqliteDraftBackend(settings.sqlite_path)


__all__ = [
    "DraftBackend",
    "DraftStore",
    "MemoryDraftBackend",
    "QuotaExceededError",
    "SqliteDraftBackend",
    "decode_record",
    "encode_record",
    "open_backend",
]
