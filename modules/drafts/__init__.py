"""Local draft persistence for operational checklists.

Forms bind to a :class:`PersistenceController`; dashboards read an
:class:`IncompleteRegistry`; explicit deletion goes through a
:class:`DraftDeleter`. All of them share one :class:`DraftStore` and
:class:`ChangeBus` per window.
"""

from __future__ import annotations

from .change_bus import ChangeBus, DraftChange, StorageEvent
from .deleter import DraftDeleter
from .emptiness import has_meaningful_data
from .exceptions import DraftStoreError, MalformedRecord, StoreUnavailable
from .models import CATALOG, ChecklistDescriptor, DraftNotice, IncompleteEntry
from .persistence import PersistenceController
from .registry import IncompleteRegistry
from .storage import DraftStore, MemoryDraftBackend, SqliteDraftBackend, open_backend

__all__ = [
    "CATALOG",
    "ChangeBus",
    "ChecklistDescriptor",
    "DraftChange",
    "DraftDeleter",
    "DraftNotice",
    "DraftStore",
    "DraftStoreError",
    "IncompleteEntry",
    "IncompleteRegistry",
    "MalformedRecord",
    "MemoryDraftBackend",
    "PersistenceController",
    "SqliteDraftBackend",
    "StorageEvent",
    "StoreUnavailable",
    "has_meaningful_data",
    "open_backend",
]
