from .catalog import (
    AREAS,
    CATALOG,
    DASHBOARD_PATH,
    ChecklistDescriptor,
    IncompleteEntry,
    area_path,
    area_path_for_key,
    build_catalog,
    descriptor_for_key,
    descriptors_for_area,
    is_catalog_key,
    is_draft_key,
    storage_key_for,
)
from .notice import DraftNotice, Severity

__all__ = [
    "AREAS",
    "CATALOG",
    "DASHBOARD_PATH",
    "ChecklistDescriptor",
    "DraftNotice",
    "IncompleteEntry",
    "Severity",
    "area_path",
    "area_path_for_key",
    "build_catalog",
    "descriptor_for_key",
    "descriptors_for_area",
    "is_catalog_key",
    "is_draft_key",
    "storage_key_for",
]
