"""Decide whether a draft snapshot holds anything worth keeping.

Forms start out filled with default values (blank strings, zero counters,
empty row lists), so "the key exists" is not the same as "there is a draft".
The rule is intentionally lossy: zero is treated as unset, which means a
genuinely-zero measurement is indistinguishable from an untouched field.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def has_meaningful_data(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return True
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, (list, tuple)):
        # shallow: a row list counts even if every row is blank
        return len(value) > 0
    if isinstance(value, Mapping):
        return any(has_meaningful_data(v) for v in value.values())
    return True


def is_empty_snapshot(value: Any) -> bool:
    return not has_meaningful_data(value)


__all__ = ["has_meaningful_data", "is_empty_snapshot"]
