"""Helpers for safely working with dynamic (untyped) structures.

Use these helpers at boundaries where we ingest YAML or other untyped data.
They provide runtime validation and static type narrowing.
"""

from __future__ import annotations

from typing import Mapping, TypeGuard, cast

StrDict = dict[str, object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    """Return True if obj is a dict with string keys."""
    if not isinstance(obj, dict):
        return False
    d = cast(dict[object, object], obj)
    return all(isinstance(k, str) for k in d.keys())


def as_str_dict(obj: object) -> StrDict | None:
    """Return obj as StrDict if it matches, else None."""
    if is_str_dict(obj):
        return obj
    return None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Get a string value from a mapping, stripping whitespace.

    Returns None if missing, not a str, or empty after stripping.
    """
    value = table.get(key)
    if not isinstance(value, str):
        return None
    s = value.strip()
    return s or None


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    """Get a nested table (dict with string keys) from a mapping."""
    return as_str_dict(table.get(key))


def get_str_list(table: Mapping[str, object], key: str) -> tuple[str, ...] | None:
    """Get a string or list of strings as a tuple.

    Config files write glob patterns either as a single string or as a list.
    Non-string list items and blank strings are dropped. Returns None when the
    key is missing or holds neither form.
    """
    value = table.get(key)
    if isinstance(value, str):
        s = value.strip()
        return (s,) if s else ()
    if isinstance(value, list):
        items = cast(list[object], value)
        return tuple(s.strip() for s in items if isinstance(s, str) and s.strip())
    return None
