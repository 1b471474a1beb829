"""
Lenient coercion helpers for the storage boundary.

Persisted payloads and LLM output are untrusted blobs: wrong types are
defaulted rather than rejected, and strings are clipped to their limits.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel

E = TypeVar("E", bound=Enum)

SHORT_TEXT = 500
LONG_TEXT = 5_000
NOTES_TEXT = 10_000
RAW_JOB_TEXT = 50_000


def ensure_str(val: Any, max_length: int = SHORT_TEXT) -> str:
    """Return val as a clipped string; None and containers become ''."""
    if val is None or isinstance(val, (dict, list, tuple, set)):
        return ""
    return str(val)[:max_length]


def ensure_optional_str(val: Any, max_length: int = SHORT_TEXT) -> str | None:
    """Like ensure_str, but keeps absence (None or blank) as None."""
    text = ensure_str(val, max_length)
    return text if text.strip() else None


def ensure_list(val: Any) -> list:
    """Ensure the value is a list. Anything else becomes []."""
    if isinstance(val, list):
        return val
    if isinstance(val, tuple):
        return list(val)
    return []


def ensure_str_list(val: Any, max_length: int = SHORT_TEXT) -> list[str]:
    """Ensure the value is a list of strings."""
    if isinstance(val, str):
        return [val[:max_length]] if val.strip() else []
    return [ensure_str(v, max_length) for v in ensure_list(val) if v is not None]


def ensure_mapping(val: Any) -> dict | BaseModel:
    """Pass dicts and models through; anything else becomes {}."""
    if isinstance(val, (dict, BaseModel)):
        return val
    return {}


def ensure_bool(val: Any, default: bool) -> bool:
    if isinstance(val, bool):
        return val
    if isinstance(val, str):
        lowered = val.strip().lower()
        if lowered in ("true", "1", "yes"):
            return True
        if lowered in ("false", "0", "no"):
            return False
        return default
    if isinstance(val, (int, float)):
        return bool(val)
    return default


def safe_enum(enum_cls: type[E], val: Any, default: E) -> E:
    """Map val onto enum_cls, falling back to default for unknown values."""
    if isinstance(val, enum_cls):
        return val
    try:
        return enum_cls(str(val).strip().lower())
    except ValueError:
        return default
