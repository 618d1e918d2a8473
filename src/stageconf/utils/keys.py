"""Helpers for dot-delimited configuration keys."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

__all__ = ["flatten", "simple_subkeys", "has_key_or_subkeys"]


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(_stringify(item) for item in value)
    return str(value)


def flatten(data: Mapping[str, Any], prefix: str = "") -> dict[str, str]:
    """Flatten nested mappings into dot-delimited keys with string values.

    Booleans become ``true``/``false``, sequences are joined with ``,`` and
    ``None`` leaves are dropped.
    """
    result: dict[str, str] = {}
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            result.update(flatten(value, full_key))
        elif value is not None:
            result[full_key] = _stringify(value)
    return result


def simple_subkeys(keys: Iterable[str], prefix: str) -> set[str]:
    """Return the first path segment of every key under ``prefix``.

    Example:
        simple_subkeys(["a.b.c", "a.d", "ab"], "a") == {"b", "d"}
    """
    search_prefix = prefix + "."
    result: set[str] = set()
    for key in keys:
        if not key.startswith(search_prefix):
            continue
        remainder = key[len(search_prefix):]
        result.add(remainder.split(".", 1)[0])
    return result


def has_key_or_subkeys(keys: Iterable[str], key: str) -> bool:
    """Check whether ``key`` exists exactly or as a prefix of another key."""
    search_prefix = key + "."
    return any(k == key or k.startswith(search_prefix) for k in keys)
