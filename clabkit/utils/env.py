"""Helpers for environment variables and for merging mappings."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional


def convert_envs(m: Optional[Mapping[str, str]]) -> list[str]:
    """Turn a mapping of environment variables into ``KEY=VALUE`` strings."""
    if not m:
        return []
    return [f"{key}={value}" for key, value in m.items()]


def _key_str(key: Any) -> str:
    if isinstance(key, bool):
        return "true" if key else "false"
    return str(key)


def _mapify(value: Any) -> Optional[dict[str, Any]]:
    """Return a shallow copy of ``value`` with string keys, or None if it is no mapping."""
    if isinstance(value, Mapping):
        return {_key_str(k): v for k, v in value.items()}
    return None


def merge_maps(*args: Optional[Mapping[Any, Any]]) -> dict[str, Any]:
    """Merge mappings left to right into a new dict.

    Later values win; where both the existing and the new value are
    mappings they are merged recursively. The inputs are not changed.
    """
    result: dict[str, Any] = {}
    for mapping in args:
        if mapping is None:
            continue
        for key, value in mapping.items():
            new_map = _mapify(value)
            if key in result and new_map is not None:
                old_map = _mapify(result[key])
                if old_map is not None:
                    result[key] = merge_maps(old_map, new_map)
                    continue
            result[key] = new_map if new_map is not None else value
    return result


def merge_string_maps(*args: Optional[Mapping[str, str]]) -> Optional[dict[str, str]]:
    """Merge string mappings into a new dict; later values win.

    Returns None when the merged result is empty.
    """
    result: dict[str, str] = {}
    for mapping in args:
        if mapping:
            result.update(mapping)
    return result or None


def string_in_slice(slice: list[str], val: str) -> tuple[int, bool]:
    """Return the index of ``val`` in ``slice`` and whether it was found."""
    try:
        return slice.index(val), True
    except ValueError:
        return -1, False