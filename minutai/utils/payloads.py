"""Null-safe access helpers for provider payloads (dicts or SDK objects)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def as_data(raw: Any) -> Any:
    if raw is None or isinstance(raw, (Mapping, str)):
        return raw
    if hasattr(raw, "model_dump"):
        try:
            return raw.model_dump()
        except Exception:  # pragma: no cover
            return None
    if hasattr(raw, "to_dict"):
        try:
            return raw.to_dict()
        except Exception:  # pragma: no cover
            return None
    return raw


def field_of(obj: Any, name: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def first_of(items: Any) -> Any:
    if isinstance(items, (list, tuple)) and items:
        return items[0]
    return None


__all__ = ["as_data", "field_of", "first_of"]
