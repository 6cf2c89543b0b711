"""Ordered fallback chains for reading loosely-typed provider JSON.

A chain is a tuple of accessors tried in order. An accessor is either a
dotted path (``"property.name"``, ``"photos.0"``, ``"segments.-1.arrival"``)
or a callable taking the raw item. The first accessor producing a non-empty
value wins.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

Accessor = str | Callable[[Mapping[str, Any]], Any]
Chain = tuple[Accessor, ...]
FieldTable = Mapping[str, Chain]


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def get_path(raw: Any, path: str) -> Any:
    current = raw
    for part in path.split("."):
        if isinstance(current, Mapping):
            current = current.get(part)
        elif isinstance(current, (list, tuple)):
            try:
                current = current[int(part)]
            except (ValueError, IndexError):
                return None
        else:
            return None
        if current is None:
            return None
    return current


def resolve(raw: Mapping[str, Any], chain: Chain, default: Any = None) -> Any:
    for accessor in chain:
        if callable(accessor):
            try:
                value = accessor(raw)
            except (KeyError, IndexError, StopIteration, TypeError, ValueError, AttributeError):
                value = None
        else:
            value = get_path(raw, accessor)
        if not _is_empty(value):
            return value
    return default


def resolve_all(raw: Mapping[str, Any], chain: Chain) -> list[Any]:
    """Collect every non-empty value along the chain, flattening lists."""
    values: list[Any] = []
    for accessor in chain:
        value = resolve(raw, (accessor,))
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            values.extend(v for v in value if not _is_empty(v))
        else:
            values.append(value)
    return values


def field(table: FieldTable, raw: Mapping[str, Any], name: str, default: Any = None) -> Any:
    return resolve(raw, table.get(name, ()), default)
