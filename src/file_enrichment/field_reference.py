"""Field references into nested records.

A reference is either a plain top-level name (``userid``) or a bracketed
path (``[user][id]``). Plain names are taken literally, so a name containing
dots or spaces is still a single top-level key.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, MutableMapping
from typing import Any

_BRACKETED = re.compile(r"^(\[[^\[\]]+\])+$")
_SEGMENT = re.compile(r"\[([^\[\]]+)\]")

_MISSING = object()


def parse_field_reference(reference: str) -> tuple[str, ...]:
    """Split a field reference into its path segments.

    Raises ``ValueError`` for empty references and for malformed bracketed
    ones such as ``[a`` or ``[a]b``.
    """
    if not reference:
        raise ValueError("field reference must not be empty")
    if not reference.startswith("["):
        return (reference,)
    if not _BRACKETED.match(reference):
        raise ValueError(f"Invalid field reference: {reference!r}")
    return tuple(_SEGMENT.findall(reference))


def _lookup(record: Mapping[str, Any], path: tuple[str, ...]) -> Any:
    node: Any = record
    for part in path:
        if not isinstance(node, Mapping) or part not in node:
            return _MISSING
        node = node[part]
    return node


def has_field(record: Mapping[str, Any], path: tuple[str, ...]) -> bool:
    return _lookup(record, path) is not _MISSING


def get_field(record: Mapping[str, Any], path: tuple[str, ...], default: Any = None) -> Any:
    value = _lookup(record, path)
    return default if value is _MISSING else value


def set_field(record: MutableMapping[str, Any], path: tuple[str, ...], value: Any) -> None:
    """Write ``value`` at ``path``, creating intermediate objects as needed.

    Raises ``TypeError`` when an intermediate segment exists but is not an
    object. Nothing is written in that case.
    """
    node: MutableMapping[str, Any] = record
    for part in path[:-1]:
        child = node.get(part, _MISSING)
        if child is _MISSING:
            child = {}
            node[part] = child
        elif not isinstance(child, MutableMapping):
            raise TypeError(f"Cannot descend into non-object field {part!r}")
        node = child
    node[path[-1]] = value
