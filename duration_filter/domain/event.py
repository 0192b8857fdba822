"""Event abstraction consumed by the duration filter.

An event wraps a plain dict. Fields are addressed either by a top-level key
(``"start"``) or by a bracketed path into nested objects
(``"[timing][start]"``).
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Protocol

_SEGMENT_RE = re.compile(r"\[([^\[\]]+)\]")

TAGS_FIELD = "tags"

_MISSING = object()


class EventLike(Protocol):
    """Minimal event contract used by the filter."""

    def has(self, field: str) -> bool: ...

    def get(self, field: str, default: Any = None) -> Any: ...

    def set(self, field: str, value: Any) -> None: ...


def field_path(field: str) -> List[str]:
    """Split a field reference into its path segments.

    Examples
    --------
    >>> field_path("[timing][start]")
    ['timing', 'start']
    >>> field_path("start")
    ['start']
    """
    if field.startswith("["):
        segments = _SEGMENT_RE.findall(field)
        if segments and "".join(f"[{s}]" for s in segments) == field:
            return segments
    return [field]


class Event:
    """Dict-backed event supporting nested field references."""

    def __init__(self, data: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = data if data is not None else {}

    def _lookup(self, field: str) -> Any:
        node: Any = self._data
        for segment in field_path(field):
            if not isinstance(node, dict) or segment not in node:
                return _MISSING
            node = node[segment]
        return node

    def has(self, field: str) -> bool:
        return self._lookup(field) is not _MISSING

    def get(self, field: str, default: Any = None) -> Any:
        value = self._lookup(field)
        return default if value is _MISSING else value

    def set(self, field: str, value: Any) -> None:
        """Set ``field``, creating intermediate objects and overwriting values."""
        *parents, leaf = field_path(field)
        node = self._data
        for segment in parents:
            child = node.get(segment)
            if not isinstance(child, dict):
                child = {}
                node[segment] = child
            node = child
        node[leaf] = value

    def to_dict(self) -> Dict[str, Any]:
        return self._data

    def __repr__(self) -> str:
        return f"Event({self._data!r})"


def add_tag(event: EventLike, tag: str) -> None:
    """Append ``tag`` to the event's ``tags`` list unless already present."""
    tags = event.get(TAGS_FIELD)
    if tags is None:
        tags = []
    elif not isinstance(tags, list):
        tags = [tags]
    if tag not in tags:
        tags.append(tag)
    event.set(TAGS_FIELD, tags)
