"""Dot-path access into nested module documents.

Paths are parsed once into explicit segment tuples. Reads never raise on
missing data; writes create intermediate dicts as needed.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping, Sequence
from typing import Any

FieldPath = tuple[str, ...]


class PathError(Exception):
    """Raised for malformed paths or writes through a non-mapping value."""


def parse_path(path: str | Sequence[str]) -> FieldPath:
    """Split a dot-path into segments.

    Raises:
        PathError: If the path is empty or contains an empty segment.
    """
    segments = tuple(path.split(".")) if isinstance(path, str) else tuple(path)
    if not segments or any(not s for s in segments):
        raise PathError(f"Invalid field path: {path!r}")
    return segments


def format_path(path: FieldPath) -> str:
    return ".".join(path)


def _child(current: Any, segment: str, default: Any) -> Any:
    if isinstance(current, Mapping):
        return current.get(segment, default)
    if isinstance(current, Sequence) and not isinstance(current, str) and segment.isdigit():
        index = int(segment)
        return current[index] if index < len(current) else default
    return default


def get_path(data: Any, path: FieldPath | str, default: Any = None) -> Any:
    """Read the value at path, returning default at any missing step."""
    segments = parse_path(path) if isinstance(path, str) else path
    current = data
    for segment in segments:
        current = _child(current, segment, default)
        if current is default:
            return default
    return current


def set_path(data: MutableMapping[str, Any], path: FieldPath | str, value: Any) -> None:
    """Write value at path, creating intermediate dicts.

    Raises:
        PathError: If an intermediate step exists and is not a mapping.
    """
    segments = parse_path(path) if isinstance(path, str) else path
    head, last = segments[:-1], segments[-1]
    current: MutableMapping[str, Any] = data
    for depth, segment in enumerate(head):
        if segment not in current:
            current[segment] = {}
        nxt = current[segment]
        if not isinstance(nxt, MutableMapping):
            blocked = format_path(segments[: depth + 1])
            raise PathError(
                f"Cannot write '{format_path(segments)}': '{blocked}' holds "
                f"{type(nxt).__name__}, not a mapping"
            )
        current = nxt
    current[last] = value
