"""Path strings for addressing nodes inside a loaded document.

The root is the empty string. Mapping children append ``.key`` (no dot before
the first segment) and sequence children append ``[index]``. The empty key and
the ``$`` key are written as quoted brackets, ``a[""]`` and ``["$"]``. Keys
that contain ``.``, ``[`` or ``]`` do not survive a round
trip; there is no escaping.
"""

from __future__ import annotations

import re

ROOT = ""
ROOT_MARKER = "$"

PathSegment = str | int

_SEGMENT_RE = re.compile(r"\[([^\]]*)\]|\.?([^.\[\]]+)")
_QUOTED_KEYS = frozenset({"", ROOT_MARKER})


class _NotFound:
    """Singleton marker for paths that do not resolve against the document."""

    _instance: _NotFound | None = None

    def __new__(cls) -> _NotFound:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = _NotFound()


def is_root(path: str | None) -> bool:
    """Return whether ``path`` denotes the document root."""
    return not path or path == ROOT_MARKER


def encode_path(parent_path: str, key: PathSegment, parent_is_sequence: bool) -> str:
    """Return the path of child ``key`` below ``parent_path``."""
    parent = ROOT if is_root(parent_path) else parent_path
    if parent_is_sequence:
        return f"{parent}[{key}]"
    if key in _QUOTED_KEYS:
        return f'{parent}["{key}"]'
    if parent:
        return f"{parent}.{key}"
    return str(key)


def decode_path(path: str | None) -> list[PathSegment]:
    """Split a path string into ordered key/index segments.

    Bracketed integers become ``int`` segments; anything else is a mapping key,
    with surrounding double quotes removed. A leading ``$`` root marker (``$``,
    ``$.a``, ``$[0]``) is accepted.
    """
    if path is None or is_root(path):
        return []
    text = path
    if text.startswith(ROOT_MARKER) and text[1:2] in {".", "["}:
        text = text[1:]

    segments: list[PathSegment] = []
    for match in _SEGMENT_RE.finditer(text):
        bracketed, name = match.group(1), match.group(2)
        if bracketed is not None:
            stripped = bracketed.strip()
            if stripped.isdigit():
                segments.append(int(stripped))
            elif len(stripped) >= 2 and stripped[0] == stripped[-1] == '"':
                segments.append(stripped[1:-1])
            else:
                segments.append(bracketed)
        elif name is not None:
            segments.append(name)
    return segments


def join_segments(segments: list[PathSegment]) -> str:
    """Inverse of :func:`decode_path` for well-formed segment lists."""
    path = ROOT
    for segment in segments:
        path = encode_path(path, segment, isinstance(segment, int))
    return path


def resolve_path(document: object, path: str | None) -> object:
    """Return the value at ``path`` or :data:`NOT_FOUND`.

    Never raises for a missing key, an out-of-range index or a scalar in the
    middle of the path.
    """
    current = document
    for segment in decode_path(path):
        if isinstance(current, dict):
            key = str(segment)
            if key not in current:
                return NOT_FOUND
            current = current[key]
        elif isinstance(current, list):
            if isinstance(segment, bool) or not isinstance(segment, int):
                return NOT_FOUND
            if segment < 0 or segment >= len(current):
                return NOT_FOUND
            current = current[segment]
        else:
            return NOT_FOUND
    return current


def parent_path(path: str | None) -> str:
    """Return the parent of ``path``; the root is its own parent."""
    segments = decode_path(path)
    if not segments:
        return ROOT
    return join_segments(segments[:-1])


def ancestor_chain(path: str | None) -> list[str]:
    """Return ancestor paths from root down to the parent of ``path``."""
    segments = decode_path(path)
    return [join_segments(segments[:depth]) for depth in range(len(segments))]


def path_depth(path: str | None) -> int:
    return len(decode_path(path))


def last_segment_label(path: str | None) -> str:
    """Return the label shown for the node itself (``key`` or ``[n]``)."""
    segments = decode_path(path)
    if not segments:
        return ROOT_MARKER
    segment = segments[-1]
    if isinstance(segment, int):
        return f"[{segment}]"
    return segment


def child_items(value: object) -> list[tuple[PathSegment, object]]:
    """Return ``(key, child)`` pairs in document order; scalars have none."""
    if isinstance(value, dict):
        return list(value.items())
    if isinstance(value, list):
        return list(enumerate(value))
    return []


def child_paths(path: str, value: object) -> list[str]:
    """Return encoded paths for the children of container ``value``."""
    is_sequence = isinstance(value, list)
    return [encode_path(path, key, is_sequence) for key, _ in child_items(value)]


def is_container(value: object) -> bool:
    return isinstance(value, (dict, list))


__all__ = [
    "NOT_FOUND",
    "PathSegment",
    "ROOT",
    "ROOT_MARKER",
    "ancestor_chain",
    "child_items",
    "child_paths",
    "decode_path",
    "encode_path",
    "is_container",
    "is_root",
    "join_segments",
    "last_segment_label",
    "parent_path",
    "path_depth",
    "resolve_path",
]
