"""Pre-order flat index of every node in a document.

Built once after load and shared read-only by search and status counters.
"""

from __future__ import annotations

import json
from dataclasses import dataclass

from .kinds import ARRAY, BOOLEAN, NULL, NUMBER, OBJECT, basic_kind
from .paths import ROOT, PathSegment, child_items, encode_path

DISPLAY_VALUE_MAX_CHARS = 120


@dataclass(frozen=True)
class NodeDescriptor:
    """Derived record describing one document node."""

    path: str
    key: str
    value: object
    kind: str
    display_value: str
    depth: int = 0

    @property
    def is_container(self) -> bool:
        return self.kind in {OBJECT, ARRAY}


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def display_value(value: object, max_chars: int = DISPLAY_VALUE_MAX_CHARS) -> str:
    """Return the short textual summary shown beside a node."""
    kind = basic_kind(value)
    if kind == OBJECT and isinstance(value, dict):
        return "{" + _plural(len(value), "key") + "}"
    if kind == ARRAY and isinstance(value, (list, tuple)):
        return "[" + _plural(len(value), "item") + "]"
    if kind == NULL:
        return "null"
    if kind == BOOLEAN:
        return "true" if value else "false"
    if kind == NUMBER:
        try:
            return json.dumps(value)
        except (TypeError, ValueError):
            return str(value)
    text = str(value)
    if len(text) > max_chars:
        return text[: max_chars - 1] + "…"
    return text


def key_label(key: PathSegment | None) -> str:
    if key is None:
        return ""
    if isinstance(key, int):
        return f"[{key}]"
    return str(key)


def describe(path: str, key: PathSegment | None, value: object, depth: int = 0) -> NodeDescriptor:
    return NodeDescriptor(
        path=path,
        key=key_label(key),
        value=value,
        kind=basic_kind(value),
        display_value=display_value(value),
        depth=depth,
    )


def build_flat_index(document: object) -> tuple[NodeDescriptor, ...]:
    """Return descriptors for every node in depth-first pre-order.

    Uses an explicit stack so very deep documents do not hit the recursion
    limit. Children are pushed in reverse so they pop in document order.
    """
    out: list[NodeDescriptor] = []
    stack: list[tuple[str, PathSegment | None, object, int]] = [(ROOT, None, document, 0)]
    while stack:
        path, key, value, depth = stack.pop()
        out.append(describe(path, key, value, depth))
        children = child_items(value)
        if not children:
            continue
        is_sequence = isinstance(value, list)
        for child_key, child_value in reversed(children):
            stack.append((encode_path(path, child_key, is_sequence), child_key, child_value, depth + 1))
    return tuple(out)
