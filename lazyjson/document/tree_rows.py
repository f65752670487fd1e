"""Visible-row projection of a document for the tree view."""

from __future__ import annotations

from dataclasses import dataclass

from .flat_index import key_label
from .paths import ROOT, PathSegment, child_items, encode_path, is_container


@dataclass(frozen=True)
class TreeRow:
    """One visible tree row; children appear only under expanded containers."""

    path: str
    key: str
    value: object
    depth: int
    is_container: bool
    expanded: bool = False


def build_tree_rows(document: object, expanded: set[str]) -> list[TreeRow]:
    """Build visible rows rooted at the document honoring ``expanded``.

    Walks with an explicit stack like ``build_flat_index``.
    """
    rows: list[TreeRow] = []
    stack: list[tuple[str, PathSegment | None, object, int]] = [(ROOT, None, document, 0)]
    while stack:
        path, key, value, depth = stack.pop()
        container = is_container(value)
        is_open = container and path in expanded
        rows.append(TreeRow(path, key_label(key), value, depth, container, is_open))
        if not is_open:
            continue
        is_sequence = isinstance(value, list)
        for child_key, child_value in reversed(child_items(value)):
            stack.append((encode_path(path, child_key, is_sequence), child_key, child_value, depth + 1))
    return rows


def row_index_for_path(rows: list[TreeRow], path: str) -> int | None:
    for idx, row in enumerate(rows):
        if row.path == path:
            return idx
    return None


def container_paths(document: object) -> set[str]:
    """Return every container path, used for expand-all."""
    out: set[str] = set()
    stack: list[tuple[str, object]] = [(ROOT, document)]
    while stack:
        path, value = stack.pop()
        if not is_container(value):
            continue
        out.add(path)
        is_sequence = isinstance(value, list)
        for child_key, child_value in child_items(value):
            stack.append((encode_path(path, child_key, is_sequence), child_value))
    return out
