"""Document model: path codec, value classification and the flat node index.

Everything here is pure and treats the loaded document as immutable.
"""

from __future__ import annotations

from .flat_index import NodeDescriptor, build_flat_index, describe, display_value
from .kinds import RGBA, ValueType, basic_kind, classify_value, parse_color, parse_date
from .loader import DocumentLoadError, load_document, parse_document
from .tree_rows import TreeRow, build_tree_rows, container_paths, row_index_for_path
from .paths import (
    NOT_FOUND,
    ROOT,
    ROOT_MARKER,
    ancestor_chain,
    child_items,
    child_paths,
    decode_path,
    encode_path,
    is_container,
    is_root,
    join_segments,
    last_segment_label,
    parent_path,
    path_depth,
    resolve_path,
)

__all__ = [
    "DocumentLoadError",
    "NOT_FOUND",
    "NodeDescriptor",
    "RGBA",
    "TreeRow",
    "ROOT",
    "ROOT_MARKER",
    "ValueType",
    "ancestor_chain",
    "basic_kind",
    "build_flat_index",
    "build_tree_rows",
    "child_items",
    "child_paths",
    "classify_value",
    "container_paths",
    "decode_path",
    "describe",
    "display_value",
    "encode_path",
    "is_container",
    "is_root",
    "join_segments",
    "last_segment_label",
    "load_document",
    "parent_path",
    "parse_color",
    "parse_date",
    "parse_document",
    "path_depth",
    "resolve_path",
    "row_index_for_path",
]
