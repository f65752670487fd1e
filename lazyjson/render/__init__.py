"""Rendering: view renderers, themes and frame composition.

Renderers are pure functions of ``(document, session state)``; painting to
the terminal happens only in the runtime loop.
"""

from __future__ import annotations

from .columns import ColumnPanel, column_panels, format_column_panels
from .raw import clear_raw_cache, raw_lines, serialize_document
from .rows import RenderRow
from .screen import RenderContext, clamp_scroll, compose_frame, compute_left_width, render_frame
from .theme import DEFAULT_THEME, PLAIN_THEME, UITheme, available_theme_names, resolve_theme
from .tree import format_tree_row, selected_row_index, tree_rows

__all__ = [
    "ColumnPanel",
    "DEFAULT_THEME",
    "PLAIN_THEME",
    "RenderContext",
    "RenderRow",
    "UITheme",
    "available_theme_names",
    "clamp_scroll",
    "clear_raw_cache",
    "column_panels",
    "compose_frame",
    "compute_left_width",
    "format_column_panels",
    "format_tree_row",
    "raw_lines",
    "render_frame",
    "resolve_theme",
    "selected_row_index",
    "serialize_document",
    "tree_rows",
]
