"""Tree view: indented rows for every node under expanded ancestors."""

from __future__ import annotations

from ..document import ROOT_MARKER, build_tree_rows
from ..runtime.state import SessionState
from .rows import RenderRow, finish_row, make_row, styled_label
from .theme import DEFAULT_THEME, UITheme


def tree_rows(document: object, state: SessionState) -> list[RenderRow]:
    """Return visible tree rows with the current selection flagged."""
    selected_path = state.effective_path
    out: list[RenderRow] = []
    for row in build_tree_rows(document, state.expanded):
        out.append(
            make_row(
                row.path,
                row.key or ROOT_MARKER,
                row.value,
                depth=row.depth,
                expanded=row.expanded,
                selected=row.path == selected_path,
            )
        )
    return out


def selected_row_index(rows: list[RenderRow]) -> int:
    for idx, row in enumerate(rows):
        if row.selected:
            return idx
    return 0


def format_tree_row(row: RenderRow, theme: UITheme | None = None, query: str = "") -> str:
    """Paint one tree row; the depth color cycles and carries no meaning."""
    active_theme = theme or DEFAULT_THEME
    reset = active_theme.reset
    guides = "".join(f"{active_theme.depth_color(level)}│{reset} " for level in range(row.depth))
    if row.is_container:
        marker = "▾ " if row.expanded else "▸ "
    else:
        marker = "  "
    marker_text = f"{active_theme.depth_color(row.depth)}{marker}{reset}"
    return finish_row(f"{guides}{marker_text}{styled_label(row, active_theme, query)}", row, active_theme)
