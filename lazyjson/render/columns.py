"""Column (Miller) view: one panel per level from the root to the selection."""

from __future__ import annotations

from dataclasses import dataclass

from ..document import ROOT, child_items, encode_path, is_container, resolve_path
from ..document.flat_index import key_label
from ..runtime.state import SessionState
from .ansi import fit_ansi_line
from .rows import RenderRow, finish_row, make_row, styled_label
from .theme import DEFAULT_THEME, UITheme

MIN_COLUMN_WIDTH = 18
COLUMN_SEPARATOR = "│"


@dataclass(frozen=True)
class ColumnPanel:
    """Children of ``parent_path`` as rows, with the selected/trail child flagged."""

    parent_path: str
    rows: tuple[RenderRow, ...]

    @property
    def highlighted_index(self) -> int | None:
        for idx, row in enumerate(self.rows):
            if row.selected or row.on_trail:
                return idx
        return None


def column_parents(document: object, state: SessionState) -> list[str]:
    """Return the parent path for each panel, root first.

    Panels follow ``state.column_chain``; a selected container adds one more
    panel showing its children.
    """
    selection = state.effective_path
    parents = list(state.column_chain) or [ROOT]
    if is_container(resolve_path(document, selection)) and selection not in parents:
        parents.append(selection)
    return parents


def column_panels(document: object, state: SessionState) -> list[ColumnPanel]:
    """Return one panel per visible column level."""
    selection = state.effective_path
    parents = column_parents(document, state)
    panels: list[ColumnPanel] = []
    for parent in parents:
        value = resolve_path(document, parent)
        is_sequence = isinstance(value, list)
        rows: list[RenderRow] = []
        for key, child in child_items(value):
            path = encode_path(parent, key, is_sequence)
            on_trail = path != selection and (path in parents)
            rows.append(make_row(path, key_label(key), child, selected=path == selection, on_trail=on_trail))
        panels.append(ColumnPanel(parent_path=parent, rows=tuple(rows)))
    return panels


def format_column_panels(
    panels: list[ColumnPanel],
    width: int,
    height: int,
    theme: UITheme | None = None,
) -> list[str]:
    """Lay out panels side by side, keeping the deepest ones when space runs out."""
    active_theme = theme or DEFAULT_THEME
    if width <= 0 or height <= 0:
        return []
    if not panels:
        return [" " * width for _ in range(height)]
    max_visible = max(1, (width + 1) // (MIN_COLUMN_WIDTH + 1))
    visible = panels[-max_visible:]
    count = len(visible)
    column_width = max(1, (width - (count - 1)) // count)
    last_width = width - (count - 1) - column_width * (count - 1)

    rendered: list[list[str]] = []
    for panel_idx, panel in enumerate(visible):
        col_width = last_width if panel_idx == count - 1 else column_width
        highlighted = panel.highlighted_index or 0
        start = 0
        if highlighted >= height:
            start = highlighted - height + 1
        lines: list[str] = []
        for row_idx in range(start, start + height):
            if row_idx < len(panel.rows):
                row = panel.rows[row_idx]
                marker = " ▸" if row.is_container else ""
                text = finish_row(f"{styled_label(row, active_theme)}{marker}", row, active_theme)
                lines.append(fit_ansi_line(text, col_width))
            elif row_idx == 0:
                lines.append(fit_ansi_line(f"{active_theme.hint}(empty){active_theme.reset}", col_width))
            else:
                lines.append(" " * col_width)
        rendered.append(lines)

    divider = f"{active_theme.divider}{COLUMN_SEPARATOR}{active_theme.reset}"
    return [divider.join(column[row] for column in rendered) for row in range(height)]
