"""Render instructions shared by the tree and column views."""

from __future__ import annotations

from dataclasses import dataclass

from ..document import basic_kind, display_value
from ..search import apply_highlight, highlight_ranges
from .ansi import selected_with_ansi
from .theme import DEFAULT_THEME, UITheme


@dataclass(frozen=True)
class RenderRow:
    """One row to paint: what it shows and how it relates to the selection."""

    path: str
    label: str
    summary: str
    kind: str
    depth: int = 0
    is_container: bool = False
    expanded: bool = False
    selected: bool = False
    on_trail: bool = False


def make_row(
    path: str,
    label: str,
    value: object,
    depth: int = 0,
    expanded: bool = False,
    selected: bool = False,
    on_trail: bool = False,
) -> RenderRow:
    kind = basic_kind(value)
    return RenderRow(
        path=path,
        label=label,
        summary=display_value(value, 80),
        kind=kind,
        depth=depth,
        is_container=kind in {"object", "array"},
        expanded=expanded,
        selected=selected,
        on_trail=on_trail,
    )


def styled_label(row: RenderRow, theme: UITheme, query: str = "") -> str:
    """Return ``label: summary`` with kind colors and optional search marks."""
    reset = theme.reset
    label = row.label
    summary = row.summary.replace("\n", "⏎")
    if query:
        label = apply_highlight(label, highlight_ranges(query, label), theme.match_on, theme.match_off)
        summary = apply_highlight(summary, highlight_ranges(query, summary), theme.match_on, theme.match_off)
    key_color = theme.index if row.label.startswith("[") else theme.key
    return f"{key_color}{label}{reset} {theme.kind_color(row.kind)}{summary}{reset}"


def finish_row(text: str, row: RenderRow, theme: UITheme | None = None) -> str:
    active_theme = theme or DEFAULT_THEME
    if row.selected:
        return selected_with_ansi(text)
    if row.on_trail and active_theme.column_trail:
        return f"{active_theme.column_trail}▌{active_theme.reset}{text}"
    return text
