"""Full-frame composition for the terminal UI.

``RenderContext`` is a snapshot of everything a frame needs; ``compose_frame``
turns it into screen lines without mutating session state.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..document import ROOT_MARKER
from ..runtime.state import COLUMN, RAW, VIEW_MODES, SessionState
from ..search import SearchHit, apply_highlight, highlight_ranges
from .ansi import clip_ansi_line, fit_ansi_line, selected_with_ansi
from .columns import column_panels, format_column_panels
from .help import help_lines
from .raw import raw_lines
from .theme import DEFAULT_THEME, UITheme
from .tree import format_tree_row, selected_row_index, tree_rows

MIN_LEFT_WIDTH = 24
SEARCH_SPINNER = "searching…"


@dataclass
class RenderContext:
    document: object
    state: SessionState
    width: int
    height: int
    source_name: str = ""
    node_count: int = 0
    preview_properties: list[tuple[str, str]] = field(default_factory=list)
    preview_body: list[str] = field(default_factory=list)
    theme: UITheme = DEFAULT_THEME
    style: str = "monokai"
    no_color: bool = False
    raw_indent: int = 2
    select_enabled: bool = False


def compute_left_width(total_width: int) -> int:
    """Return the navigation pane width; the preview gets the rest."""
    if total_width < MIN_LEFT_WIDTH * 2:
        return max(1, total_width // 2)
    return max(MIN_LEFT_WIDTH, (total_width * 55) // 100)


def clamp_scroll(selected: int, start: int, rows: int, total: int) -> int:
    """Return a scroll offset that keeps ``selected`` within ``rows`` visible rows."""
    if rows <= 0:
        return 0
    if selected < start:
        start = selected
    elif selected >= start + rows:
        start = selected - rows + 1
    return max(0, min(start, max(0, total - rows)))


def format_header(context: RenderContext) -> str:
    theme = context.theme
    tabs: list[str] = []
    for idx, mode in enumerate(VIEW_MODES, start=1):
        label = f" {idx}:{mode} "
        if mode == context.state.view_mode:
            tabs.append(f"{theme.header_active}{label}{theme.reset}")
        else:
            tabs.append(f"{theme.header_inactive}{label}{theme.reset}")
    name = f" {theme.hint}{context.source_name}{theme.reset}" if context.source_name else ""
    return "".join(tabs) + name


def format_status(context: RenderContext) -> str:
    """Return the status line; the selection path is reported in every view."""
    state = context.state
    theme = context.theme
    path = state.effective_path or ROOT_MARKER
    parts = [
        f"{theme.key}{path}{theme.reset}",
        f"{state.history_index + 1}/{len(state.history)}",
        f"{context.node_count} nodes",
    ]
    if context.select_enabled:
        parts.append("enter: select")
    if state.status_message:
        parts.append(f"{theme.prompt}{state.status_message}{theme.reset}")
    return f"{theme.status}" + " · ".join(parts) + f"{theme.reset}"


def format_search_hit(hit: SearchHit, query: str, theme: UITheme) -> str:
    descriptor = hit.descriptor
    path = descriptor.path or ROOT_MARKER
    summary = descriptor.display_value.replace("\n", "⏎")
    path_text = apply_highlight(path, highlight_ranges(query, path), theme.match_on, theme.match_off)
    summary_text = apply_highlight(summary, highlight_ranges(query, summary), theme.match_on, theme.match_off)
    return f"{theme.key}{path_text}{theme.reset} {theme.kind_color(descriptor.kind)}{summary_text}{theme.reset}"


def search_pane_lines(context: RenderContext, width: int, height: int) -> list[str]:
    state = context.state
    theme = context.theme
    prompt = f"{theme.prompt}/ {state.search_query}{theme.reset}"
    if state.search_loading:
        prompt += f"  {theme.hint}{SEARCH_SPINNER}{theme.reset}"
    elif state.search_query.strip():
        noun = "match" if len(state.search_hits) == 1 else "matches"
        prompt += f"  {theme.hint}{len(state.search_hits)} {noun}{theme.reset}"
    else:
        prompt += f"{theme.hint}type to search{theme.reset}"
    lines = [fit_ansi_line(prompt, width)]
    list_rows = max(0, height - 1)
    start = clamp_scroll(state.search_selected, 0, list_rows, len(state.search_hits))
    for idx in range(start, start + list_rows):
        if idx < len(state.search_hits):
            text = fit_ansi_line(" " + format_search_hit(state.search_hits[idx], state.search_query, theme), width)
            lines.append(selected_with_ansi(text) if idx == state.search_selected else text)
        else:
            lines.append(" " * width)
    return lines


def tree_pane_lines(context: RenderContext, width: int, height: int) -> list[str]:
    rows = tree_rows(context.document, context.state)
    start = clamp_scroll(selected_row_index(rows), context.state.tree_start, height, len(rows))
    lines: list[str] = []
    for idx in range(start, start + height):
        if idx < len(rows):
            lines.append(fit_ansi_line(format_tree_row(rows[idx], context.theme), width))
        else:
            lines.append(" " * width)
    return lines


def preview_pane_lines(context: RenderContext, width: int, height: int) -> list[str]:
    theme = context.theme
    if context.state.show_help:
        source = help_lines(theme)
    else:
        name_width = max((len(name) for name, _ in context.preview_properties), default=0)
        source = [
            f"{theme.help_dim}{name:<{name_width}}{theme.reset}  {value}"
            for name, value in context.preview_properties
        ]
        if context.preview_body:
            source.append(f"{theme.divider}{'─' * max(1, width)}{theme.reset}")
            start = max(0, context.state.preview_start)
            source.extend(context.preview_body[start:])
    lines = [fit_ansi_line(line, width) for line in source[:height]]
    lines.extend(" " * width for _ in range(height - len(lines)))
    return lines


def raw_pane_lines(context: RenderContext, width: int, height: int) -> list[str]:
    lines = raw_lines(context.document, context.raw_indent, context.style, context.no_color)
    start = max(0, min(context.state.raw_start, max(0, len(lines) - height)))
    out = [fit_ansi_line(line, width) for line in lines[start : start + height]]
    out.extend(" " * width for _ in range(height - len(out)))
    return out


def navigation_pane_lines(context: RenderContext, width: int, height: int) -> list[str]:
    state = context.state
    if state.search_active:
        return search_pane_lines(context, width, height)
    if state.view_mode == COLUMN:
        return format_column_panels(column_panels(context.document, state), width, height, context.theme)
    return tree_pane_lines(context, width, height)


def compose_frame(context: RenderContext) -> list[str]:
    """Return exactly ``height`` screen lines for the current state."""
    width = max(1, context.width)
    height = max(3, context.height)
    state = context.state
    theme = context.theme
    body_rows = height - 2

    lines = [fit_ansi_line(format_header(context), width)]
    if state.view_mode == RAW and not state.search_active:
        if state.show_help:
            body = preview_pane_lines(context, width, body_rows)
        else:
            body = raw_pane_lines(context, width, body_rows)
    else:
        left_width = compute_left_width(width)
        right_width = max(1, width - left_width - 1)
        left = navigation_pane_lines(context, left_width, body_rows)
        right = preview_pane_lines(context, right_width, body_rows)
        divider = f"{theme.divider}│{theme.reset}"
        body = [f"{left[row]}{divider}{right[row]}" for row in range(body_rows)]
    lines.extend(body)

    if state.path_prompt_active:
        bottom = f"{theme.prompt}: {state.path_prompt_text}{theme.reset}"
    else:
        bottom = format_status(context)
    lines.append(fit_ansi_line(bottom, width))
    return lines


def render_frame(context: RenderContext) -> str:
    """Return a full-screen ANSI frame ready to write to the terminal."""
    out = ["\033[H\033[J"]
    out.append("\r\n".join(clip_ansi_line(line, context.width) + "\033[0m" for line in compose_frame(context)))
    return "".join(out)


__all__ = [
    "RenderContext",
    "clamp_scroll",
    "compose_frame",
    "compute_left_width",
    "render_frame",
]
