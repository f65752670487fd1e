"""Key-binding help panel."""

from __future__ import annotations

from .theme import DEFAULT_THEME, UITheme

HELP_SECTIONS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    (
        "Navigate",
        (
            ("↑/↓ k/j", "move selection"),
            ("←/→ h/l", "collapse / expand, parent / drill in"),
            ("space", "toggle expansion (tree)"),
            ("e / E", "expand all / collapse all"),
            ("[ / ]", "back / forward in history"),
            (": or g", "jump to a typed path"),
        ),
    ),
    (
        "Views",
        (
            ("1 2 3", "tree, column, raw"),
            ("t c r", "tree, column, raw"),
            ("tab", "next view"),
        ),
    ),
    (
        "Search",
        (
            ("/", "fuzzy search keys, values and paths"),
            ("↑/↓", "move among results"),
            ("enter", "go to result"),
            ("esc", "close search"),
        ),
    ),
    (
        "Actions",
        (
            ("y / Y", "copy path / copy value"),
            ("o", "open URL or file"),
            ("p", "play / stop audio preview"),
            ("s", "save selected value to a file"),
            ("enter", "return selection (with --select)"),
            ("?", "toggle this help"),
            ("q", "quit"),
        ),
    ),
)


def help_lines(theme: UITheme | None = None) -> list[str]:
    active_theme = theme or DEFAULT_THEME
    reset = active_theme.reset
    lines: list[str] = []
    for heading, bindings in HELP_SECTIONS:
        if lines:
            lines.append("")
        lines.append(f"{active_theme.help_heading}{heading}{reset}")
        for keys, description in bindings:
            lines.append(f"  {active_theme.help_key}{keys:<10}{reset} {active_theme.help_dim}{description}{reset}")
    return lines
