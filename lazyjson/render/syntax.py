"""Pygments highlighting for raw JSON and markdown previews.

Also neutralizes terminal control bytes so document strings cannot move the
cursor or ring the bell when painted.
"""

from __future__ import annotations

import re

from pygments import highlight
from pygments.formatters import TerminalFormatter, TerminalTrueColorFormatter
from pygments.lexers import JsonLexer, MarkdownLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

DEFAULT_STYLE = "monokai"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_FORMATTERS: dict[str, object] = {}
_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def normalize_style(style: str) -> str:
    """Validate/canonicalize requested style name with cache-backed checks."""
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return DEFAULT_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        _INVALID_STYLES.add(style)
        return DEFAULT_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str):
    """Return cached Pygments terminal formatter for style name."""
    formatter = _FORMATTERS.get(style)
    if formatter is not None:
        return formatter
    if style == DEFAULT_STYLE:
        formatter = TerminalFormatter()
    else:
        formatter = TerminalTrueColorFormatter(style=style)
    _FORMATTERS[style] = formatter
    return formatter


def highlight_json(source: str, style: str = DEFAULT_STYLE) -> str:
    """Colorize serialized JSON, returning plain text when Pygments fails."""
    formatter = _formatter_for_style(normalize_style(style))
    try:
        return highlight(source, JsonLexer(), formatter)
    except Exception:
        return source


def highlight_markdown(source: str, style: str = DEFAULT_STYLE) -> str:
    """Colorize markdown text. Errors propagate so callers can fall back."""
    formatter = _formatter_for_style(normalize_style(style))
    return highlight(sanitize_terminal_text(source), MarkdownLexer(), formatter)
