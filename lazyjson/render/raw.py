"""Raw view: one formatted serialization of the whole document.

Serialized once per document/indent/style and cached for the session.
"""

from __future__ import annotations

import json

from .syntax import highlight_json, sanitize_terminal_text

_RAW_CACHE: dict[tuple[int, int, str, bool], tuple[object, list[str]]] = {}


def clear_raw_cache() -> None:
    _RAW_CACHE.clear()


def serialize_document(document: object, indent: int = 2) -> str:
    return json.dumps(document, indent=indent if indent > 0 else None, ensure_ascii=False)


def raw_lines(document: object, indent: int = 2, style: str = "monokai", no_color: bool = False) -> list[str]:
    """Return the serialized document as display lines, cached per document."""
    key = (id(document), indent, style, no_color)
    cached = _RAW_CACHE.get(key)
    if cached is not None and cached[0] is document:
        return cached[1]
    text = sanitize_terminal_text(serialize_document(document, indent))
    if not no_color:
        text = highlight_json(text, style)
    lines = text.splitlines() or [""]
    _RAW_CACHE[key] = (document, lines)
    return lines
