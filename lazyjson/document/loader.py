"""Document loading from files or standard input."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

STDIN_NAME = "-"


class DocumentLoadError(ValueError):
    """Raised when the initial document cannot be read or parsed."""


def parse_document(text: str, source_name: str = "<input>") -> object:
    """Parse JSON text, keeping mapping keys in insertion order."""
    if text.startswith("\ufeff"):
        text = text[1:]
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DocumentLoadError(f"{source_name}: invalid JSON at line {exc.lineno} column {exc.colno}: {exc.msg}") from exc


def load_document(source: str | Path) -> object:
    """Load and parse the document at ``source`` (``"-"`` reads stdin)."""
    if str(source) == STDIN_NAME:
        logger.debug("reading document from stdin")
        return parse_document(sys.stdin.read(), "<stdin>")

    path = Path(source)
    if not path.exists():
        raise DocumentLoadError(f"Path not found: {path}")
    if path.is_dir():
        raise DocumentLoadError(f"Not a file: {path}")
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise DocumentLoadError(f"{path}: {exc.strerror or exc}") from exc

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        text = raw.decode("latin-1")
    logger.debug("loaded %d bytes from %s", len(raw), path)
    return parse_document(text, str(path))
