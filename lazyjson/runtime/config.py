"""Persistent JSON config helpers.

Stores viewer preferences only: default view, UI theme, syntax style, raw
indent and preview size limits. Session state is never persisted. All access
is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .state import DEFAULT_VIEW_MODE, VIEW_MODES

logger = logging.getLogger(__name__)

APP_NAME = "lazyjson"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_STYLE = "monokai"
DEFAULT_RAW_INDENT = 2
MAX_RAW_INDENT = 8
DEFAULT_PREVIEW_MAX_TEXT_BYTES = 64 * 1024
DEFAULT_PREVIEW_MAX_MEDIA_BYTES = 8 * 1024 * 1024


@dataclass(frozen=True)
class PreviewLimits:
    """Byte limits applied when reading files for previews."""

    max_text_bytes: int = DEFAULT_PREVIEW_MAX_TEXT_BYTES
    max_media_bytes: int = DEFAULT_PREVIEW_MAX_MEDIA_BYTES


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except Exception as exc:
        logger.debug("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem/serialization errors are logged and otherwise ignored.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception as exc:
        logger.debug("could not write config %s: %s", CONFIG_PATH, exc)


def load_default_view() -> str:
    """Return persisted default view mode, falling back to tree."""
    value = load_config().get("default_view")
    if isinstance(value, str) and value.strip().lower() in VIEW_MODES:
        return value.strip().lower()
    return DEFAULT_VIEW_MODE


def save_default_view(view_mode: str) -> None:
    if view_mode not in VIEW_MODES:
        return
    config = load_config()
    config["default_view"] = view_mode
    save_config(config)


def load_theme_name() -> str | None:
    """Load persisted UI theme name, returning ``None`` when unset/invalid."""
    value = load_config().get("theme")
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def save_theme_name(theme_name: str) -> None:
    stripped = str(theme_name).strip()
    if not stripped:
        return
    config = load_config()
    config["theme"] = stripped
    save_config(config)


def load_style_name() -> str:
    value = load_config().get("style")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return DEFAULT_STYLE


def _coerce_int(value: object, default: int, low: int, high: int) -> int:
    """Normalize a JSON scalar into ``[low, high]``.

    Booleans and non-integers are treated as invalid and yield ``default``.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return max(low, min(high, value))


def load_raw_indent() -> int:
    return _coerce_int(load_config().get("raw_indent"), DEFAULT_RAW_INDENT, 0, MAX_RAW_INDENT)


def load_preview_limits() -> PreviewLimits:
    config = load_config()
    return PreviewLimits(
        max_text_bytes=_coerce_int(
            config.get("preview_max_text_bytes"),
            DEFAULT_PREVIEW_MAX_TEXT_BYTES,
            1,
            1 << 30,
        ),
        max_media_bytes=_coerce_int(
            config.get("preview_max_media_bytes"),
            DEFAULT_PREVIEW_MAX_MEDIA_BYTES,
            1,
            1 << 34,
        ),
    )
