"""Type-specific preview composition for the current selection.

Exactly one composer handles a value: url, color, date, file, markdown, or
the default scalar/container composer. Each returns a property table in a
fixed order (``path``, ``type``, then type-specific rows) followed by body
lines. File previews depend on collaborator answers found in the session
query cache; missing answers are returned as pending requests.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from urllib.parse import urlsplit

from ..document import ROOT_MARKER, ValueType, child_items, display_value, parse_color, parse_date
from ..document.flat_index import key_label
from ..render.syntax import highlight_markdown, sanitize_terminal_text
from .collaborators import FilePreview, PathCheck
from .scheduler import CHECK, READ, QueryRequest, cache_key

logger = logging.getLogger(__name__)

CONTAINER_PREVIEW_CHILDREN = 20
PENDING_TEXT = "…"


@dataclass
class Preview:
    """Composed preview: property table, body lines and outstanding queries."""

    composer: str
    properties: list[tuple[str, str]] = field(default_factory=list)
    body: list[str] = field(default_factory=list)
    pending: list[QueryRequest] = field(default_factory=list)
    media_path: str | None = None
    open_target: str | None = None


def format_size(size: int | None) -> str:
    if size is None:
        return "-"
    value = float(size)
    for unit in ("B", "KB", "MB", "GB"):
        if value < 1024 or unit == "GB":
            if unit == "B":
                return f"{int(value)} B"
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{size} B"


def describe_relative(moment: datetime, now: datetime) -> str:
    """Return a coarse human description such as ``3 days ago``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=now.tzinfo)
    delta = (moment - now).total_seconds()
    future = delta > 0
    seconds = abs(delta)
    for unit, size in (("year", 31_536_000), ("month", 2_592_000), ("day", 86_400), ("hour", 3_600), ("minute", 60)):
        if seconds >= size:
            count = int(seconds // size)
            label = f"{count} {unit}" + ("" if count == 1 else "s")
            return f"in {label}" if future else f"{label} ago"
    return "just now"


class PreviewDispatcher:
    """Choose and run the composer for a selected value."""

    def __init__(
        self,
        style: str = "monokai",
        no_color: bool = False,
        now: Callable[[], float] = time.time,
    ) -> None:
        self.style = style
        self.no_color = no_color
        self._now = now
        self._composers: dict[str, Callable[[str, object, ValueType, dict[str, object]], Preview]] = {
            "url": self._compose_url,
            "color": self._compose_color,
            "date": self._compose_date,
            "file": self._compose_file,
            "markdown": self._compose_markdown,
        }

    def composer_name(self, value_type: ValueType) -> str:
        return value_type.head if value_type.head in self._composers else "default"

    def compose(
        self,
        path: str,
        value: object,
        value_type: ValueType,
        query_cache: dict[str, object],
    ) -> Preview:
        composer = self._composers.get(value_type.head, self._compose_default)
        return composer(path, value, value_type, query_cache)

    def _base(self, composer: str, path: str, value_type: ValueType) -> Preview:
        return Preview(
            composer=composer,
            properties=[("path", path or ROOT_MARKER), ("type", value_type.label)],
        )

    # default
    def _compose_default(self, path: str, value: object, value_type: ValueType, query_cache: dict[str, object]) -> Preview:
        preview = self._base("default", path, value_type)
        if isinstance(value, dict):
            preview.properties.append(("keys", str(len(value))))
            preview.body = self._children_body(value)
        elif isinstance(value, list):
            preview.properties.append(("items", str(len(value))))
            preview.body = self._children_body(value)
        elif isinstance(value, str):
            preview.properties.append(("length", str(len(value))))
            preview.properties.append(("lines", str(value.count("\n") + 1)))
            preview.body = sanitize_terminal_text(value).splitlines() or [""]
        else:
            preview.body = [display_value(value)]
        return preview

    def _children_body(self, value: object) -> list[str]:
        children = child_items(value)
        lines = [
            f"{key_label(key)}: {display_value(child, 60)}"
            for key, child in children[:CONTAINER_PREVIEW_CHILDREN]
        ]
        remaining = len(children) - CONTAINER_PREVIEW_CHILDREN
        if remaining > 0:
            lines.append(f"… {remaining} more")
        if not lines:
            lines.append("(empty)")
        return [sanitize_terminal_text(line) for line in lines]

    # url
    def _compose_url(self, path: str, value: object, value_type: ValueType, query_cache: dict[str, object]) -> Preview:
        preview = self._base("url", path, value_type)
        href = str(value)
        parts = urlsplit(href)
        preview.properties.extend(
            [
                ("href", href),
                ("origin", f"{parts.scheme}://{parts.netloc}"),
                ("protocol", f"{parts.scheme}:"),
                ("host", parts.netloc),
                ("pathname", parts.path or "/"),
                ("query", parts.query or "-"),
                ("extension", value_type.extension or "-"),
            ]
        )
        category = value_type.category
        if category in {"image", "audio", "video", "document"}:
            preview.body = [f"{category} link", href, "", "press o to open in browser"]
        else:
            preview.body = [href, "", "press o to open in browser"]
        preview.open_target = href
        return preview

    # color
    def _compose_color(self, path: str, value: object, value_type: ValueType, query_cache: dict[str, object]) -> Preview:
        preview = self._base("color", path, value_type)
        color = parse_color(str(value))
        if color is None:
            return self._compose_default(path, value, value_type, query_cache)
        hue, saturation, lightness = color.hsl()
        preview.properties.extend(
            [
                ("hex", color.hex),
                ("rgb", f"rgb({color.red}, {color.green}, {color.blue})"),
                ("hsl", f"hsl({hue}, {saturation}%, {lightness}%)"),
                ("alpha", f"{color.alpha:g}"),
            ]
        )
        if self.no_color:
            preview.body = [f"swatch {color.hex}"]
        else:
            swatch = f"\033[48;2;{color.red};{color.green};{color.blue}m{' ' * 16}\033[0m"
            preview.body = [swatch, swatch, swatch]
        return preview

    # date
    def _compose_date(self, path: str, value: object, value_type: ValueType, query_cache: dict[str, object]) -> Preview:
        preview = self._base("date", path, value_type)
        moment = parse_date(str(value))
        if moment is None:
            return self._compose_default(path, value, value_type, query_cache)
        aware = moment if moment.tzinfo is not None else moment.replace(tzinfo=timezone.utc)
        preview.properties.extend(
            [
                ("iso", moment.isoformat()),
                ("unix", str(int(aware.timestamp()))),
                ("weekday", moment.strftime("%A")),
            ]
        )
        now = datetime.fromtimestamp(self._now(), tz=timezone.utc)
        preview.body = [describe_relative(aware, now)]
        return preview

    # markdown
    def _compose_markdown(self, path: str, value: object, value_type: ValueType, query_cache: dict[str, object]) -> Preview:
        preview = self._base("markdown", path, value_type)
        text = str(value)
        preview.properties.append(("length", str(len(text))))
        preview.properties.append(("lines", str(text.count("\n") + 1)))
        if self.no_color:
            preview.body = sanitize_terminal_text(text).splitlines()
            return preview
        try:
            rendered = highlight_markdown(text, self.style)
        except Exception as exc:
            logger.debug("markdown render failed, showing raw text: %s", exc)
            rendered = sanitize_terminal_text(text)
        preview.body = rendered.splitlines()
        return preview

    # file path
    def _compose_file(self, path: str, value: object, value_type: ValueType, query_cache: dict[str, object]) -> Preview:
        preview = self._base("file", path, value_type)
        target = str(value)
        preview.open_target = target
        preview.properties.append(("extension", value_type.extension or "-"))
        preview.properties.append(("category", value_type.category or "-"))

        check = query_cache.get(cache_key(CHECK, target))
        if not isinstance(check, PathCheck):
            preview.pending.append(QueryRequest(CHECK, target))
            preview.properties.extend([("exists", PENDING_TEXT), ("directory", PENDING_TEXT)])
            preview.body = ["checking path…"]
            return preview

        preview.properties.append(("exists", "yes" if check.exists else "no"))
        preview.properties.append(("directory", "yes" if check.is_directory else "no"))
        if not check.exists:
            preview.body = ["<path does not exist>"]
            return preview
        preview.properties.append(("size", format_size(check.size)))
        if check.modified_time is not None:
            modified = datetime.fromtimestamp(check.modified_time, tz=timezone.utc)
            preview.properties.append(("modified", modified.isoformat(timespec="seconds")))
        if check.is_directory:
            preview.body = ["<directory>", "", "press o to open"]
            return preview

        content = query_cache.get(cache_key(READ, target))
        if not isinstance(content, FilePreview):
            preview.pending.append(QueryRequest(READ, target))
            preview.body = ["loading preview…"]
            return preview
        preview.body = self._file_body(content)
        if content.kind == "audio":
            preview.media_path = target
        return preview

    def _file_body(self, content: FilePreview) -> list[str]:
        if content.kind == "text":
            return sanitize_terminal_text(content.text).splitlines() or [""]
        if content.kind == "image":
            dims = f"{content.width}x{content.height}" if content.width and content.height else None
            label = " ".join(part for part in ("image", content.image_format, dims) if part)
            return [f"<{label}, {format_size(content.size)}>"]
        if content.kind == "audio":
            return [f"<audio file, {format_size(content.size)}>", "", "press p to play / stop"]
        if content.kind == "unknown":
            return [f"<binary file: {format_size(content.size)}>"]
        return [f"<error: {content.error or 'unknown error'}>"]
