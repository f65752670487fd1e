"""Value-type classification for document nodes.

``basic_kind`` is structural. ``classify_value`` refines strings by trying, in
order: URL, file path, color, date, markdown. The order is fixed; the rules
overlap and the first one that matches wins.
"""

from __future__ import annotations

import colorsys
import math
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

OBJECT = "object"
ARRAY = "array"
STRING = "string"
NUMBER = "number"
BOOLEAN = "boolean"
NULL = "null"

IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "bmp", "webp", "svg", "ico", "tiff", "avif"})
AUDIO_EXTENSIONS = frozenset({"mp3", "wav", "ogg", "flac", "aac", "m4a", "opus"})
VIDEO_EXTENSIONS = frozenset({"mp4", "webm", "mkv", "mov", "avi", "m4v"})
DOCUMENT_EXTENSIONS = frozenset(
    {
        "pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx", "odt", "rtf", "txt", "md",
        "csv", "json", "xml", "yaml", "yml", "toml", "html", "htm",
    }
)
EXTENSION_CATEGORIES: tuple[tuple[str, frozenset[str]], ...] = (
    ("image", IMAGE_EXTENSIONS),
    ("audio", AUDIO_EXTENSIONS),
    ("video", VIDEO_EXTENSIONS),
    ("document", DOCUMENT_EXTENSIONS),
)

NAMED_COLORS: dict[str, tuple[int, int, int, float]] = {
    "black": (0, 0, 0, 1.0),
    "silver": (192, 192, 192, 1.0),
    "gray": (128, 128, 128, 1.0),
    "grey": (128, 128, 128, 1.0),
    "white": (255, 255, 255, 1.0),
    "maroon": (128, 0, 0, 1.0),
    "red": (255, 0, 0, 1.0),
    "purple": (128, 0, 128, 1.0),
    "fuchsia": (255, 0, 255, 1.0),
    "green": (0, 128, 0, 1.0),
    "lime": (0, 255, 0, 1.0),
    "olive": (128, 128, 0, 1.0),
    "yellow": (255, 255, 0, 1.0),
    "navy": (0, 0, 128, 1.0),
    "blue": (0, 0, 255, 1.0),
    "teal": (0, 128, 128, 1.0),
    "aqua": (0, 255, 255, 1.0),
    "orange": (255, 165, 0, 1.0),
    "pink": (255, 192, 203, 1.0),
    "rebeccapurple": (102, 51, 153, 1.0),
    "darkgray": (169, 169, 169, 1.0),
    "darkgrey": (169, 169, 169, 1.0),
    "lightgray": (211, 211, 211, 1.0),
    "lightgrey": (211, 211, 211, 1.0),
    "transparent": (0, 0, 0, 0.0),
}

_URL_RE = re.compile(r"^(https?)://\S+$", re.IGNORECASE)
_WINDOWS_DRIVE_RE = re.compile(r"^[A-Za-z]:[\\/]")
_UNC_RE = re.compile(r"^\\\\[^\\/\s]+[\\/]")
_POSIX_ABSOLUTE_RE = re.compile(r"^/[^\s/][^\n]*$")
_RELATIVE_WITH_EXTENSION_RE = re.compile(r"^[^\n]*[\\/][^\n\\/]*\.[A-Za-z0-9]{1,6}$")
_EXTENSION_RE = re.compile(r"\.([A-Za-z0-9]{1,6})$")

_HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_NUM = r"\s*(-?\d+(?:\.\d+)?%?)\s*"
_RGB_RE = re.compile(rf"^rgba?\({_NUM},{_NUM},{_NUM}(?:,{_NUM})?\)$", re.IGNORECASE)
_HSL_RE = re.compile(rf"^hsla?\({_NUM},{_NUM},{_NUM}(?:,{_NUM})?\)$", re.IGNORECASE)

_ISO_DATE_RE = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})"
    r"(?:[T ](\d{2}):(\d{2})(?::(\d{2})(?:\.(\d{1,9}))?)?)?"
    r"\s*(Z|[+-]\d{2}:?\d{2})?"
)
_US_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")

MARKDOWN_MIN_LENGTH = 20
MARKDOWN_SCAN_LINES = 30
MARKDOWN_THRESHOLD = 3
_MD_HEADER_RE = re.compile(r"^#{1,6}\s+\S")
_MD_FENCE_RE = re.compile(r"^(```|~~~)")
_MD_LIST_RE = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+\S")
_MD_QUOTE_RE = re.compile(r"^\s*>\s?")
_MD_RULE_RE = re.compile(r"^\s*(?:(?:-\s*){3,}|(?:\*\s*){3,}|(?:_\s*){3,})$")
_MD_TABLE_SEPARATOR_RE = re.compile(r"^\s*\|?\s*:?-{3,}:?\s*(?:\|\s*:?-{3,}:?\s*)+\|?\s*$")
_MD_TABLE_ROW_RE = re.compile(r"^\s*\|.*\|\s*$")
_MD_LINK_RE = re.compile(r"\[[^\]\n]+\]\([^)\n]+\)")
_MD_BOLD_RE = re.compile(r"\*\*[^*\n]+\*\*|__[^_\n]+__")
_MD_INLINE_CODE_RE = re.compile(r"`[^`\n]+`")


@dataclass(frozen=True)
class ValueType:
    """Basic kind plus refined subtype chain, e.g. ``("url", "image", "png")``."""

    kind: str
    subtype: tuple[str, ...] = ()

    @property
    def head(self) -> str:
        """Return the most general refinement, or the basic kind."""
        return self.subtype[0] if self.subtype else self.kind

    @property
    def category(self) -> str | None:
        """Return the extension category for url/file subtypes."""
        if self.head in {"url", "file"} and len(self.subtype) >= 2:
            return self.subtype[1]
        return None

    @property
    def extension(self) -> str | None:
        if self.head in {"url", "file"} and len(self.subtype) >= 3:
            return self.subtype[2]
        return None

    @property
    def label(self) -> str:
        if not self.subtype:
            return self.kind
        return "→".join(self.subtype)


@dataclass(frozen=True)
class RGBA:
    red: int
    green: int
    blue: int
    alpha: float = 1.0

    @property
    def hex(self) -> str:
        base = f"#{self.red:02x}{self.green:02x}{self.blue:02x}"
        if self.alpha < 1.0:
            return base + f"{round(self.alpha * 255):02x}"
        return base

    def hsl(self) -> tuple[int, int, int]:
        """Return ``(hue°, saturation%, lightness%)`` rounded to integers."""
        hue, lightness, saturation = colorsys.rgb_to_hls(self.red / 255, self.green / 255, self.blue / 255)
        return round(hue * 360) % 360, round(saturation * 100), round(lightness * 100)


def basic_kind(value: object) -> str:
    """Return the structural kind of ``value``."""
    if value is None:
        return NULL
    if isinstance(value, bool):
        return BOOLEAN
    if isinstance(value, (int, float)):
        return NUMBER
    if isinstance(value, str):
        return STRING
    if isinstance(value, dict):
        return OBJECT
    if isinstance(value, (list, tuple)):
        return ARRAY
    return STRING


def extension_of(text: str) -> str | None:
    """Return the lower-cased trailing extension of a path or URL path."""
    match = _EXTENSION_RE.search(text)
    if match is None:
        return None
    return match.group(1).lower()


def extension_subtype(head: str, extension: str | None) -> tuple[str, ...]:
    """Return the compound subtype for a url/file head and its extension."""
    if extension is None:
        return (head,)
    for category, extensions in EXTENSION_CATEGORIES:
        if extension in extensions:
            return (head, category, extension)
    return (head, "generic", extension)


def _url_path_part(url: str) -> str:
    """Strip scheme/host, query and fragment, leaving the URL path."""
    rest = url.split("://", 1)[1] if "://" in url else url
    rest = rest.split("#", 1)[0].split("?", 1)[0]
    slash = rest.find("/")
    return rest[slash:] if slash >= 0 else ""


def is_url(text: str) -> bool:
    return _URL_RE.match(text) is not None


def is_file_path(text: str) -> bool:
    if "\n" in text:
        return False
    if _WINDOWS_DRIVE_RE.match(text) or _UNC_RE.match(text):
        return True
    if _POSIX_ABSOLUTE_RE.match(text):
        return True
    return _RELATIVE_WITH_EXTENSION_RE.match(text) is not None


def _channel(raw: str, scale: int) -> float:
    if raw.endswith("%"):
        return float(raw[:-1]) / 100 * scale
    return float(raw)


def _alpha(raw: str | None) -> float:
    if raw is None:
        return 1.0
    if raw.endswith("%"):
        return max(0.0, min(1.0, float(raw[:-1]) / 100))
    return max(0.0, min(1.0, float(raw)))


def parse_color(text: str) -> RGBA | None:
    """Parse hex, ``rgb()``/``rgba()``, ``hsl()``/``hsla()`` or a named color."""
    candidate = text.strip()
    if _HEX_COLOR_RE.match(candidate):
        digits = candidate[1:]
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        alpha = 1.0
        if len(digits) == 8:
            alpha = round(int(digits[6:8], 16) / 255, 3)
        return RGBA(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16), alpha)

    match = _RGB_RE.match(candidate)
    if match is not None:
        red, green, blue = (_channel(part, 255) for part in match.groups()[:3])
        if not all(0 <= channel <= 255 for channel in (red, green, blue)):
            return None
        return RGBA(round(red), round(green), round(blue), _alpha(match.group(4)))

    match = _HSL_RE.match(candidate)
    if match is not None:
        hue = float(match.group(1).rstrip("%")) % 360
        saturation = float(match.group(2).rstrip("%")) / 100
        lightness = float(match.group(3).rstrip("%")) / 100
        if not (0 <= saturation <= 1 and 0 <= lightness <= 1):
            return None
        red, green, blue = colorsys.hls_to_rgb(hue / 360, lightness, saturation)
        return RGBA(round(red * 255), round(green * 255), round(blue * 255), _alpha(match.group(4)))

    named = NAMED_COLORS.get(candidate.lower())
    if named is not None:
        return RGBA(*named)
    return None


def parse_date(text: str) -> datetime | None:
    """Parse an ISO-like or ``M/D/YYYY`` date, rejecting impossible dates."""
    candidate = text.strip()
    match = _ISO_DATE_RE.match(candidate)
    if match is not None:
        year, month, day, hour, minute, second, fraction, zone = match.groups()
        try:
            micro = int((fraction or "0")[:6].ljust(6, "0"))
            parsed = datetime(
                int(year),
                int(month),
                int(day),
                int(hour or 0),
                int(minute or 0),
                int(second or 0),
                micro,
            )
        except ValueError:
            return None
        if zone:
            if zone == "Z":
                return parsed.replace(tzinfo=timezone.utc)
            sign = 1 if zone[0] == "+" else -1
            digits = zone[1:].replace(":", "")
            hours, minutes = int(digits[:2]), int(digits[2:4])
            if hours > 23 or minutes > 59:
                return None
            offset = timedelta(hours=hours, minutes=minutes)
            return parsed.replace(tzinfo=timezone(sign * offset))
        return parsed

    match = _US_DATE_RE.match(candidate)
    if match is not None:
        month, day, year = (int(part) for part in match.groups())
        try:
            return datetime(year, month, day)
        except ValueError:
            return None
    return None


def markdown_score(text: str) -> int:
    """Return the weighted markdown indicator score used by the classifier."""
    score = 0.0
    for line in text.splitlines()[:MARKDOWN_SCAN_LINES]:
        if _MD_HEADER_RE.match(line):
            score += 2
        elif _MD_FENCE_RE.match(line):
            score += 3
        elif _MD_RULE_RE.match(line):
            score += 1
        elif _MD_LIST_RE.match(line):
            score += 1
        elif _MD_QUOTE_RE.match(line):
            score += 1
        elif _MD_TABLE_SEPARATOR_RE.match(line):
            score += 2
        elif _MD_TABLE_ROW_RE.match(line):
            score += 2

    score += len(_MD_LINK_RE.findall(text))
    score += len(_MD_BOLD_RE.findall(text))
    score += len(_MD_INLINE_CODE_RE.findall(text)) / 2
    return math.floor(score)


def looks_like_markdown(text: str) -> bool:
    if len(text) < MARKDOWN_MIN_LENGTH or "\n" not in text:
        return False
    return markdown_score(text) >= MARKDOWN_THRESHOLD


def classify_string(text: str) -> tuple[str, ...]:
    """Return the refined subtype chain for a string value."""
    if is_url(text):
        return extension_subtype("url", extension_of(_url_path_part(text)))
    if is_file_path(text):
        return extension_subtype("file", extension_of(text.rstrip("\\/")))
    if parse_color(text) is not None:
        return ("color",)
    if parse_date(text) is not None:
        return ("date",)
    if looks_like_markdown(text):
        return ("markdown",)
    return ()


def classify_number(value: int | float) -> tuple[str, ...]:
    if isinstance(value, int):
        return ("integer",)
    if math.isfinite(value) and value.is_integer():
        return ("integer",)
    return ("float",)


def classify_value(value: object) -> ValueType:
    """Return the deterministic :class:`ValueType` for any document value."""
    kind = basic_kind(value)
    if kind == STRING and isinstance(value, str):
        return ValueType(kind, classify_string(value))
    if kind == NUMBER and isinstance(value, (int, float)):
        return ValueType(kind, classify_number(value))
    return ValueType(kind)


__all__ = [
    "ARRAY",
    "BOOLEAN",
    "NULL",
    "NUMBER",
    "OBJECT",
    "RGBA",
    "STRING",
    "ValueType",
    "basic_kind",
    "classify_number",
    "classify_string",
    "classify_value",
    "extension_of",
    "extension_subtype",
    "is_file_path",
    "is_url",
    "looks_like_markdown",
    "markdown_score",
    "parse_color",
    "parse_date",
]
