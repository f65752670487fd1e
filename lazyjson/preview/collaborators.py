"""External operations the viewer delegates to the host system.

``Collaborators`` is the interface the runtime consumes. ``LocalCollaborators``
implements it with the local OS: clipboard helpers, ``open``/``xdg-open``,
``os.stat`` and bounded file reads.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
import webbrowser
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from ..document.kinds import AUDIO_EXTENSIONS, IMAGE_EXTENSIONS, extension_of

logger = logging.getLogger(__name__)

BINARY_SNIFF_BYTES = 4_096
TRUNCATION_MARKER = "… [truncated]"
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
GIF_SIGNATURES = (b"GIF87a", b"GIF89a")
JPEG_SIGNATURE = b"\xff\xd8"

_CLIPBOARD_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("pbcopy",),
    ("wl-copy",),
    ("xclip", "-selection", "clipboard"),
    ("xsel", "--clipboard", "--input"),
    ("clip.exe",),
)


@dataclass(frozen=True)
class PathCheck:
    """Existence/metadata answer for one filesystem path."""

    exists: bool
    is_directory: bool = False
    size: int | None = None
    modified_time: float | None = None

    @classmethod
    def missing(cls) -> PathCheck:
        return cls(exists=False)


@dataclass(frozen=True)
class FilePreview:
    """Bounded content read for a file preview."""

    kind: str
    text: str = ""
    truncated: bool = False
    size: int | None = None
    width: int | None = None
    height: int | None = None
    image_format: str | None = None
    error: str | None = None

    @classmethod
    def failure(cls, message: str, size: int | None = None) -> FilePreview:
        return cls(kind="error", error=message, size=size)


class Collaborators(Protocol):
    """Operations the host provides; none of them may raise into the UI."""

    def copy_to_clipboard(self, text: str) -> bool: ...

    def open_external_url(self, url: str) -> bool: ...

    def open_path_in_os_shell(self, path: str) -> bool: ...

    def check_path(self, path: str) -> PathCheck: ...

    def read_file_for_preview(self, path: str, max_text_bytes: int, max_media_bytes: int) -> FilePreview: ...

    def save_file(self, content: str, suggested_name: str) -> str | None: ...


def image_dimensions(header: bytes) -> tuple[str, int, int] | None:
    """Return ``(format, width, height)`` for PNG/GIF/JPEG headers."""
    if header.startswith(PNG_SIGNATURE) and len(header) >= 24:
        return "png", int.from_bytes(header[16:20], "big"), int.from_bytes(header[20:24], "big")
    if header[:6] in GIF_SIGNATURES and len(header) >= 10:
        return "gif", int.from_bytes(header[6:8], "little"), int.from_bytes(header[8:10], "little")
    if header.startswith(JPEG_SIGNATURE):
        idx = 2
        while idx + 9 < len(header):
            if header[idx] != 0xFF:
                idx += 1
                continue
            marker = header[idx + 1]
            if marker in {0xC0, 0xC1, 0xC2}:
                height = int.from_bytes(header[idx + 5 : idx + 7], "big")
                width = int.from_bytes(header[idx + 7 : idx + 9], "big")
                return "jpeg", width, height
            segment_length = int.from_bytes(header[idx + 2 : idx + 4], "big")
            idx += 2 + max(segment_length, 2)
        return "jpeg", 0, 0
    return None


def read_file_preview(path: Path, max_text_bytes: int, max_media_bytes: int) -> FilePreview:
    """Read ``path`` for preview, truncating text and rejecting oversized media."""
    try:
        size = path.stat().st_size
    except OSError as exc:
        return FilePreview.failure(f"cannot stat file: {exc.strerror or exc}")

    extension = extension_of(path.name)
    if extension in IMAGE_EXTENSIONS or extension in AUDIO_EXTENSIONS:
        kind = "image" if extension in IMAGE_EXTENSIONS else "audio"
        if size > max_media_bytes:
            return FilePreview.failure(
                f"{kind} exceeds preview limit ({size} > {max_media_bytes} bytes)",
                size=size,
            )
        if kind == "audio":
            return FilePreview(kind="audio", size=size)
        try:
            with path.open("rb") as handle:
                header = handle.read(64 * 1024)
        except OSError as exc:
            return FilePreview.failure(f"error reading file: {exc.strerror or exc}", size=size)
        dims = image_dimensions(header)
        if dims is None:
            return FilePreview(kind="image", size=size, image_format=extension)
        image_format, width, height = dims
        return FilePreview(kind="image", size=size, width=width or None, height=height or None, image_format=image_format)

    try:
        with path.open("rb") as handle:
            raw = handle.read(max_text_bytes + 1)
    except OSError as exc:
        return FilePreview.failure(f"error reading file: {exc.strerror or exc}", size=size)
    if b"\x00" in raw[:BINARY_SNIFF_BYTES]:
        return FilePreview(kind="unknown", size=size)
    truncated = len(raw) > max_text_bytes
    text = raw[:max_text_bytes].decode("utf-8", errors="replace")
    if truncated:
        text = text.rstrip("\ufffd") + "\n" + TRUNCATION_MARKER
    return FilePreview(kind="text", text=text, truncated=truncated, size=size)


class LocalCollaborators:
    """Collaborators backed by the local operating system."""

    def __init__(self, save_directory: Path | None = None) -> None:
        self.save_directory = save_directory or Path.cwd()

    def _run_quiet(self, command: list[str], stdin_text: str | None = None) -> bool:
        try:
            subprocess.run(
                command,
                input=stdin_text,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                text=True,
                check=True,
                timeout=5,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("command %s failed: %s", command[0], exc)
            return False
        return True

    def copy_to_clipboard(self, text: str) -> bool:
        for command in _CLIPBOARD_COMMANDS:
            if shutil.which(command[0]) is None:
                continue
            if self._run_quiet(list(command), stdin_text=text):
                return True
        logger.debug("no working clipboard helper found")
        return False

    def _opener(self) -> str | None:
        if sys.platform == "darwin":
            return "open"
        if os.name == "nt":
            return None
        return "xdg-open" if shutil.which("xdg-open") else None

    def open_external_url(self, url: str) -> bool:
        try:
            return bool(webbrowser.open(url))
        except webbrowser.Error as exc:
            logger.warning("could not open %s: %s", url, exc)
            return False

    def open_path_in_os_shell(self, path: str) -> bool:
        opener = self._opener()
        if opener is None:
            if os.name == "nt":
                try:
                    os.startfile(path)  # type: ignore[attr-defined]
                except OSError as exc:
                    logger.warning("could not open %s: %s", path, exc)
                    return False
                return True
            return False
        return self._run_quiet([opener, path])

    def check_path(self, path: str) -> PathCheck:
        try:
            info = os.stat(path)
        except (OSError, ValueError):
            return PathCheck.missing()
        is_directory = os.path.isdir(path)
        return PathCheck(
            exists=True,
            is_directory=is_directory,
            size=None if is_directory else info.st_size,
            modified_time=info.st_mtime,
        )

    def read_file_for_preview(self, path: str, max_text_bytes: int, max_media_bytes: int) -> FilePreview:
        return read_file_preview(Path(path), max_text_bytes, max_media_bytes)

    def save_file(self, content: str, suggested_name: str) -> str | None:
        """Write ``content`` next to the working directory without overwriting."""
        name = Path(suggested_name).name or "selection.json"
        target = self.save_directory / name
        stem, suffix = target.stem, target.suffix
        counter = 1
        while target.exists():
            target = self.save_directory / f"{stem}-{counter}{suffix}"
            counter += 1
        try:
            target.write_text(content, encoding="utf-8")
        except OSError as exc:
            logger.warning("could not save %s: %s", target, exc)
            return None
        return str(target)


def copy_text_with_fallback(collaborators: Collaborators, text: str, suggested_name: str) -> str:
    """Copy ``text`` to the clipboard, saving to a file when that fails.

    Returns a short status message describing where the text went.
    """
    try:
        if collaborators.copy_to_clipboard(text):
            return "copied to clipboard"
    except Exception as exc:
        logger.debug("clipboard copy raised: %s", exc)
    try:
        saved = collaborators.save_file(text, suggested_name)
    except Exception as exc:
        logger.warning("fallback save failed: %s", exc)
        saved = None
    if saved:
        return f"clipboard unavailable; saved to {saved}"
    return "clipboard unavailable and save failed"
