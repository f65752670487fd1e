"""Preview composition, host collaborators and background query plumbing."""

from __future__ import annotations

from .audio import AudioPlayer
from .collaborators import (
    Collaborators,
    FilePreview,
    LocalCollaborators,
    PathCheck,
    copy_text_with_fallback,
    read_file_preview,
)
from .dispatcher import Preview, PreviewDispatcher, describe_relative, format_size
from .scheduler import CHECK, READ, QueryRequest, QueryScheduler, cache_key

__all__ = [
    "AudioPlayer",
    "CHECK",
    "Collaborators",
    "FilePreview",
    "LocalCollaborators",
    "PathCheck",
    "Preview",
    "PreviewDispatcher",
    "QueryRequest",
    "QueryScheduler",
    "READ",
    "cache_key",
    "copy_text_with_fallback",
    "describe_relative",
    "format_size",
    "read_file_preview",
]
