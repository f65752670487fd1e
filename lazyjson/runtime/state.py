"""Mutable session state owned by the runtime.

One ``SessionState`` instance is threaded through every controller operation;
nothing about the session lives in module globals.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..document import ROOT
from ..search import SearchHit

TREE = "tree"
COLUMN = "column"
RAW = "raw"
VIEW_MODES: tuple[str, ...] = (TREE, COLUMN, RAW)
DEFAULT_VIEW_MODE = TREE


def normalize_view_mode(name: str | None, default: str = DEFAULT_VIEW_MODE) -> str:
    """Return a valid view-mode name, falling back to ``default``."""
    if not name:
        return default
    candidate = str(name).strip().lower()
    return candidate if candidate in VIEW_MODES else default


@dataclass
class SessionResult:
    """Terminal result handed back to the host when the session ends."""

    selected: object = None
    has_selection: bool = False


@dataclass
class SessionState:
    """Navigation, view and UI state for one interactive session."""

    view_mode: str = DEFAULT_VIEW_MODE
    selection_path: str | None = None
    expanded: set[str] = field(default_factory=set)
    history: list[str] = field(default_factory=lambda: [ROOT])
    history_index: int = 0
    column_chain: list[str] = field(default_factory=list)
    query_cache: dict[str, object] = field(default_factory=dict)

    search_active: bool = False
    search_query: str = ""
    search_hits: list[SearchHit] = field(default_factory=list)
    search_selected: int = 0
    search_loading: bool = False

    path_prompt_active: bool = False
    path_prompt_text: str = ""

    show_help: bool = False
    status_message: str = ""
    status_message_until: float = 0.0
    tree_start: int = 0
    preview_start: int = 0
    raw_start: int = 0
    dirty: bool = True
    result: SessionResult = field(default_factory=SessionResult)

    @property
    def effective_path(self) -> str:
        """Return the selection, reporting root when nothing is selected."""
        return ROOT if self.selection_path is None else self.selection_path

    @property
    def can_go_back(self) -> bool:
        return self.history_index > 0

    @property
    def can_go_forward(self) -> bool:
        return self.history_index < len(self.history) - 1


__all__ = [
    "COLUMN",
    "DEFAULT_VIEW_MODE",
    "RAW",
    "SessionResult",
    "SessionState",
    "TREE",
    "VIEW_MODES",
    "normalize_view_mode",
]
