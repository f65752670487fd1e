"""Interactive session wiring: state, controller, search, previews and actions.

``ViewerApp`` owns the one ``SessionState`` and every collaborator. The main
loop feeds it keys and asks it for render contexts; nothing else mutates
session state.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable

from ..document import NOT_FOUND, ROOT_MARKER, build_flat_index, classify_value, is_container, last_segment_label
from ..preview import (
    AudioPlayer,
    Collaborators,
    LocalCollaborators,
    Preview,
    PreviewDispatcher,
    QueryScheduler,
    copy_text_with_fallback,
)
from ..render import (
    DEFAULT_THEME,
    RenderContext,
    UITheme,
    clamp_scroll,
    raw_lines,
    selected_row_index,
    serialize_document,
    tree_rows,
)
from ..search import SearchDebouncer, fuzzy_search
from .config import PreviewLimits
from .keys import KeyComboBinding, KeyComboRegistry, is_printable_key
from .navigation import DOWN, LEFT, RIGHT, UP, NavigationController
from .state import COLUMN, RAW, TREE, SessionResult, SessionState

logger = logging.getLogger(__name__)

STATUS_MESSAGE_SECONDS = 3.0
PAGE_ROWS = 10


class ViewerApp:
    """One interactive exploration session over an immutable document."""

    def __init__(
        self,
        document: object,
        *,
        source_name: str = "",
        view_mode: str = TREE,
        initial_path: str | None = None,
        theme: UITheme = DEFAULT_THEME,
        style: str = "monokai",
        no_color: bool = False,
        raw_indent: int = 2,
        select_enabled: bool = False,
        collaborators: Collaborators | None = None,
        limits: PreviewLimits | None = None,
        audio_player: AudioPlayer | None = None,
        clock: Callable[[], float] = time.monotonic,
        start_worker: Callable[[Callable[[], None], str], None] | None = None,
    ) -> None:
        self.document = document
        self.source_name = source_name
        self.theme = theme
        self.style = style
        self.no_color = no_color
        self.raw_indent = raw_indent
        self.select_enabled = select_enabled
        self.clock = clock
        self.collaborators = collaborators or LocalCollaborators()
        limits = limits or PreviewLimits()
        self.flat_index = build_flat_index(document)
        self.state = SessionState(view_mode=view_mode)
        self.navigation = NavigationController(document, self.state)
        self.debouncer = SearchDebouncer(clock=clock)
        self.dispatcher = PreviewDispatcher(style=style, no_color=no_color)
        self.scheduler = QueryScheduler(
            self.collaborators,
            limits.max_text_bytes,
            limits.max_media_bytes,
            start_worker=start_worker,
        )
        self.audio = audio_player or AudioPlayer()
        self.quit_requested = False
        self._normal_keys = self._build_normal_keys()

        self.navigation.switch_view(view_mode)
        if initial_path is not None and not self.navigation.jump_to_path(initial_path):
            self.set_status(self.state.status_message)

    # status
    def set_status(self, message: str, seconds: float = STATUS_MESSAGE_SECONDS) -> None:
        self.state.status_message = message
        self.state.status_message_until = self.clock() + seconds
        self.state.dirty = True

    # previews
    def current_preview(self) -> Preview:
        """Compose the preview for the selection, scheduling any missing queries."""
        state = self.state
        path = state.effective_path
        value = self.navigation.current_value()
        if value is NOT_FOUND:
            return Preview(composer="empty", properties=[("path", path or ROOT_MARKER)], body=["<nothing selected>"])
        preview = self.dispatcher.compose(path, value, classify_value(value), state.query_cache)
        for request in preview.pending:
            self.scheduler.request(request, state.query_cache)
        return preview

    # periodic work
    def poll(self, now: float | None = None) -> None:
        """Run due searches, absorb finished queries and expire the status line."""
        state = self.state
        current = self.clock() if now is None else now
        query = self.debouncer.take(current)
        if query is not None:
            self.run_search(query)
        if self.scheduler.drain_into(state.query_cache):
            state.dirty = True
        if state.status_message and current >= state.status_message_until:
            state.status_message = ""
            state.status_message_until = 0.0
            state.dirty = True

    def next_poll_timeout_ms(self) -> int:
        wait = self.debouncer.seconds_until_due()
        if wait is not None:
            return max(10, int(wait * 1000) + 5)
        if self.scheduler.in_flight:
            return 50
        return 250

    # search
    def open_search(self) -> None:
        state = self.state
        state.search_active = True
        state.search_selected = 0
        state.dirty = True

    def close_search(self) -> None:
        state = self.state
        self.debouncer.cancel()
        state.search_active = False
        state.search_loading = False
        state.dirty = True

    def edit_search_query(self, query: str) -> None:
        state = self.state
        state.search_query = query
        state.search_loading = bool(query.strip())
        if query.strip():
            self.debouncer.update(query)
        else:
            self.debouncer.cancel()
            state.search_hits = []
            state.search_selected = 0
        state.dirty = True

    def run_search(self, query: str) -> None:
        state = self.state
        state.search_hits = fuzzy_search(query, self.flat_index)
        state.search_selected = 0
        state.search_loading = False
        state.dirty = True

    def activate_search_hit(self) -> bool:
        state = self.state
        if not state.search_hits:
            return False
        hit = state.search_hits[max(0, min(state.search_selected, len(state.search_hits) - 1))]
        self.close_search()
        return self.navigation.navigate(hit.descriptor.path)

    # path prompt
    def open_path_prompt(self) -> None:
        state = self.state
        state.path_prompt_active = True
        state.path_prompt_text = state.effective_path
        state.dirty = True

    def submit_path_prompt(self) -> bool:
        state = self.state
        state.path_prompt_active = False
        state.dirty = True
        if self.navigation.jump_to_path(state.path_prompt_text):
            return True
        self.set_status(state.status_message)
        return False

    # actions
    def copy_path(self) -> None:
        path = self.state.effective_path or ROOT_MARKER
        self.set_status(f"path {copy_text_with_fallback(self.collaborators, path, 'path.txt')}")

    def _selected_value_text(self) -> str:
        value = self.navigation.current_value()
        if isinstance(value, str):
            return value
        return serialize_document(value, self.raw_indent or 2)

    def _suggested_name(self) -> str:
        label = last_segment_label(self.state.effective_path).strip("[]$") or "document"
        return f"{label}.json"

    def copy_value(self) -> None:
        text = self._selected_value_text()
        self.set_status(f"value {copy_text_with_fallback(self.collaborators, text, self._suggested_name())}")

    def save_selection(self) -> None:
        try:
            saved = self.collaborators.save_file(self._selected_value_text(), self._suggested_name())
        except Exception as exc:
            logger.warning("save failed: %s", exc)
            saved = None
        self.set_status(f"saved to {saved}" if saved else "save failed")

    def open_selection(self) -> None:
        preview = self.current_preview()
        target = preview.open_target
        if target is None:
            self.set_status("nothing to open")
            return
        try:
            if preview.composer == "url":
                opened = self.collaborators.open_external_url(target)
            else:
                opened = self.collaborators.open_path_in_os_shell(target)
        except Exception as exc:
            logger.warning("open failed for %s: %s", target, exc)
            opened = False
        self.set_status(f"opened {target}" if opened else f"could not open {target}")

    def toggle_audio(self) -> None:
        preview = self.current_preview()
        if preview.media_path is None:
            self.set_status("no audio preview")
            return
        if not self.audio.available:
            self.set_status("no audio player found")
            return
        playing = self.audio.toggle(preview.media_path)
        self.set_status("playing audio" if playing else "audio stopped")

    def terminate_with_selection(self, path: str | None = None) -> bool:
        """End the session returning the value at ``path`` (default: selection)."""
        if path is not None and not self.navigation.navigate(path, record_history=False):
            return False
        value = self.navigation.current_value()
        if value is NOT_FOUND:
            return False
        self.state.result = SessionResult(selected=value, has_selection=True)
        self.quit_requested = True
        return True

    # scrolling
    def sync_scroll(self, body_rows: int) -> None:
        """Keep the tree scroll offset around the selected row."""
        state = self.state
        if state.view_mode != TREE:
            return
        rows = tree_rows(self.document, state)
        start = clamp_scroll(selected_row_index(rows), state.tree_start, body_rows, len(rows))
        if start != state.tree_start:
            state.tree_start = start
            state.dirty = True

    def scroll_page(self, direction: int) -> None:
        state = self.state
        if state.view_mode == RAW:
            state.raw_start = max(0, state.raw_start + direction * PAGE_ROWS)
        else:
            state.preview_start = max(0, state.preview_start + direction * PAGE_ROWS)
        state.dirty = True

    def scroll_home(self) -> None:
        state = self.state
        if state.view_mode == RAW:
            state.raw_start = 0
        else:
            state.preview_start = 0
        state.dirty = True

    def scroll_end(self) -> None:
        state = self.state
        if state.view_mode == RAW:
            state.raw_start = max(0, len(raw_lines(self.document, self.raw_indent, self.style, self.no_color)) - PAGE_ROWS)
        else:
            state.preview_start = max(0, len(self.current_preview().body) - PAGE_ROWS)
        state.dirty = True

    # key handling
    def _activate(self) -> None:
        if self.select_enabled:
            self.terminate_with_selection()
            return
        state = self.state
        value = self.navigation.current_value()
        if not is_container(value):
            return
        if state.view_mode == TREE:
            self.navigation.toggle_expand(state.effective_path)
        elif state.view_mode == COLUMN:
            self.navigation.move(RIGHT)

    def _toggle_selected_expansion(self) -> None:
        if self.state.view_mode == TREE and is_container(self.navigation.current_value()):
            self.navigation.toggle_expand(self.state.effective_path)

    def _toggle_help(self) -> None:
        self.state.show_help = not self.state.show_help
        self.state.dirty = True

    def _request_quit(self) -> bool:
        self.quit_requested = True
        return True

    def _build_normal_keys(self) -> KeyComboRegistry:
        nav = self.navigation
        return KeyComboRegistry().register_bindings(
            KeyComboBinding(("UP", "k"), lambda: nav.move(UP)),
            KeyComboBinding(("DOWN", "j"), lambda: nav.move(DOWN)),
            KeyComboBinding(("LEFT", "h"), lambda: nav.move(LEFT)),
            KeyComboBinding(("RIGHT", "l"), lambda: nav.move(RIGHT)),
            KeyComboBinding(("1", "t"), lambda: nav.switch_view(TREE)),
            KeyComboBinding(("2", "c"), lambda: nav.switch_view(COLUMN)),
            KeyComboBinding(("3", "r"), lambda: nav.switch_view(RAW)),
            KeyComboBinding(("TAB",), nav.cycle_view),
            KeyComboBinding((" ",), self._toggle_selected_expansion),
            KeyComboBinding(("e",), nav.expand_all),
            KeyComboBinding(("E",), nav.collapse_all),
            KeyComboBinding(("[", "b"), nav.back),
            KeyComboBinding(("]", "f"), nav.forward),
            KeyComboBinding(("/",), self.open_search),
            KeyComboBinding((":", "g"), self.open_path_prompt),
            KeyComboBinding(("y",), self.copy_path),
            KeyComboBinding(("Y",), self.copy_value),
            KeyComboBinding(("o",), self.open_selection),
            KeyComboBinding(("p",), self.toggle_audio),
            KeyComboBinding(("s",), self.save_selection),
            KeyComboBinding(("ENTER",), self._activate),
            KeyComboBinding(("PAGE_DOWN",), lambda: self.scroll_page(1)),
            KeyComboBinding(("PAGE_UP",), lambda: self.scroll_page(-1)),
            KeyComboBinding(("HOME",), self.scroll_home),
            KeyComboBinding(("END",), self.scroll_end),
            KeyComboBinding(("?",), self._toggle_help),
            KeyComboBinding(("q", "CTRL_C"), self._request_quit),
        )

    def _handle_search_key(self, key: str) -> None:
        state = self.state
        if key == "ESC":
            self.close_search()
        elif key == "ENTER":
            self.activate_search_hit()
        elif key == "UP":
            state.search_selected = max(0, state.search_selected - 1)
        elif key == "DOWN":
            state.search_selected = max(0, min(len(state.search_hits) - 1, state.search_selected + 1))
        elif key == "BACKSPACE":
            self.edit_search_query(state.search_query[:-1])
        elif key == "CTRL_U":
            self.edit_search_query("")
        elif is_printable_key(key):
            self.edit_search_query(state.search_query + key)
        state.dirty = True

    def _handle_path_prompt_key(self, key: str) -> None:
        state = self.state
        if key == "ESC":
            state.path_prompt_active = False
        elif key == "ENTER":
            self.submit_path_prompt()
        elif key == "BACKSPACE":
            state.path_prompt_text = state.path_prompt_text[:-1]
        elif key == "CTRL_U":
            state.path_prompt_text = ""
        elif is_printable_key(key):
            state.path_prompt_text += key
        state.dirty = True

    def handle_key(self, key: str) -> bool:
        """Dispatch one key; returns ``True`` when the session should end."""
        if not key:
            return self.quit_requested
        state = self.state
        if key == "CTRL_C":
            return self._request_quit()
        if state.search_active:
            self._handle_search_key(key)
        elif state.path_prompt_active:
            self._handle_path_prompt_key(key)
        elif state.show_help and key in {"ESC", "?", "q"}:
            self._toggle_help()
        else:
            self._normal_keys.dispatch(key)
        return self.quit_requested

    # rendering
    def build_render_context(self, width: int, height: int) -> RenderContext:
        preview = self.current_preview()
        return RenderContext(
            document=self.document,
            state=self.state,
            width=width,
            height=height,
            source_name=self.source_name,
            node_count=len(self.flat_index),
            preview_properties=preview.properties,
            preview_body=preview.body,
            theme=self.theme,
            style=self.style,
            no_color=self.no_color,
            raw_indent=self.raw_indent,
            select_enabled=self.select_enabled,
        )

    def shutdown(self) -> None:
        self.audio.stop()


def result_as_json(result: SessionResult) -> str:
    return json.dumps(result.selected, ensure_ascii=False, indent=2)
