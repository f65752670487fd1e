"""Selection, expansion and back/forward history for one session.

All view modes share the same ``SessionState``. Same-level moves go through
``select`` and leave history alone; jumps and level changes go through
``navigate``.
"""

from __future__ import annotations

from ..document import (
    NOT_FOUND,
    ROOT,
    ancestor_chain,
    build_tree_rows,
    child_paths,
    container_paths,
    decode_path,
    is_container,
    is_root,
    join_segments,
    parent_path,
    resolve_path,
    row_index_for_path,
)
from .state import COLUMN, RAW, TREE, SessionState, normalize_view_mode

UP = "up"
DOWN = "down"
LEFT = "left"
RIGHT = "right"
DIRECTIONS = frozenset({UP, DOWN, LEFT, RIGHT})


class NavigationController:
    """Mediate every state transition over ``(view, selection, expansion, history)``."""

    def __init__(self, document: object, state: SessionState) -> None:
        self.document = document
        self.state = state

    # selection
    def current_value(self) -> object:
        return resolve_path(self.document, self.state.effective_path)

    def _canonical(self, path: str | None) -> str:
        """Normalize ``$``-prefixed or bracket-spaced input to encoder form."""
        return ROOT if is_root(path) else join_segments(decode_path(path))

    def select(self, path: str) -> bool:
        """Set the selection without touching history.

        In column view the chain is kept in step so it always ends at the
        selection's parent.
        """
        path = self._canonical(path)
        if resolve_path(self.document, path) is NOT_FOUND:
            return False
        state = self.state
        if path != state.selection_path:
            state.selection_path = path
            state.preview_start = 0
        if state.view_mode == COLUMN:
            state.column_chain = ancestor_chain(path)
        state.dirty = True
        return True

    def navigate(self, path: str, record_history: bool = True) -> bool:
        """Move the selection to ``path`` and sync view-specific state.

        Unresolvable paths are rejected so the selection always resolves.
        """
        path = self._canonical(path)
        if resolve_path(self.document, path) is NOT_FOUND:
            return False
        state = self.state
        if path != state.selection_path:
            state.preview_start = 0
        state.selection_path = path
        chain = ancestor_chain(path)
        if state.view_mode == COLUMN:
            state.column_chain = chain
        elif state.view_mode == TREE:
            state.expanded.update(chain)
        if record_history and state.history[state.history_index] != path:
            del state.history[state.history_index + 1 :]
            state.history.append(path)
            state.history_index = len(state.history) - 1
        state.dirty = True
        return True

    def jump_to_path(self, text: str) -> bool:
        """Navigate to a typed path, reporting unresolvable input in the status line."""
        target = text.strip()
        if self.navigate(target):
            return True
        self.state.status_message = f"no such path: {target or '$'}"
        self.state.dirty = True
        return False

    # history
    def back(self) -> bool:
        state = self.state
        if state.history_index <= 0:
            return False
        state.history_index -= 1
        return self.navigate(state.history[state.history_index], record_history=False)

    def forward(self) -> bool:
        state = self.state
        if state.history_index >= len(state.history) - 1:
            return False
        state.history_index += 1
        return self.navigate(state.history[state.history_index], record_history=False)

    # views
    def first_root_child(self) -> str | None:
        children = child_paths(ROOT, self.document)
        return children[0] if children else None

    def switch_view(self, mode: str) -> None:
        """Activate ``mode``, keeping the selection and syncing view state."""
        state = self.state
        state.view_mode = normalize_view_mode(mode, state.view_mode)
        if state.view_mode == RAW:
            state.dirty = True
            return
        target = state.selection_path
        if target is None:
            target = self.first_root_child() or ROOT
        self.navigate(target, record_history=False)

    def cycle_view(self) -> None:
        order = (TREE, COLUMN, RAW)
        idx = order.index(self.state.view_mode) if self.state.view_mode in order else 0
        self.switch_view(order[(idx + 1) % len(order)])

    # expansion
    def toggle_expand(self, path: str) -> None:
        if path in self.state.expanded:
            self.state.expanded.discard(path)
        else:
            self.state.expanded.add(path)
        self.state.dirty = True

    def expand_all(self) -> None:
        self.state.expanded.update(container_paths(self.document))
        self.state.dirty = True

    def collapse_all(self) -> None:
        """Collapse everything below the root and move selection to a visible row."""
        self.state.expanded.clear()
        self.state.expanded.add(ROOT)
        path = self.state.selection_path
        if path is not None and len(decode_path(path)) > 1:
            self.select(join_segments(decode_path(path)[:1]))
        self.state.dirty = True

    def visible_tree_paths(self) -> list[str]:
        return [row.path for row in build_tree_rows(self.document, self.state.expanded)]

    # directional input
    def move(self, direction: str) -> bool:
        """Apply directional input for the active view; returns whether state changed."""
        if direction not in DIRECTIONS:
            return False
        mode = self.state.view_mode
        if mode == TREE:
            return self._move_tree(direction)
        if mode == COLUMN:
            return self._move_column(direction)
        return False

    def _move_tree(self, direction: str) -> bool:
        state = self.state
        rows = build_tree_rows(self.document, state.expanded)
        current = state.effective_path
        idx = row_index_for_path(rows, current)
        if idx is None:
            idx = 0
        row = rows[idx]

        if direction in {UP, DOWN}:
            step = -1 if direction == UP else 1
            target = max(0, min(len(rows) - 1, idx + step))
            if target == idx and state.selection_path is not None:
                return False
            return self.select(rows[target].path)

        if direction == RIGHT:
            if not row.is_container:
                return False
            if not row.expanded:
                self.toggle_expand(row.path)
                return True
            children = child_paths(row.path, row.value)
            if not children:
                return False
            return self.select(children[0])

        if row.is_container and row.expanded:
            self.toggle_expand(row.path)
            return True
        if is_root(row.path):
            return False
        return self.navigate(parent_path(row.path))

    def _move_column(self, direction: str) -> bool:
        state = self.state
        current = state.effective_path

        if direction in {UP, DOWN}:
            if is_root(current):
                return False
            parent = parent_path(current)
            siblings = child_paths(parent, resolve_path(self.document, parent))
            if current not in siblings:
                return False
            idx = siblings.index(current)
            step = -1 if direction == UP else 1
            target = max(0, min(len(siblings) - 1, idx + step))
            if target == idx:
                return False
            return self.select(siblings[target])

        if direction == LEFT:
            if is_root(current):
                return False
            return self.navigate(parent_path(current))

        value = resolve_path(self.document, current)
        if not is_container(value):
            return False
        children = child_paths(current, value)
        if not children:
            return False
        return self.navigate(children[0])
