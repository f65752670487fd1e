"""Deadline-based debounce for search recomputation.

The runtime loop polls ``due``; there is no timer thread. A newer edit
replaces the pending query and restarts the deadline.
"""

from __future__ import annotations

import time
from collections.abc import Callable

SEARCH_DEBOUNCE_SECONDS = 0.15


class SearchDebouncer:
    """Hold at most one pending query until its quiet period elapses."""

    def __init__(
        self,
        delay: float = SEARCH_DEBOUNCE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.delay = max(0.0, delay)
        self._clock = clock
        self._pending: str | None = None
        self._deadline = 0.0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    @property
    def deadline(self) -> float:
        return self._deadline

    def update(self, query: str) -> None:
        """Record an edit, superseding any pending query."""
        self._pending = query
        self._deadline = self._clock() + self.delay

    def cancel(self) -> None:
        self._pending = None
        self._deadline = 0.0

    def due(self, now: float | None = None) -> bool:
        if self._pending is None:
            return False
        current = self._clock() if now is None else now
        return current >= self._deadline

    def take(self, now: float | None = None) -> str | None:
        """Return the pending query once it is due, clearing it."""
        if not self.due(now):
            return None
        query = self._pending
        self._pending = None
        return query

    def seconds_until_due(self, now: float | None = None) -> float | None:
        if self._pending is None:
            return None
        current = self._clock() if now is None else now
        return max(0.0, self._deadline - current)
