from __future__ import annotations

import unittest

from lazyjson.search import SEARCH_DEBOUNCE_SECONDS, SearchDebouncer


class _Clock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class SearchDebouncerTests(unittest.TestCase):
    def test_query_released_only_after_quiet_period(self) -> None:
        clock = _Clock()
        debouncer = SearchDebouncer(clock=clock)
        debouncer.update("we")
        clock.now += SEARCH_DEBOUNCE_SECONDS / 2
        self.assertIsNone(debouncer.take())
        clock.now += SEARCH_DEBOUNCE_SECONDS
        self.assertEqual(debouncer.take(), "we")
        self.assertIsNone(debouncer.take())

    def test_later_edit_supersedes_and_restarts_timer(self) -> None:
        clock = _Clock()
        debouncer = SearchDebouncer(clock=clock)
        debouncer.update("w")
        clock.now += 0.1
        debouncer.update("web")
        clock.now += 0.1
        self.assertIsNone(debouncer.take())
        clock.now += 0.06
        self.assertEqual(debouncer.take(), "web")

    def test_cancel_drops_pending_query(self) -> None:
        clock = _Clock()
        debouncer = SearchDebouncer(clock=clock)
        debouncer.update("web")
        debouncer.cancel()
        clock.now += 1.0
        self.assertFalse(debouncer.pending)
        self.assertIsNone(debouncer.take())
        self.assertIsNone(debouncer.seconds_until_due())

    def test_seconds_until_due_counts_down(self) -> None:
        clock = _Clock()
        debouncer = SearchDebouncer(delay=0.2, clock=clock)
        debouncer.update("x")
        clock.now += 0.05
        self.assertAlmostEqual(debouncer.seconds_until_due(), 0.15)


if __name__ == "__main__":
    unittest.main()
