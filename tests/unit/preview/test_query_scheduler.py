from __future__ import annotations

import unittest
from unittest import mock

from lazyjson.preview import CHECK, READ, FilePreview, PathCheck, QueryRequest, QueryScheduler


class _DeferredWorkers:
    """Collect worker callables so tests decide when they run."""

    def __init__(self) -> None:
        self.jobs: list = []

    def __call__(self, target, name: str) -> None:
        self.jobs.append(target)

    def run_all(self) -> None:
        jobs, self.jobs = self.jobs, []
        for job in jobs:
            job()


class QuerySchedulerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.collaborators = mock.Mock()
        self.workers = _DeferredWorkers()
        self.scheduler = QueryScheduler(self.collaborators, 100, 1000, start_worker=self.workers)

    def test_each_key_is_queried_once(self) -> None:
        cache: dict[str, object] = {}
        request = QueryRequest(CHECK, "/x")
        self.assertTrue(self.scheduler.request(request, cache))
        self.assertFalse(self.scheduler.request(request, cache))
        self.assertEqual(self.scheduler.in_flight, 1)

        self.collaborators.check_path.return_value = PathCheck(exists=True, size=3)
        self.workers.run_all()
        self.assertEqual(self.scheduler.drain_into(cache), [request.key])
        self.assertEqual(cache[request.key], PathCheck(exists=True, size=3))
        self.assertEqual(self.scheduler.in_flight, 0)
        self.assertFalse(self.scheduler.request(request, cache))
        self.collaborators.check_path.assert_called_once_with("/x")

    def test_collaborator_errors_become_negative_results(self) -> None:
        cache: dict[str, object] = {}
        self.collaborators.check_path.side_effect = OSError("denied")
        self.collaborators.read_file_for_preview.side_effect = RuntimeError("boom")
        self.scheduler.request(QueryRequest(CHECK, "/x"), cache)
        self.scheduler.request(QueryRequest(READ, "/x"), cache)
        self.workers.run_all()
        self.scheduler.drain_into(cache)
        self.assertEqual(cache["check:/x"], PathCheck.missing())
        result = cache["read:/x"]
        self.assertIsInstance(result, FilePreview)
        self.assertEqual(result.kind, "error")

    def test_read_passes_size_limits(self) -> None:
        cache: dict[str, object] = {}
        self.collaborators.read_file_for_preview.return_value = FilePreview(kind="text", text="hi")
        self.scheduler.request(QueryRequest(READ, "/x"), cache)
        self.workers.run_all()
        self.scheduler.drain_into(cache)
        self.collaborators.read_file_for_preview.assert_called_once_with("/x", 100, 1000)

    def test_drain_without_results_is_empty(self) -> None:
        self.assertEqual(self.scheduler.drain_into({}), [])


if __name__ == "__main__":
    unittest.main()
