"""Background worker for collaborator queries feeding the session query cache.

Workers never touch session state. Completed answers wait in a queue until the
runtime loop drains them into ``query_cache`` on the main thread; an answer for
a path the user has already left is still cached, just not shown.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from queue import Empty, Queue

from .collaborators import Collaborators, FilePreview, PathCheck

logger = logging.getLogger(__name__)

CHECK = "check"
READ = "read"


def cache_key(kind: str, target: str) -> str:
    return f"{kind}:{target}"


@dataclass(frozen=True)
class QueryRequest:
    """One collaborator query a preview needs before it can render fully."""

    kind: str
    target: str

    @property
    def key(self) -> str:
        return cache_key(self.kind, self.target)


@dataclass(frozen=True)
class QueryResult:
    request: QueryRequest
    value: object


class QueryScheduler:
    """Run collaborator queries off the input path, one worker per request.

    A request whose key is already cached or in flight is ignored, so each key
    is queried at most once per session.
    """

    def __init__(
        self,
        collaborators: Collaborators,
        max_text_bytes: int,
        max_media_bytes: int,
        start_worker: Callable[[Callable[[], None], str], None] | None = None,
    ) -> None:
        self._collaborators = collaborators
        self._max_text_bytes = max_text_bytes
        self._max_media_bytes = max_media_bytes
        self._start_worker = start_worker or self._start_thread
        self._lock = threading.Lock()
        self._in_flight: set[str] = set()
        self._results: Queue[QueryResult] = Queue()

    @staticmethod
    def _start_thread(target: Callable[[], None], name: str) -> None:
        threading.Thread(target=target, name=name, daemon=True).start()

    def _run(self, request: QueryRequest) -> object:
        if request.kind == CHECK:
            try:
                return self._collaborators.check_path(request.target)
            except Exception as exc:
                logger.debug("path check failed for %s: %s", request.target, exc)
                return PathCheck.missing()
        try:
            return self._collaborators.read_file_for_preview(
                request.target,
                self._max_text_bytes,
                self._max_media_bytes,
            )
        except Exception as exc:
            logger.debug("preview read failed for %s: %s", request.target, exc)
            return FilePreview.failure(f"error reading file: {exc}")

    def _worker(self, request: QueryRequest) -> None:
        value = self._run(request)
        self._results.put(QueryResult(request=request, value=value))

    @property
    def in_flight(self) -> int:
        with self._lock:
            return len(self._in_flight)

    def request(self, request: QueryRequest, query_cache: dict[str, object]) -> bool:
        """Start ``request`` unless cached or already running; returns whether started."""
        key = request.key
        if key in query_cache:
            return False
        with self._lock:
            if key in self._in_flight:
                return False
            self._in_flight.add(key)
        self._start_worker(lambda: self._worker(request), f"lazyjson-{request.kind}")
        return True

    def drain_into(self, query_cache: dict[str, object]) -> list[str]:
        """Move completed answers into ``query_cache``; returns the keys written."""
        written: list[str] = []
        while True:
            try:
                result = self._results.get_nowait()
            except Empty:
                break
            key = result.request.key
            query_cache[key] = result.value
            with self._lock:
                self._in_flight.discard(key)
            written.append(key)
        return written
