"""Background worker for ``git push``.

The push runs on a daemon thread; its ``GitResult`` is queued and only
applied to UI state when the foreground loop drains the queue.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from queue import Empty, Queue

from .git_runner import GitResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PushRequest:
    """One push job."""

    request_id: int
    repo_root: Path


@dataclass(frozen=True)
class PushOutcome:
    """Completed push result handed back to the foreground thread."""

    request: PushRequest
    result: GitResult


class PushScheduler:
    """Run at most one push at a time and queue completed outcomes."""

    def __init__(self, push: Callable[[Path], GitResult]) -> None:
        self._push = push
        self._lock = threading.Lock()
        self._running = False
        self._next_request_id = 1
        self._results: Queue[PushOutcome] = Queue()

    @property
    def running(self) -> bool:
        with self._lock:
            return self._running

    def _worker(self, request: PushRequest) -> None:
        try:
            result = self._push(request.repo_root)
        except Exception as exc:
            logger.exception("push %d crashed", request.request_id)
            result = GitResult(False, str(exc) or exc.__class__.__name__)
        with self._lock:
            self._running = False
        self._results.put(PushOutcome(request=request, result=result))

    def schedule(self, repo_root: Path) -> int | None:
        """Start a push unless one is already running; return its request id."""
        with self._lock:
            if self._running:
                return None
            self._running = True
            request = PushRequest(request_id=self._next_request_id, repo_root=repo_root)
            self._next_request_id += 1

        logger.debug("starting push %d in %s", request.request_id, repo_root)
        worker = threading.Thread(
            target=self._worker,
            args=(request,),
            name="fastgit-push",
            daemon=True,
        )
        worker.start()
        return request.request_id

    def drain_results(self) -> list[PushOutcome]:
        """Drain all completed push outcomes."""
        out: list[PushOutcome] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out


__all__ = [
    "PushOutcome",
    "PushRequest",
    "PushScheduler",
]
