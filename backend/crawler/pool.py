"""Worker pool that runs crawl tasks which may spawn further tasks.

A run is finished when no task is queued or executing.  Outstanding work is
tracked with a counter that each future's done-callback decrements, so futures
cancelled by :meth:`CrawlPool.cancel` are accounted for too.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Generic, Iterable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CrawlPool(Generic[T]):
    """Run ``handler(task)`` on a thread pool; returned tasks are queued too.

    Args:
        handler: Processes one task and returns its child tasks.
        max_workers: Number of worker threads.
        on_error: Called with ``(task, exc)`` when *handler* raises.  Sibling
            tasks are unaffected.
    """

    def __init__(
        self,
        handler: Callable[[T], Iterable[T]],
        max_workers: int,
        on_error: Optional[Callable[[T, Exception], None]] = None,
    ) -> None:
        self._handler = handler
        self._on_error = on_error
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, max_workers), thread_name_prefix="crawler"
        )
        self._pending = 0
        self._cancelled = False
        self._cond = threading.Condition()

    @property
    def pending(self) -> int:
        with self._cond:
            return self._pending

    @property
    def cancelled(self) -> bool:
        with self._cond:
            return self._cancelled

    def submit(self, task: T) -> bool:
        """Queue *task*.  Returns ``False`` if the pool has been cancelled."""
        with self._cond:
            if self._cancelled:
                return False
            self._pending += 1
        try:
            future = self._executor.submit(self._run, task)
        except RuntimeError:
            # Executor shut down between the check above and the submit.
            self._task_done(None)
            return False
        future.add_done_callback(self._task_done)
        return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until every task has finished.  ``False`` on timeout."""
        with self._cond:
            finished = self._cond.wait_for(lambda: self._pending == 0, timeout)
        if finished:
            self._executor.shutdown(wait=True)
        return finished

    def cancel(self) -> None:
        """Reject new tasks and drop queued ones.  Running tasks finish."""
        with self._cond:
            self._cancelled = True
        self._executor.shutdown(wait=False, cancel_futures=True)

    # ------------------------------------------------------------------

    def _run(self, task: T) -> None:
        try:
            children = list(self._handler(task))
        except Exception as exc:  # noqa: BLE001
            if self._on_error is None:
                logger.exception("Crawl task %r failed", task)
            else:
                self._on_error(task, exc)
            return
        for child in children:
            if not self.submit(child):
                break

    def _task_done(self, _future: Optional[Future]) -> None:
        with self._cond:
            self._pending -= 1
            if self._pending == 0:
                self._cond.notify_all()
