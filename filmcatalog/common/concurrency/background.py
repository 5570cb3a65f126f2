from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

R = TypeVar("R")

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolStats:
    started_at: float
    submitted: int = 0
    succeeded: int = 0
    failed: int = 0
    dropped: int = 0

    @property
    def uptime_sec(self) -> float:
        return time.time() - self.started_at

    @property
    def in_flight(self) -> int:
        return max(0, self.submitted - self.succeeded - self.failed)


class BackgroundPool:
    """
    Fire-and-forget jobs on a few worker threads, used for side effects that
    must not hold up a request (mail after a write).

    - submit() never blocks: once `max_pending` jobs are outstanding, further
      jobs are dropped and counted
    - a failing job is logged and counted; the exception stays in its Future
    - drain() waits for outstanding jobs, shutdown() stops the workers
    """

    def __init__(self, name: str = "background", workers: int = 2, max_pending: Optional[int] = None) -> None:
        self.name = name
        self.max_pending = max_pending if max_pending and max_pending > 0 else None
        self._executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix=name)
        self._cond = threading.Condition()
        self._started_at = time.time()
        self._submitted = 0
        self._succeeded = 0
        self._failed = 0
        self._dropped = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _pending(self) -> int:
        return self._submitted - self._succeeded - self._failed

    def stats(self) -> PoolStats:
        with self._cond:
            return PoolStats(
                started_at=self._started_at,
                submitted=self._submitted,
                succeeded=self._succeeded,
                failed=self._failed,
                dropped=self._dropped,
            )

    def submit(self, fn: Callable[..., R], /, *args, **kwargs) -> Optional[Future[R]]:
        """Schedule `fn`; returns None when the job was dropped."""
        with self._cond:
            if self._closed:
                raise RuntimeError(f"{self.name}: submit() after shutdown")
            if self.max_pending is not None and self._pending() >= self.max_pending:
                self._dropped += 1
                log.warning("%s: %d jobs pending, dropping %s", self.name, self._pending(), getattr(fn, "__name__", fn))
                return None
            self._submitted += 1

        fut: Future[R] = self._executor.submit(fn, *args, **kwargs)
        fut.add_done_callback(self._on_done)
        return fut

    def _on_done(self, fut: Future) -> None:
        exc = None if fut.cancelled() else fut.exception()
        with self._cond:
            if exc is None and not fut.cancelled():
                self._succeeded += 1
            else:
                self._failed += 1
            self._cond.notify_all()
        if exc is not None:
            log.error("%s: job failed: %s", self.name, exc, exc_info=exc)

    def drain(self, timeout: Optional[float] = None) -> bool:
        """Block until nothing is pending. False if `timeout` ran out first."""
        with self._cond:
            return self._cond.wait_for(lambda: self._pending() == 0, timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        with self._cond:
            if self._closed:
                return
            self._closed = True
        self._executor.shutdown(wait=wait, cancel_futures=not wait)

    def __enter__(self) -> "BackgroundPool":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=True)
