"""Fixed-size pool of worker threads.

Workers pull jobs from the pool's internal queue and report through the
Future returned by submit(). The pool is a thin layer over
concurrent.futures.ThreadPoolExecutor that adds the size check and the
lifecycle logging the renderer relies on.

Example:
    >>> with ThreadPool(4) as pool:
    ...     futures = [pool.submit(pow, 2, n) for n in range(8)]
    >>> [f.result() for f in futures]
    [1, 2, 4, 8, 16, 32, 64, 128]
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

logger = logging.getLogger(__name__)


class PoolCreationError(ValueError):
    """Raised when a pool is requested with fewer than one worker."""


class ThreadPool:
    """A fixed number of OS threads consuming submitted jobs.

    Shutting down closes the job queue: already submitted jobs run to
    completion and the workers then exit. Leaving the context manager with an
    exception drops the jobs still queued instead. Running jobs are never
    interrupted.

    Attributes:
        size: Number of worker threads.
    """

    def __init__(self, size: int) -> None:
        """Create the pool.

        Args:
            size: Number of worker threads. Must be at least 1.

        Raises:
            PoolCreationError: If size is less than 1.
        """
        if size < 1:
            raise PoolCreationError(
                f"Attempted to create a thread pool with {size} threads"
            )

        self.size = size
        self._executor = ThreadPoolExecutor(
            max_workers=size, thread_name_prefix="pathtracer-worker"
        )
        self._closed = False
        logger.info("Creating thread pool with %d workers", size)

    def submit(self, fn: Callable[..., Any], *args: Any) -> Future:
        """Queue a job and return the Future its result arrives on.

        Raises:
            RuntimeError: If the pool has been shut down.
        """
        if self._closed:
            raise RuntimeError("Cannot submit to a thread pool after shutdown")
        return self._executor.submit(self._run_job, fn, args)

    @staticmethod
    def _run_job(fn: Callable[..., Any], args: tuple) -> Any:
        logger.debug(
            "Worker %s got a job; executing.", threading.current_thread().name
        )
        return fn(*args)

    def shutdown(self, cancel_pending: bool = False) -> None:
        """Stop accepting jobs and wait for in-flight ones to finish.

        Args:
            cancel_pending: Drop queued jobs that no worker has started yet.
                Their futures are marked cancelled.
        """
        if self._closed:
            return
        self._closed = True
        logger.info("Shutting down thread pool (%d workers)", self.size)
        self._executor.shutdown(wait=True, cancel_futures=cancel_pending)

    def __enter__(self) -> ThreadPool:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # An error in the with-block abandons the queued work
        self.shutdown(cancel_pending=exc_type is not None)
