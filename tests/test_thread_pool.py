"""Unit tests for the worker pool."""

import logging
import threading

import pytest


class TestPoolCreation:
    """Tests for pool construction."""

    @pytest.mark.parametrize("size", [0, -3])
    def test_invalid_size(self, size):
        from pathtracer.core.thread_pool import PoolCreationError, ThreadPool

        with pytest.raises(PoolCreationError, match=f"{size} threads"):
            ThreadPool(size)

    def test_error_is_value_error(self):
        from pathtracer.core.thread_pool import PoolCreationError

        assert issubclass(PoolCreationError, ValueError)

    def test_creation_logged(self, caplog):
        from pathtracer.core.thread_pool import ThreadPool

        with caplog.at_level(logging.INFO, logger="pathtracer.core.thread_pool"):
            with ThreadPool(3) as pool:
                assert pool.size == 3

        messages = [r.getMessage() for r in caplog.records]
        assert "Creating thread pool with 3 workers" in messages
        assert any("Shutting down" in m for m in messages)


class TestPoolJobs:
    """Tests for job execution."""

    def test_results(self):
        from pathtracer.core.thread_pool import ThreadPool

        with ThreadPool(4) as pool:
            futures = [pool.submit(pow, 2, n) for n in range(8)]
        assert [f.result() for f in futures] == [1, 2, 4, 8, 16, 32, 64, 128]

    def test_jobs_run_on_worker_threads(self):
        from pathtracer.core.thread_pool import ThreadPool

        with ThreadPool(2) as pool:
            names = [pool.submit(lambda: threading.current_thread().name) for _ in range(4)]
        assert all(f.result().startswith("pathtracer-worker") for f in names)

    def test_shutdown_waits_for_jobs(self):
        from pathtracer.core.thread_pool import ThreadPool

        started = threading.Event()
        release = threading.Event()
        done = []

        def job():
            started.set()
            release.wait(timeout=5)
            done.append(True)

        pool = ThreadPool(1)
        pool.submit(job)
        started.wait(timeout=5)
        release.set()
        pool.shutdown()
        assert done == [True]

    def test_submit_after_shutdown(self):
        from pathtracer.core.thread_pool import ThreadPool

        pool = ThreadPool(1)
        pool.shutdown()
        pool.shutdown()
        with pytest.raises(RuntimeError, match="after shutdown"):
            pool.submit(print)

    def test_job_exception_reaches_future(self):
        from pathtracer.core.thread_pool import ThreadPool

        def fail():
            raise ZeroDivisionError("boom")

        with ThreadPool(2) as pool:
            future = pool.submit(fail)
        with pytest.raises(ZeroDivisionError, match="boom"):
            future.result()

    def test_error_in_block_cancels_queued_jobs(self):
        from pathtracer.core.thread_pool import ThreadPool

        started = threading.Event()
        release = threading.Event()

        def blocker():
            started.set()
            release.wait(timeout=5)

        with pytest.raises(KeyError):
            with ThreadPool(1) as pool:
                running = pool.submit(blocker)
                queued = [pool.submit(pow, 2, n) for n in range(4)]
                started.wait(timeout=5)
                threading.Timer(0.2, release.set).start()
                raise KeyError("abandon")

        assert running.done() and not running.cancelled()
        assert all(f.cancelled() for f in queued)

    def test_clean_exit_runs_queued_jobs(self):
        from pathtracer.core.thread_pool import ThreadPool

        with ThreadPool(1) as pool:
            futures = [pool.submit(pow, 3, n) for n in range(4)]
        assert not any(f.cancelled() for f in futures)
        assert [f.result() for f in futures] == [1, 3, 9, 27]
