"""Bounded worker pool that fans clone jobs out over a fixed number of threads.

One shared queue feeds W long-lived workers. The queue holds a single item,
so the producer blocks whenever every worker is busy. A completion barrier is
charged with one credit per job up front; each worker releases one credit as
soon as it finishes a job (cloned or skipped). The first fatal clone error
cancels the pool: the producer stops, idle workers drain the queue without
starting new clones, and `run` raises FatalCloneError.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from .constants import DEFAULT_CONCURRENCY
from .git_client import CloneError
from .types import CloneOutcome, RepositoryJob

logger = logging.getLogger(__name__)

_CLOSED = object()


class FatalCloneError(RuntimeError):
    def __init__(self, job: RepositoryJob, cause: BaseException) -> None:
        super().__init__(f"{job.full_name}: {cause}")
        self.job = job
        self.cause = cause


class CompletionBarrier:
    """Wait-group: block until every charged credit is released, or until aborted."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._pending = 0
        self._aborted = False

    @property
    def pending(self) -> int:
        with self._cond:
            return self._pending

    def add(self, n: int) -> None:
        with self._cond:
            self._pending += n

    def done(self) -> None:
        with self._cond:
            if self._pending <= 0:
                raise ValueError("CompletionBarrier released more times than charged")
            self._pending -= 1
            if self._pending == 0:
                self._cond.notify_all()

    def abort(self) -> None:
        with self._cond:
            self._aborted = True
            self._cond.notify_all()

    def wait(self) -> bool:
        """Return True once all credits are released, False if aborted first."""
        with self._cond:
            self._cond.wait_for(lambda: self._pending == 0 or self._aborted)
            return self._pending == 0


@dataclass
class DispatchReport:
    cloned: list[RepositoryJob] = field(default_factory=list)
    skipped: list[RepositoryJob] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.cloned) + len(self.skipped)


class CloneDispatcher:
    def __init__(
        self,
        clone: Callable[[RepositoryJob], None],
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        self.clone = clone
        self.concurrency = concurrency

    def run(self, jobs: Iterable[RepositoryJob]) -> DispatchReport:
        jobs = list(jobs)
        report = DispatchReport()
        jobs_q: queue.Queue = queue.Queue(maxsize=1)
        barrier = CompletionBarrier()
        cancelled = threading.Event()
        lock = threading.Lock()
        fatal: list[FatalCloneError] = []

        def record(job: RepositoryJob, outcome: CloneOutcome) -> None:
            with lock:
                (report.cloned if outcome is CloneOutcome.cloned else report.skipped).append(job)

        def fail(job: RepositoryJob, exc: BaseException) -> None:
            with lock:
                if not fatal:
                    fatal.append(FatalCloneError(job, exc))
            logger.error("Failed to clone %s: %s", job.full_name, exc)
            cancelled.set()
            barrier.abort()

        def worker() -> None:
            while True:
                job = jobs_q.get()
                if job is _CLOSED:
                    return
                if cancelled.is_set():
                    continue
                logger.info("Working on: %s", job.name)
                try:
                    self.clone(job)
                except CloneError as e:
                    if not e.already_exists:
                        fail(job, e)
                        continue
                    logger.warning("%s", e)
                    record(job, CloneOutcome.skipped)
                except Exception as e:
                    fail(job, e)
                    continue
                else:
                    record(job, CloneOutcome.cloned)
                barrier.done()

        barrier.add(len(jobs))
        threads = [
            threading.Thread(target=worker, name=f"clone-worker-{i}", daemon=True)
            for i in range(self.concurrency)
        ]
        for t in threads:
            t.start()

        for job in jobs:
            if cancelled.is_set():
                break
            jobs_q.put(job)
        for _ in threads:
            jobs_q.put(_CLOSED)

        barrier.wait()
        for t in threads:
            t.join()

        if fatal:
            raise fatal[0]
        return report
