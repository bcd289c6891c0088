# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Fixed-size thread pool that turns Jobs into ProbeResults."""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ..cancel import CancellationToken
from ..errors import ConfigError, WorkerPoolError
from ..models.probe import Job, ProbeResult
from ..probe.retry import RetryingProbe

logger = logging.getLogger(__name__)

_STOP = object()
DEFAULT_POLL_INTERVAL = 0.5


@dataclass(frozen=True)
class _WorkerFault:
    job: Job
    error: BaseException
    worker: str


class WorkerPool:
    """
    `worker_count` threads sharing one job queue and one results queue.

    Every job taken off the queue produces exactly one item on the results
    queue. Once cancellation is observed, dequeued jobs are resolved as
    cancelled without being probed; a probe already in flight is left to
    finish or time out on its own.
    """

    def __init__(
        self,
        probe: RetryingProbe,
        worker_count: int = 1,
        *,
        cancel: CancellationToken | None = None,
        name: str = "sitecheck-worker",
    ):
        if worker_count < 1:
            raise ConfigError(f"worker_count must be >= 1, got {worker_count}")
        self.probe = probe
        self.worker_count = worker_count
        self.cancel = cancel if cancel is not None else CancellationToken()
        self.name = name
        self._jobs: queue.Queue[object] = queue.Queue()
        self._results: queue.Queue[ProbeResult | _WorkerFault] = queue.Queue()
        self._threads: list[threading.Thread] = []
        self._abort = threading.Event()
        self._closed = False

    @property
    def is_running(self) -> bool:
        return any(thread.is_alive() for thread in self._threads)

    def start(self) -> None:
        if self._closed:
            raise RuntimeError("WorkerPool cannot be restarted after shutdown")
        if self._threads:
            return
        for index in range(self.worker_count):
            thread = threading.Thread(target=self._work, name=f"{self.name}-{index + 1}", daemon=True)
            thread.start()
            self._threads.append(thread)
        logger.debug("Started %d workers", self.worker_count)

    def submit(self, job: Job) -> None:
        if self._closed:
            raise RuntimeError("WorkerPool is shut down")
        self._jobs.put(job)

    def next_result(self, timeout: float | None = None) -> ProbeResult | None:
        """
        Return the next finished result, or None if none arrived within `timeout`.

        Raises WorkerPoolError if a worker crashed; the pool stops probing
        the remaining queued jobs.
        """
        try:
            item = self._results.get(timeout=timeout)
        except queue.Empty:
            return None
        if isinstance(item, _WorkerFault):
            self._abort.set()
            raise WorkerPoolError(
                f"worker {item.worker} failed while probing {item.job.target.url}: {item.error!r}"
            ) from item.error
        return item

    def abort(self) -> None:
        """Resolve any still-queued jobs as cancelled instead of probing them."""
        self._abort.set()

    def shutdown(self, wait: bool = True, timeout: float | None = None) -> None:
        """Close the queue behind any remaining jobs and join the workers."""
        if self._closed:
            return
        self._closed = True
        for _ in self._threads:
            self._jobs.put(_STOP)
        if not wait:
            return
        for thread in self._threads:
            thread.join(timeout)
            if thread.is_alive():
                logger.warning("Worker %s did not stop within %ss", thread.name, timeout)
        logger.debug("Worker pool shut down")

    def run(
        self,
        jobs: Iterable[Job],
        sink: Callable[[ProbeResult], None],
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> int:
        """Probe every job once, hand each result to `sink`, then shut down. Returns the result count."""
        pending = list(jobs)
        delivered = 0
        self.start()
        try:
            for job in pending:
                self.submit(job)
            while delivered < len(pending):
                result = self.next_result(timeout=poll_interval)
                if result is None:
                    continue
                delivered += 1
                sink(result)
        finally:
            if delivered < len(pending):
                self.abort()
            self.shutdown()
        return delivered

    def _work(self) -> None:
        worker = threading.current_thread().name
        while True:
            job = self._jobs.get()
            if job is _STOP:
                return
            try:
                if self.cancel.is_cancelled or self._abort.is_set():
                    result = ProbeResult.cancelled(job.target, round_id=job.round_id)
                else:
                    result = self.probe.probe(job.target, round_id=job.round_id, cancel=self.cancel)
            except Exception as exc:  # noqa: BLE001
                logger.exception("Worker %s crashed while probing %s", worker, job.target.url)
                self._results.put(_WorkerFault(job=job, error=exc, worker=worker))
                return
            self._results.put(result)

    def __enter__(self) -> "WorkerPool":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        if exc_type is not None:
            self.abort()
        self.shutdown()


__all__ = ["WorkerPool"]
