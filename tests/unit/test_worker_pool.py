# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import threading
import time
from collections import Counter

import pytest

from sitecheck.cancel import CancellationToken
from sitecheck.errors import ConfigError, WorkerPoolError
from sitecheck.http.models import HttpResponse
from sitecheck.models.probe import Job, OutcomeKind, ProbeTarget
from sitecheck.monitor import WorkerPool
from sitecheck.probe import RetryingProbe, RetryPolicy


class ConcurrencyTrackingClient:
    def __init__(self, delay=0.02):
        self.delay = delay
        self.active = 0
        self.max_active = 0
        self.calls = 0
        self._lock = threading.Lock()

    def request(self, request):
        with self._lock:
            self.active += 1
            self.calls += 1
            self.max_active = max(self.max_active, self.active)
        try:
            time.sleep(self.delay)
            return HttpResponse(ok=True, status_code=200, url=request.url)
        finally:
            with self._lock:
                self.active -= 1


def _jobs(count, round_id=1):
    return [Job(target=ProbeTarget(url=f"http://site.test/ok{i}"), round_id=round_id) for i in range(count)]


def test_fifty_targets_with_eight_workers_yield_fifty_results():
    client = ConcurrencyTrackingClient()
    pool = WorkerPool(RetryingProbe(client, retry_policy=RetryPolicy(max_retries=0)), worker_count=8)
    results = []

    delivered = pool.run(_jobs(50), results.append)

    assert delivered == 50
    assert len(results) == 50
    counts = Counter(result.url for result in results)
    assert len(counts) == 50
    assert set(counts.values()) == {1}
    assert all(result.outcome.kind == OutcomeKind.SUCCESS for result in results)
    assert client.calls == 50
    assert 1 < client.max_active <= 8
    assert pool.is_running is False


def test_cancelled_pool_resolves_jobs_without_probing():
    client = ConcurrencyTrackingClient(delay=0)
    cancel = CancellationToken()
    cancel.cancel("test")
    pool = WorkerPool(RetryingProbe(client), worker_count=3, cancel=cancel)
    results = []

    pool.run(_jobs(10, round_id=7), results.append)

    assert len(results) == 10
    assert client.calls == 0
    assert all(result.outcome.is_cancelled for result in results)
    assert all(result.outcome.kind == OutcomeKind.TRANSPORT_ERROR for result in results)
    assert all(result.attempts == 1 and result.round_id == 7 for result in results)


def test_worker_crash_fails_the_run_loudly():
    class CrashingProbe:
        def probe(self, target, *, round_id=0, cancel=None):
            raise ZeroDivisionError("bug in probe")

    pool = WorkerPool(CrashingProbe(), worker_count=2)

    with pytest.raises(WorkerPoolError) as excinfo:
        pool.run(_jobs(5), lambda result: None)

    assert isinstance(excinfo.value.__cause__, ZeroDivisionError)
    assert pool.is_running is False


def test_pool_lifecycle_via_context_manager():
    client = ConcurrencyTrackingClient(delay=0)
    with WorkerPool(RetryingProbe(client), worker_count=2) as pool:
        for job in _jobs(3):
            pool.submit(job)
        received = []
        while len(received) < 3:
            result = pool.next_result(timeout=1.0)
            if result is not None:
                received.append(result)
        assert pool.next_result(timeout=0.01) is None

    assert pool.is_running is False
    with pytest.raises(RuntimeError):
        pool.submit(_jobs(1)[0])
    with pytest.raises(RuntimeError):
        pool.start()


def test_worker_count_must_be_positive():
    with pytest.raises(ConfigError):
        WorkerPool(RetryingProbe(ConcurrencyTrackingClient()), worker_count=0)


def test_shutdown_is_idempotent():
    pool = WorkerPool(RetryingProbe(ConcurrencyTrackingClient()), worker_count=2)
    pool.start()
    pool.shutdown()
    pool.shutdown()
    assert pool.is_running is False
