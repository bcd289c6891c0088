# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Round scheduling: single-shot or periodic probing of the full target set."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from enum import Enum

from ..errors import ConfigError, WorkerPoolError
from ..models.probe import Job, ProbeResult, ProbeTarget
from ..models.stats import StatsRecord
from .pool import DEFAULT_POLL_INTERVAL, WorkerPool
from .stats import StatsAggregator

logger = logging.getLogger(__name__)

ResultSink = Callable[[ProbeResult], None]
RoundCallback = Callable[[int, list[StatsRecord]], None]


class SchedulerState(str, Enum):
    IDLE = "IDLE"
    RUNNING_ROUND = "RUNNING_ROUND"
    DRAINING = "DRAINING"
    AWAITING_NEXT_PERIOD = "AWAITING_NEXT_PERIOD"
    TERMINATED = "TERMINATED"


class RoundScheduler:
    """
    Drives rounds over a WorkerPool from the calling (coordinator) thread.

    A round enqueues one Job per target and collects exactly that many
    results; every result reaches the aggregator and the sink before the
    round is considered drained, so rounds never overlap. With a `period`,
    the next round is due `period` seconds after the previous round started;
    an overdue round starts immediately rather than queueing up. Cancellation
    never abandons a round that has been dispatched.
    """

    def __init__(
        self,
        pool: WorkerPool,
        targets: Sequence[ProbeTarget],
        *,
        period: float | None = None,
        aggregator: StatsAggregator | None = None,
        sink: ResultSink | None = None,
        on_round_complete: RoundCallback | None = None,
        max_rounds: int | None = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ):
        if period is not None and period <= 0:
            raise ConfigError(f"period must be positive when set, got {period}")
        self.pool = pool
        self.cancel = pool.cancel
        self.targets = tuple(targets)
        self.period = period
        self.aggregator = aggregator if aggregator is not None else StatsAggregator()
        self.sink = sink
        self.on_round_complete = on_round_complete
        self.max_rounds = max_rounds
        self.poll_interval = poll_interval
        self._clock = clock

        self.state = SchedulerState.IDLE
        self.history: list[SchedulerState] = [SchedulerState.IDLE]
        self.round_id = 0
        self.rounds_completed = 0

    def run(self) -> int:
        """Run until single-shot completion, `max_rounds`, or cancellation. Returns completed rounds."""
        if self.state == SchedulerState.TERMINATED:
            raise RuntimeError("RoundScheduler already terminated")
        self.pool.start()
        try:
            while not self.cancel.is_cancelled:
                round_started = self._clock()
                self._run_round()
                if self.period is None or self._reached_max_rounds():
                    break
                if not self._await_next_period(round_started):
                    break
        except BaseException:
            self.pool.abort()
            raise
        finally:
            self._transition(SchedulerState.TERMINATED)
            self.pool.shutdown()
        logger.info("Terminated after %d round(s)", self.rounds_completed)
        return self.rounds_completed

    def _reached_max_rounds(self) -> bool:
        return self.max_rounds is not None and self.rounds_completed >= self.max_rounds

    def _run_round(self) -> None:
        self.round_id += 1
        round_id = self.round_id
        self._transition(SchedulerState.RUNNING_ROUND)

        dispatched = 0
        for target in self.targets:
            if self.cancel.is_cancelled:
                logger.info(
                    "Cancellation observed; %d of %d targets not dispatched in round %d",
                    len(self.targets) - dispatched,
                    len(self.targets),
                    round_id,
                )
                break
            self.pool.submit(Job(target=target, round_id=round_id))
            dispatched += 1

        received = 0
        while received < dispatched:
            result = self.pool.next_result(timeout=self.poll_interval)
            if result is None:
                continue
            if result.round_id != round_id:
                raise WorkerPoolError(f"result for round {result.round_id} received while draining round {round_id}")
            received += 1
            self._deliver(result)

        self._transition(SchedulerState.DRAINING)
        self.rounds_completed += 1
        logger.debug("Round %d drained: %d result(s)", round_id, received)
        if self.on_round_complete is not None:
            self.on_round_complete(round_id, self.aggregator.snapshot())

    def _deliver(self, result: ProbeResult) -> None:
        self.aggregator.update(result)
        if self.sink is not None:
            self.sink(result)

    def _await_next_period(self, round_started: float) -> bool:
        """Wait for the next period; return False if cancelled meanwhile."""
        period = self.period or 0.0
        self._transition(SchedulerState.AWAITING_NEXT_PERIOD)
        remaining = round_started + period - self._clock()
        if remaining <= 0:
            logger.warning(
                "Round %d took longer than the %gs period; starting the next round immediately",
                self.round_id,
                period,
            )
            return not self.cancel.is_cancelled
        return not self.cancel.wait(remaining)

    def _transition(self, state: SchedulerState) -> None:
        if state == self.state:
            return
        logger.debug("Scheduler %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)


__all__ = ["ResultSink", "RoundCallback", "RoundScheduler", "SchedulerState"]
