"""Sliding-window worker pool over asyncio tasks."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence

from partpool.scheduler.models import (
    PartOutcome,
    PartState,
    PoolContractError,
    PoolState,
    RunReport,
)

logger = logging.getLogger(__name__)

WorkFn = Callable[[int], Awaitable[object]]
OutcomeHandler = Callable[[int, PartOutcome], None]


class BoundedWorkerPool:
    """Runs one async work call per item with at most ``limit`` in flight.

    A raised ``Exception`` from ``work`` marks the item failed and is never
    propagated. The outcome handler runs before the item's slot is released,
    and ``run`` returns only after every started item has been reported.
    Exceptions raised by the handler abort the run and reach the caller.
    """

    def __init__(self, limit: int) -> None:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise PoolContractError(f"Concurrency limit must be a positive integer, got {limit!r}.")
        self.limit = limit
        self._state = PoolState.IDLE
        self._item_states: dict[int, PartState] = {}
        self._in_flight = 0
        self._stop_requested = False
        self._report = RunReport()

    @property
    def state(self) -> PoolState:
        return self._state

    @property
    def in_flight(self) -> int:
        return self._in_flight

    def request_stop(self) -> None:
        """Stop starting new items; in-flight ones settle and are reported."""

        if self._state is PoolState.RUNNING and not self._stop_requested:
            logger.info("Stop requested with %d items in flight", self._in_flight)
        self._stop_requested = True

    async def run(
        self,
        items: Sequence[int],
        work: WorkFn,
        on_outcome: OutcomeHandler,
    ) -> RunReport:
        if self._state is PoolState.RUNNING:
            raise PoolContractError("Pool is already running.")
        submitted = list(items)
        if len(set(submitted)) != len(submitted):
            raise PoolContractError("Submitted items contain duplicate ids.")

        self._item_states = {part_id: PartState.NOT_STARTED for part_id in submitted}
        self._in_flight = 0
        self._stop_requested = False
        self._report = RunReport()
        self._state = PoolState.RUNNING
        started_at = time.monotonic()
        logger.info("Pool started: %d items, limit %d", len(submitted), self.limit)

        semaphore = asyncio.Semaphore(self.limit)
        try:
            async with asyncio.TaskGroup() as group:
                for part_id in submitted:
                    group.create_task(
                        self._run_one(part_id, semaphore, work, on_outcome),
                        name=f"part-{part_id}",
                    )
        except ExceptionGroup as errors:
            # Surface the first handler/bookkeeping error directly.
            raise errors.exceptions[0] from errors
        finally:
            self._state = PoolState.DRAINED

        report = self._report
        report.not_started = [
            part_id
            for part_id, state in self._item_states.items()
            if state is PartState.NOT_STARTED
        ]
        logger.info(
            "Pool drained in %.3fs: %d completed, %d not started, peak %d in flight",
            time.monotonic() - started_at,
            len(report.completed),
            len(report.not_started),
            report.peak_in_flight,
        )
        return report

    async def _run_one(
        self,
        part_id: int,
        semaphore: asyncio.Semaphore,
        work: WorkFn,
        on_outcome: OutcomeHandler,
    ) -> None:
        async with semaphore:
            if self._stop_requested:
                return
            self._start(part_id)
            try:
                await work(part_id)
            except Exception as exc:  # noqa: BLE001
                logger.debug("Part %d failed: %r", part_id, exc)
                outcome = PartOutcome.FAILED
            else:
                outcome = PartOutcome.SUCCEEDED
            self._complete(part_id, outcome, on_outcome)

    def _start(self, part_id: int) -> None:
        self._item_states[part_id] = PartState.IN_FLIGHT
        self._in_flight += 1
        self._report.peak_in_flight = max(self._report.peak_in_flight, self._in_flight)
        logger.debug("Part %d started (%d in flight)", part_id, self._in_flight)

    def _complete(self, part_id: int, outcome: PartOutcome, on_outcome: OutcomeHandler) -> None:
        # Bookkeeping guard; run() only completes items it just started.
        state = self._item_states.get(part_id)
        if state is not PartState.IN_FLIGHT:
            raise PoolContractError(
                f"Outcome for part {part_id} does not match an in-flight item (state={state}).",
            )
        on_outcome(part_id, outcome)
        self._item_states[part_id] = PartState.COMPLETED
        self._in_flight -= 1
        self._report.completed.append(part_id)
        logger.debug("Part %d finished: %s", part_id, outcome.value)
