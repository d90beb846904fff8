"""Use-case service wiring the ledger to the worker pool."""

from __future__ import annotations

import logging
import time

from partpool.scheduler.ledger import PartLedger
from partpool.scheduler.models import PartOutcome, RunSummary
from partpool.scheduler.pool import BoundedWorkerPool, WorkFn

logger = logging.getLogger(__name__)


class PartRunService:
    """Owns one ledger and drives retry passes through a bounded pool."""

    def __init__(self, *, ledger: PartLedger | None = None, limit: int = 5) -> None:
        self.ledger = ledger if ledger is not None else PartLedger()
        self.limit = limit
        self._pool: BoundedWorkerPool | None = None
        self._passes = 0

    def initialize(self, total: int) -> None:
        self.ledger.initialize(total)
        self._passes = 0

    def has_work(self) -> bool:
        """True when a pass can start and something is pending or failed."""

        if self.ledger.uploading:
            return False
        return bool(self.ledger.pending() or self.ledger.failed())

    def request_stop(self) -> None:
        if self._pool is not None:
            self._pool.request_stop()

    async def run_pass(self, work: WorkFn) -> RunSummary:
        """Process every part without a success; only failed ones on later passes."""

        # Validate the limit before the ledger is touched.
        pool = BoundedWorkerPool(self.limit)
        pending = self.ledger.begin_run()
        self._passes += 1
        summary = RunSummary(pass_no=self._passes, submitted=len(pending))

        def _on_outcome(part_id: int, outcome: PartOutcome) -> None:
            if outcome is PartOutcome.SUCCEEDED:
                self.ledger.record_success(part_id)
                summary.succeeded += 1
            else:
                self.ledger.record_failure(part_id)
                summary.failed += 1

        self._pool = pool
        started_at = time.monotonic()
        try:
            report = await pool.run(pending, work, _on_outcome)
        finally:
            self.ledger.end_run()
            self._pool = None
            summary.duration_seconds = time.monotonic() - started_at

        summary.not_started = len(report.not_started)
        summary.peak_in_flight = report.peak_in_flight
        logger.info(
            "Pass %d settled: submitted=%d succeeded=%d failed=%d not_started=%d",
            summary.pass_no,
            summary.submitted,
            summary.succeeded,
            summary.failed,
            summary.not_started,
        )
        return summary
