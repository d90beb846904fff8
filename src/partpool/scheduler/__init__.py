"""Bounded worker pool and part ledger.

The ledger owns every part's last known outcome; the pool only sees ids, a
work function and an outcome callback. A pass is the explicit protocol
``ledger.begin_run()`` -> ``pool.run(pending, ...)`` -> ``ledger.end_run()``,
so a second pass retries exactly the failed parts.
"""

from partpool.scheduler.ledger import PartLedger
from partpool.scheduler.models import (
    LedgerSnapshot,
    LedgerStateError,
    Part,
    PartNotFoundError,
    PartOutcome,
    PoolContractError,
    RunReport,
    RunSummary,
    SchedulerError,
)
from partpool.scheduler.pool import BoundedWorkerPool
from partpool.scheduler.services import PartRunService

__all__ = [
    "BoundedWorkerPool",
    "LedgerSnapshot",
    "LedgerStateError",
    "Part",
    "PartLedger",
    "PartNotFoundError",
    "PartOutcome",
    "PartRunService",
    "PoolContractError",
    "RunReport",
    "RunSummary",
    "SchedulerError",
]
