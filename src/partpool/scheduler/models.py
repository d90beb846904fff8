"""Domain models for the part ledger and worker pool."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class PartOutcome(str, Enum):
    """Last known outcome of one part."""

    UNRESOLVED = "unresolved"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class PartState(str, Enum):
    """Per-item scheduling state inside one pool run."""

    NOT_STARTED = "not_started"
    IN_FLIGHT = "in_flight"
    COMPLETED = "completed"


class PoolState(str, Enum):
    """Worker pool lifecycle for a single run."""

    IDLE = "idle"
    RUNNING = "running"
    DRAINED = "drained"


class SchedulerError(Exception):
    """Base class for integration defects in ledger or pool usage."""


class LedgerStateError(SchedulerError):
    """Ledger mutation attempted in a state that does not allow it."""


class PartNotFoundError(LedgerStateError, LookupError):
    """Outcome recorded for a part id that the ledger does not hold."""

    def __init__(self, part_id: int) -> None:
        super().__init__(f"Part {part_id} is not in the ledger.")
        self.part_id = part_id


class PoolContractError(SchedulerError):
    """Worker pool invoked with invalid arguments or inconsistent bookkeeping."""


@dataclass(slots=True)
class Part:
    """One independently retryable unit of work."""

    part_id: int
    outcome: PartOutcome = PartOutcome.UNRESOLVED


@dataclass(frozen=True, slots=True)
class LedgerSnapshot:
    """Immutable view of ledger state for rendering."""

    outcomes: tuple[PartOutcome, ...]
    uploading: bool

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def pending_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome is PartOutcome.UNRESOLVED)

    @property
    def failed_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome is PartOutcome.FAILED)

    @property
    def succeeded_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome is PartOutcome.SUCCEEDED)

    @property
    def done_count(self) -> int:
        return self.total - self.pending_count


@dataclass(slots=True)
class RunReport:
    """Pool-level result of one run."""

    completed: list[int] = field(default_factory=list)
    not_started: list[int] = field(default_factory=list)
    peak_in_flight: int = 0


@dataclass(slots=True)
class RunSummary:
    """Aggregate counters of one pass for CLI reporting."""

    pass_no: int
    submitted: int = 0
    succeeded: int = 0
    failed: int = 0
    not_started: int = 0
    peak_in_flight: int = 0
    duration_seconds: float = 0.0
