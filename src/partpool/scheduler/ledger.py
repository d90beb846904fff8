"""Authoritative record of every part's last known outcome."""

from __future__ import annotations

import logging
import threading
from dataclasses import replace

from partpool.scheduler.models import (
    LedgerSnapshot,
    LedgerStateError,
    Part,
    PartNotFoundError,
    PartOutcome,
)

logger = logging.getLogger(__name__)


class PartLedger:
    """Ordered part collection with run gating.

    Part ids are ``0..n-1`` in insertion order. ``uploading`` is scoped to the
    active run: it stays true while any part handed out by ``begin_run`` has
    no recorded outcome yet, and ``end_run`` always clears it.
    """

    def __init__(self) -> None:
        self._parts: list[Part] = []
        self._outstanding: set[int] = set()
        self._uploading = False
        self._lock = threading.Lock()

    @property
    def uploading(self) -> bool:
        return self._uploading

    def __len__(self) -> int:
        return len(self._parts)

    def initialize(self, total: int) -> None:
        """Replace all parts with ``total`` fresh unresolved parts."""

        if total < 0:
            raise ValueError(f"Part count must be >= 0, got {total}.")
        with self._lock:
            if self._uploading:
                raise LedgerStateError("Cannot initialize the ledger while a run is active.")
            self._parts = [Part(part_id=part_id) for part_id in range(total)]
            self._outstanding = set()
        logger.info("Ledger initialized with %d parts", total)

    def begin_run(self) -> list[int]:
        """Reset failed parts for retry and return the ids the pool must process."""

        with self._lock:
            if self._uploading:
                raise LedgerStateError("A run is already active.")
            reset = 0
            for part in self._parts:
                if part.outcome is PartOutcome.FAILED:
                    part.outcome = PartOutcome.UNRESOLVED
                    reset += 1
            pending = [
                part.part_id for part in self._parts if part.outcome is PartOutcome.UNRESOLVED
            ]
            self._outstanding = set(pending)
            self._uploading = bool(pending)
        logger.info("Run started: %d pending parts (%d reset from failed)", len(pending), reset)
        return pending

    def record_success(self, part_id: int) -> None:
        self._record(part_id, PartOutcome.SUCCEEDED)

    def record_failure(self, part_id: int) -> None:
        self._record(part_id, PartOutcome.FAILED)

    def end_run(self) -> None:
        """Close the active run; parts that never started stay unresolved."""

        with self._lock:
            leftover = len(self._outstanding)
            self._outstanding = set()
            self._uploading = False
        if leftover:
            logger.info("Run closed with %d parts left unresolved", leftover)

    def pending(self) -> list[int]:
        return self._ids_with(PartOutcome.UNRESOLVED)

    def failed(self) -> list[int]:
        return self._ids_with(PartOutcome.FAILED)

    def succeeded(self) -> list[int]:
        return self._ids_with(PartOutcome.SUCCEEDED)

    def done_count(self) -> int:
        with self._lock:
            return sum(1 for part in self._parts if part.outcome is not PartOutcome.UNRESOLVED)

    def outcome_of(self, part_id: int) -> PartOutcome:
        with self._lock:
            return self._get(part_id).outcome

    def parts(self) -> list[Part]:
        """Return copies of all parts in id order."""

        with self._lock:
            return [replace(part) for part in self._parts]

    def snapshot(self) -> LedgerSnapshot:
        with self._lock:
            return LedgerSnapshot(
                outcomes=tuple(part.outcome for part in self._parts),
                uploading=self._uploading,
            )

    def _record(self, part_id: int, outcome: PartOutcome) -> None:
        with self._lock:
            part = self._get(part_id)
            if part.outcome is not PartOutcome.UNRESOLVED:
                raise LedgerStateError(
                    f"Part {part_id} is already {part.outcome.value}; "
                    f"refusing to record {outcome.value}.",
                )
            if part_id not in self._outstanding:
                raise LedgerStateError(
                    f"Part {part_id} is not outstanding in an active run; "
                    f"refusing to record {outcome.value}.",
                )
            part.outcome = outcome
            self._outstanding.discard(part_id)
            self._uploading = bool(self._outstanding)

    def _get(self, part_id: int) -> Part:
        if not 0 <= part_id < len(self._parts):
            raise PartNotFoundError(part_id)
        return self._parts[part_id]

    def _ids_with(self, outcome: PartOutcome) -> list[int]:
        with self._lock:
            return [part.part_id for part in self._parts if part.outcome is outcome]
