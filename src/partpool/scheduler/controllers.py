"""Controllers for part runner CLI commands."""

from __future__ import annotations

import asyncio
import logging
import random
import signal
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from partpool.config import Settings
from partpool.scheduler.models import RunSummary
from partpool.scheduler.progress import render_progress_lines, render_summary_lines
from partpool.scheduler.services import PartRunService
from partpool.scheduler.simulator import SimulatedRemoteCall

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PartRunCommand:
    """CLI input for an interactive run over simulated parts."""

    parts: int | None = None
    workers: int | None = None
    max_delay_ms: int | None = None
    fail_rate: int | None = None
    seed: int | None = None
    bar_width: int | None = None


@dataclass(slots=True)
class PartRunResult:
    """Final counters to turn into an exit status."""

    passes: int
    succeeded: int
    failed: int
    pending: int

    @property
    def success(self) -> bool:
        return self.failed == 0 and self.pending == 0


class PartsCliController:
    """Initializes parts and runs passes until everything succeeds or the user stops."""

    def run(
        self,
        command: PartRunCommand,
        *,
        emit: Callable[[str], None],
        confirm_retry: Callable[[int], bool],
    ) -> PartRunResult:
        settings = _resolve_settings(command)
        simulator = SimulatedRemoteCall(
            max_delay_ms=settings.simulator.max_delay_ms,
            fail_rate=settings.simulator.fail_rate,
            rng=random.Random(settings.simulator.seed),  # noqa: S311
        )
        service = PartRunService(limit=settings.pool.worker_pool)
        service.initialize(settings.pool.total_parts)
        emit(
            f"Initialized {settings.pool.total_parts} parts; "
            f"processing at most {settings.pool.worker_pool} concurrently "
            f"with a {settings.simulator.fail_rate}% failure rate.",
        )

        passes = 0
        while service.has_work():
            summary = asyncio.run(_run_pass(service, simulator))
            passes += 1
            for line in _pass_lines(service, summary, command.bar_width):
                emit(line)
            if summary.not_started:
                break
            failed = len(service.ledger.failed())
            if not failed or not confirm_retry(failed):
                break

        snapshot = service.ledger.snapshot()
        return PartRunResult(
            passes=passes,
            succeeded=snapshot.succeeded_count,
            failed=snapshot.failed_count,
            pending=snapshot.pending_count,
        )


async def _run_pass(service: PartRunService, simulator: SimulatedRemoteCall) -> RunSummary:
    with _stop_on_signals(asyncio.get_running_loop(), service.request_stop):
        return await service.run_pass(simulator)


def _pass_lines(
    service: PartRunService,
    summary: RunSummary,
    bar_width: int | None,
) -> Iterator[str]:
    yield from render_summary_lines(summary)
    yield from render_progress_lines(service.ledger.snapshot(), width=bar_width)


def _resolve_settings(command: PartRunCommand) -> Settings:
    settings = Settings.from_env()
    if command.parts is not None:
        settings.pool.total_parts = command.parts
    if command.workers is not None:
        settings.pool.worker_pool = command.workers
    if command.max_delay_ms is not None:
        settings.simulator.max_delay_ms = command.max_delay_ms
    if command.fail_rate is not None:
        settings.simulator.fail_rate = command.fail_rate
    if command.seed is not None:
        settings.simulator.seed = command.seed
    settings.validate()
    return settings


@contextmanager
def _stop_on_signals(
    loop: asyncio.AbstractEventLoop,
    request_stop: Callable[[], None],
) -> Iterator[None]:
    installed: list[signal.Signals] = []

    def _handler(signum: signal.Signals) -> None:
        logger.warning("Received %s, letting in-flight parts settle", signum.name)
        request_stop()

    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, _handler, signum)
        except (NotImplementedError, RuntimeError, ValueError):
            # Unsupported platform or not the main thread.
            continue
        installed.append(signum)
    try:
        yield
    finally:
        for signum in installed:
            loop.remove_signal_handler(signum)
