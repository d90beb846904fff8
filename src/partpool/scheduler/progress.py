"""Plain-text progress rendering for ledger snapshots."""

from __future__ import annotations

import math

from partpool.scheduler.models import LedgerSnapshot, PartOutcome, RunSummary

_SYMBOLS = {
    PartOutcome.SUCCEEDED: "#",
    PartOutcome.FAILED: "x",
    PartOutcome.UNRESOLVED: ".",
}


def progress_percent(snapshot: LedgerSnapshot) -> int:
    if not snapshot.total:
        return 0
    return math.ceil(snapshot.done_count / snapshot.total * 100)


def render_progress_lines(snapshot: LedgerSnapshot, width: int | None = None) -> list[str]:
    """Render a header line and a one-symbol-per-part bar.

    With ``width`` smaller than the part count, each column covers a slice of
    parts and shows the worst outcome in it (failed, then unresolved).
    """

    if not snapshot.total:
        return ["No parts initialized."]
    return [
        f"Progress ({progress_percent(snapshot)}%) ({snapshot.failed_count} failed):",
        _render_bar(snapshot.outcomes, width),
    ]


def render_summary_lines(summary: RunSummary) -> list[str]:
    lines = [
        f"Pass {summary.pass_no}: submitted={summary.submitted} "
        f"succeeded={summary.succeeded} failed={summary.failed} "
        f"peak_in_flight={summary.peak_in_flight} duration={summary.duration_seconds:.2f}s",
    ]
    if summary.not_started:
        lines.append(f"Stopped early: {summary.not_started} parts were not started.")
    return lines


def _render_bar(outcomes: tuple[PartOutcome, ...], width: int | None) -> str:
    total = len(outcomes)
    if width is None or width >= total:
        return "".join(_SYMBOLS[outcome] for outcome in outcomes)
    if width < 1:
        raise ValueError(f"Bar width must be >= 1, got {width}.")
    columns = []
    for column in range(width):
        chunk = outcomes[column * total // width : (column + 1) * total // width]
        if PartOutcome.FAILED in chunk:
            columns.append(_SYMBOLS[PartOutcome.FAILED])
        elif PartOutcome.UNRESOLVED in chunk:
            columns.append(_SYMBOLS[PartOutcome.UNRESOLVED])
        else:
            columns.append(_SYMBOLS[PartOutcome.SUCCEEDED])
    return "".join(columns)
