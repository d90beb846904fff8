"""CLI entrypoint for partpool."""

import rich_click as click

from partpool import __version__
from partpool.config import LOG_LEVELS, Settings
from partpool.scheduler.controllers import PartRunCommand, PartsCliController
from partpool.scheduler.models import SchedulerError

click.rich_click.USE_MARKDOWN = True
PARTS_CONTROLLER = PartsCliController()


@click.group()
@click.version_option(version=__version__, prog_name="partpool")
def partpool() -> None:
    """Bounded-concurrency part runner with retry of failed parts."""

    try:
        settings = Settings.from_env()
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    if settings.log_level in LOG_LEVELS:
        settings.configure_logging()


@partpool.command("run")
@click.option(
    "--parts",
    type=click.IntRange(min=0),
    default=None,
    help="How many parts to initialize. Defaults to PARTPOOL_TOTAL_PARTS or 500.",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum parts in flight. Defaults to PARTPOOL_WORKER_POOL or 5.",
)
@click.option(
    "--max-delay-ms",
    type=click.IntRange(min=1),
    default=None,
    help="Upper bound of the simulated request delay.",
)
@click.option(
    "--fail-rate",
    type=click.IntRange(min=0, max=100),
    default=None,
    help="Percent chance that a simulated request fails.",
)
@click.option("--seed", type=int, default=None, help="Random seed for reproducible runs.")
@click.option(
    "--bar-width",
    type=click.IntRange(min=1),
    default=None,
    help="Squeeze the progress bar into this many columns.",
)
def run_parts(  # noqa: PLR0913
    parts: int | None,
    workers: int | None,
    max_delay_ms: int | None,
    fail_rate: int | None,
    seed: int | None,
    bar_width: int | None,
) -> None:
    """Process parts with a bounded pool; offer to retry the failed ones after each pass."""

    try:
        result = PARTS_CONTROLLER.run(
            PartRunCommand(
                parts=parts,
                workers=workers,
                max_delay_ms=max_delay_ms,
                fail_rate=fail_rate,
                seed=seed,
                bar_width=bar_width,
            ),
            emit=click.echo,
            confirm_retry=_confirm_retry,
        )
    except (SchedulerError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(
        f"Settled after {result.passes} passes: "
        f"succeeded={result.succeeded} failed={result.failed} pending={result.pending}",
    )
    if not result.success:
        raise click.ClickException(f"{result.failed + result.pending} parts did not succeed.")


def _confirm_retry(failed: int) -> bool:
    return click.confirm(f"Retry {failed} failed parts?", default=False)


if __name__ == "__main__":  # pragma: no cover
    partpool()
