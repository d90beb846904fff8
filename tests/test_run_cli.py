from __future__ import annotations

import allure
from click.testing import CliRunner

from partpool.main import partpool
from partpool.scheduler.controllers import PartRunCommand, PartsCliController

pytestmark = [
    allure.epic("Part Runner"),
    allure.feature("CLI"),
]


def test_run_cli_all_parts_succeed_without_prompting() -> None:
    runner = CliRunner()

    result = runner.invoke(
        partpool,
        ["run", "--parts", "8", "--workers", "3", "--max-delay-ms", "1", "--fail-rate", "0"],
    )

    assert result.exit_code == 0, result.output
    assert "Initialized 8 parts; processing at most 3 concurrently" in result.output
    assert "Progress (100%) (0 failed):" in result.output
    assert "########" in result.output
    assert "Retry" not in result.output
    assert "Settled after 1 passes: succeeded=8 failed=0 pending=0" in result.output


def test_run_cli_offers_retry_of_failed_parts_on_demand() -> None:
    runner = CliRunner()

    result = runner.invoke(
        partpool,
        ["run", "--parts", "4", "--max-delay-ms", "1", "--fail-rate", "100"],
        input="y\nn\n",
    )

    assert result.exit_code == 1
    assert result.output.count("Retry 4 failed parts?") == 2
    assert "Pass 2: submitted=4 succeeded=0 failed=4" in result.output
    assert "Settled after 2 passes: succeeded=0 failed=4 pending=0" in result.output
    assert "4 parts did not succeed." in result.output


def test_run_cli_with_zero_parts_has_nothing_to_do() -> None:
    runner = CliRunner()

    result = runner.invoke(partpool, ["run", "--parts", "0"])

    assert result.exit_code == 0, result.output
    assert "Settled after 0 passes" in result.output


def test_run_cli_reports_invalid_environment(monkeypatch) -> None:
    monkeypatch.setenv("PARTPOOL_WORKER_POOL", "lots")
    runner = CliRunner()

    result = runner.invoke(partpool, ["run", "--parts", "2"])

    assert result.exit_code == 1
    assert "PARTPOOL_WORKER_POOL must be an integer" in result.output


def test_run_cli_rejects_out_of_range_options() -> None:
    runner = CliRunner()

    result = runner.invoke(partpool, ["run", "--workers", "0"])

    assert result.exit_code == 2


def test_controller_uses_env_settings_and_seed(monkeypatch) -> None:
    monkeypatch.setenv("PARTPOOL_TOTAL_PARTS", "30")
    monkeypatch.setenv("PARTPOOL_MAX_DELAY_MS", "1")
    monkeypatch.setenv("PARTPOOL_FAIL_RATE", "50")
    controller = PartsCliController()

    def run_once() -> tuple[list[str], int]:
        lines: list[str] = []
        result = controller.run(
            PartRunCommand(seed=5),
            emit=lines.append,
            confirm_retry=lambda failed: False,
        )
        return lines, result.failed

    first_lines, first_failed = run_once()
    _, second_failed = run_once()

    assert first_failed == second_failed
    assert first_lines[0].startswith("Initialized 30 parts")
