from __future__ import annotations

import allure
import pytest

from partpool.config import PoolSettings, Settings, SimulatorSettings

pytestmark = [
    allure.epic("Part Runner"),
    allure.feature("Configuration"),
]


def test_defaults_match_demo_constants() -> None:
    settings = Settings.from_env()

    assert settings.pool.total_parts == 500
    assert settings.pool.worker_pool == 5
    assert settings.simulator.max_delay_ms == 100
    assert settings.simulator.fail_rate == 20
    assert settings.simulator.seed is None
    assert settings.log_level == "WARNING"
    settings.validate()


def test_from_env_reads_partpool_variables(monkeypatch) -> None:
    monkeypatch.setenv("PARTPOOL_TOTAL_PARTS", "12")
    monkeypatch.setenv("PARTPOOL_WORKER_POOL", "3")
    monkeypatch.setenv("PARTPOOL_MAX_DELAY_MS", "7")
    monkeypatch.setenv("PARTPOOL_FAIL_RATE", "0")
    monkeypatch.setenv("PARTPOOL_SEED", "99")
    monkeypatch.setenv("PARTPOOL_LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.pool == PoolSettings(total_parts=12, worker_pool=3)
    assert settings.simulator == SimulatorSettings(max_delay_ms=7, fail_rate=0, seed=99)
    assert settings.log_level == "DEBUG"


def test_blank_variables_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("PARTPOOL_WORKER_POOL", "  ")
    monkeypatch.setenv("PARTPOOL_SEED", "")

    settings = Settings.from_env()

    assert settings.pool.worker_pool == 5
    assert settings.simulator.seed is None


def test_non_integer_variable_names_the_variable(monkeypatch) -> None:
    monkeypatch.setenv("PARTPOOL_WORKER_POOL", "many")

    with pytest.raises(ValueError, match="PARTPOOL_WORKER_POOL must be an integer"):
        Settings.from_env()


@pytest.mark.parametrize(
    ("settings", "message"),
    [
        (Settings(pool=PoolSettings(total_parts=-1)), "PARTPOOL_TOTAL_PARTS"),
        (Settings(pool=PoolSettings(worker_pool=0)), "PARTPOOL_WORKER_POOL"),
        (Settings(simulator=SimulatorSettings(max_delay_ms=0)), "PARTPOOL_MAX_DELAY_MS"),
        (Settings(simulator=SimulatorSettings(fail_rate=101)), "PARTPOOL_FAIL_RATE"),
        (Settings(log_level="LOUD"), "PARTPOOL_LOG_LEVEL"),
    ],
)
def test_validate_rejects_out_of_range_values(settings: Settings, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        settings.validate()
