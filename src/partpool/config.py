"""Runtime configuration for the part runner."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(slots=True)
class PoolSettings:
    """Batch size and concurrency settings."""

    total_parts: int = 500
    worker_pool: int = 5


@dataclass(slots=True)
class SimulatorSettings:
    """Simulated remote call settings."""

    max_delay_ms: int = 100
    fail_rate: int = 20
    seed: int | None = None


@dataclass(slots=True)
class Settings:
    """Application settings grouped by concern."""

    pool: PoolSettings = field(default_factory=PoolSettings)
    simulator: SimulatorSettings = field(default_factory=SimulatorSettings)
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from ``PARTPOOL_*`` environment variables."""

        return cls(
            pool=PoolSettings(
                total_parts=_env_int("PARTPOOL_TOTAL_PARTS", 500),
                worker_pool=_env_int("PARTPOOL_WORKER_POOL", 5),
            ),
            simulator=SimulatorSettings(
                max_delay_ms=_env_int("PARTPOOL_MAX_DELAY_MS", 100),
                fail_rate=_env_int("PARTPOOL_FAIL_RATE", 20),
                seed=_env_optional_int("PARTPOOL_SEED"),
            ),
            log_level=os.getenv("PARTPOOL_LOG_LEVEL", "WARNING").strip().upper(),
        )

    def validate(self) -> None:
        """Raise configuration error for out-of-range values."""

        if self.pool.total_parts < 0:
            raise ValueError("PARTPOOL_TOTAL_PARTS must be >= 0.")
        if self.pool.worker_pool < 1:
            raise ValueError("PARTPOOL_WORKER_POOL must be a positive integer.")
        if self.simulator.max_delay_ms < 1:
            raise ValueError("PARTPOOL_MAX_DELAY_MS must be >= 1.")
        if not 0 <= self.simulator.fail_rate <= 100:  # noqa: PLR2004
            raise ValueError("PARTPOOL_FAIL_RATE must be within 0..100.")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(
                f"PARTPOOL_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}.",
            )

    def configure_logging(self) -> None:
        logging.basicConfig(
            level=getattr(logging, self.log_level),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def _env_int(name: str, default: int) -> int:
    value = _env_optional_int(name)
    return default if value is None else value


def _env_optional_int(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from exc
