"""Simulated unreliable remote call used as the demo work function."""

from __future__ import annotations

import asyncio
import logging
import math
import random

logger = logging.getLogger(__name__)


class SimulatedRequestError(Exception):
    """Raised when a simulated request fails."""

    def __init__(self, part_id: int) -> None:
        super().__init__(f"Simulated request for part {part_id} failed.")
        self.part_id = part_id


class SimulatedRemoteCall:
    """Sleeps a random 1..max_delay_ms and fails ``fail_rate`` percent of the time."""

    def __init__(
        self,
        *,
        max_delay_ms: int = 100,
        fail_rate: int = 20,
        rng: random.Random | None = None,
    ) -> None:
        if max_delay_ms < 1:
            raise ValueError(f"max_delay_ms must be >= 1, got {max_delay_ms}.")
        if not 0 <= fail_rate <= 100:  # noqa: PLR2004
            raise ValueError(f"fail_rate must be within 0..100, got {fail_rate}.")
        self.max_delay_ms = max_delay_ms
        self.fail_rate = fail_rate
        self._random = rng or random.Random()  # noqa: S311

    async def __call__(self, part_id: int) -> None:
        delay_ms = math.ceil(self._random.random() * self.max_delay_ms) or 1
        succeeded = self._random.random() * 100 >= self.fail_rate
        logger.debug("Starting part %d, delayed by %d ms", part_id, delay_ms)
        await asyncio.sleep(delay_ms / 1000)
        if not succeeded:
            raise SimulatedRequestError(part_id)
