"""Shared test fixtures."""

from __future__ import annotations

import os

import pytest

from partpool.scheduler.ledger import PartLedger


@pytest.fixture(autouse=True)
def _clean_partpool_env(monkeypatch):
    """Keep PARTPOOL_* variables from the host out of tests."""
    for name in list(os.environ):
        if name.startswith("PARTPOOL_"):
            monkeypatch.delenv(name)


@pytest.fixture()
def ledger() -> PartLedger:
    return PartLedger()
