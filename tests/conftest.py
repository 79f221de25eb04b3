"""
Shared pytest fixtures for the Trade Signals test suite.

Provides:
  - ``make_snapshot``: factory building a ``MarketSnapshot`` from plain
    price / volume lists.
  - Sample snapshots for common shapes (flat, rising, too short).
  - ``app_config``: a default ``AppConfig`` with dummy credentials.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

import pytest

from trade_signals.config import AppConfig, ExchangeConfig
from trade_signals.models.market import MarketSnapshot

SnapshotFactory = Callable[..., MarketSnapshot]


@pytest.fixture
def make_snapshot() -> SnapshotFactory:
    """Return a factory: ``make_snapshot(prices, volumes=None, symbol="BTCTRY")``.

    When ``volumes`` is omitted every candle gets volume 10.
    """

    def _make(
        prices: Sequence[float],
        volumes: Optional[Sequence[float]] = None,
        symbol: str = "BTCTRY",
    ) -> MarketSnapshot:
        if volumes is None:
            volumes = [10.0] * len(prices)
        return MarketSnapshot.from_series(symbol, list(prices), list(volumes))

    return _make


@pytest.fixture
def flat_snapshot(make_snapshot: SnapshotFactory) -> MarketSnapshot:
    """30 candles all closing at 100 with constant volume."""
    return make_snapshot([100.0] * 30)


@pytest.fixture
def rising_snapshot(make_snapshot: SnapshotFactory) -> MarketSnapshot:
    """20 candles closing 1..20 with a volume spike on the last bar."""
    prices = [float(p) for p in range(1, 21)]
    volumes = [10.0] * 19 + [100.0]
    return make_snapshot(prices, volumes)


@pytest.fixture
def short_snapshot(make_snapshot: SnapshotFactory) -> MarketSnapshot:
    """10 candles — below the 20-candle minimum."""
    return make_snapshot([100.0 + i for i in range(10)])


@pytest.fixture
def app_config() -> AppConfig:
    """Default configuration with dummy credentials."""
    return AppConfig(
        exchange=ExchangeConfig(api_key="test-key", api_secret="c2VjcmV0"),
    )
