"""
Signal orchestrator — pick an evaluator, guard data sufficiency, never raise.

Flow
----
    MarketSnapshot ─► data check (≥ min_data_points candles)
                   ─► RSI(14) over closes
                   ─► evaluator chosen by strategy name
                   ─► Recommendation

Strategy selection:
    "turtle"    → turtle_signal(prices, current_price)
    "scalping"  → scalping_signal(prices, rsi, volumes)
    anything else (including "orb" and None) → orb_signal(prices, volumes)

``generate_signal()`` is pure: it works on data that has already been
fetched.  ``SignalService`` adds the fetch step on top, using a client and a
``SignalConfig`` handed to it at construction.

Both entry points always return a well-formed ``Recommendation``.  Short
input gives ``hold / 0 / "insufficient data"``; any exception gives
``hold / 0 / "error: <description>"``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Protocol

from trade_signals.models.market import MarketSnapshot
from trade_signals.models.recommendation import Recommendation
from trade_signals.signals.indicators import rsi
from trade_signals.signals.strategies import orb_signal, scalping_signal, turtle_signal

if TYPE_CHECKING:
    from trade_signals.config import SignalConfig

logger = logging.getLogger(__name__)

DEFAULT_MIN_DATA_POINTS = 20
DEFAULT_RSI_PERIOD = 14
INSUFFICIENT_DATA_REASON = "insufficient data"


class MarketDataProvider(Protocol):
    """Anything that can return a candle snapshot for a pair."""

    def get_ohlcv(
        self, symbol: str, resolution: str = "1h", count: int = 100
    ) -> MarketSnapshot: ...


def generate_signal(
    snapshot: MarketSnapshot,
    strategy: Optional[str],
    min_data_points: int = DEFAULT_MIN_DATA_POINTS,
    rsi_period: int = DEFAULT_RSI_PERIOD,
) -> Recommendation:
    """Evaluate one strategy against a snapshot.

    Args:
        snapshot:        Candles for the pair, oldest first.
        strategy:        ``"turtle"``, ``"scalping"``; anything else runs ORB.
        min_data_points: Minimum candle count before any evaluator runs.
        rsi_period:      Window for the RSI handed to the scalping evaluator.

    Returns:
        A ``Recommendation``.  Never raises.
    """
    try:
        if len(snapshot) < min_data_points:
            logger.info(
                "Signal [%s] %s: %d candles < %d required; holding",
                strategy, snapshot.symbol, len(snapshot), min_data_points,
            )
            return Recommendation.hold(INSUFFICIENT_DATA_REASON)

        prices = snapshot.prices
        volumes = snapshot.volumes
        current_price = prices[-1]
        rsi_value = rsi(prices, rsi_period)

        selected = (strategy or "").strip().lower()
        if selected == "turtle":
            rec = turtle_signal(prices, current_price)
        elif selected == "scalping":
            rec = scalping_signal(prices, rsi_value, volumes)
        else:
            rec = orb_signal(prices, volumes)

        logger.info(
            "Signal [%s] %s: %s (confidence=%.2f) | %s | price=%.8g rsi=%.2f",
            selected or "orb", snapshot.symbol, rec.action, rec.confidence,
            rec.reason, current_price, rsi_value,
        )
        return rec

    except Exception as exc:
        logger.error("Signal [%s] computation FAILED: %s", strategy, exc)
        return Recommendation.hold(_error_reason(exc))


class SignalService:
    """Fetch candles through a market-data provider and evaluate a strategy.

    The provider (normally ``BtcTurkClient``) and configuration are passed
    in once; the service keeps no other state and can be shared across
    threads as long as the provider can.

    Usage::

        client = BtcTurkClient(config.exchange)
        service = SignalService(client, config.signals)
        rec = service.generate("BTCTRY", "turtle")
    """

    def __init__(self, provider: MarketDataProvider, config: "SignalConfig") -> None:
        self.provider = provider
        self.config = config

    def generate(self, symbol: str, strategy: Optional[str] = None) -> Recommendation:
        """Fetch the configured candle window for ``symbol`` and evaluate.

        Args:
            symbol:   Exchange pair, e.g. ``"BTCTRY"``.
            strategy: Strategy name; ``None`` uses ``config.default_strategy``.

        Returns:
            A ``Recommendation``.  Fetch failures become an error hold.
        """
        strategy = strategy or self.config.default_strategy
        try:
            snapshot = self.provider.get_ohlcv(
                symbol,
                resolution=self.config.resolution,
                count=self.config.candle_count,
            )
        except Exception as exc:
            logger.error("Candle fetch for %s FAILED: %s", symbol, exc)
            return Recommendation.hold(_error_reason(exc))

        return generate_signal(
            snapshot,
            strategy,
            min_data_points=self.config.min_data_points,
            rsi_period=self.config.rsi_period,
        )


def _error_reason(exc: Exception) -> str:
    detail = str(exc).strip() or exc.__class__.__name__
    return f"error: {detail}"
