"""
Strategy evaluators: turn a price (and volume) series into a Recommendation.

Each evaluator is a pure function.  Rules are checked top to bottom and the
first match wins; there is no voting or blending between rules.  When no rule
matches the result is a hold with confidence 0.

Turtle (channel breakout)
-------------------------
    1. BUY  0.7 : price > 20-period high
    2. SELL 0.7 : price < 20-period low
    3. BUY  0.8 : price > 55-period high
    4. SELL 0.8 : price < 55-period low

    The 55-period channel always contains the 20-period one, so rules 3 and 4
    can only match when 1 or 2 already has.  The order is kept as-is; callers
    that want the major breakout to take precedence must reorder explicitly.

Scalping (momentum with volume confirmation)
--------------------------------------------
    1. BUY  0.8  : RSI < 25 and price > SMA20 and volume > 2.0 × avg volume
    2. SELL 0.8  : RSI > 75 and price < SMA20 and volume > 2.0 × avg volume
    3. BUY  0.75 : SMA5 > SMA20 and RSI > 55 and volume > 1.8 × avg volume
    4. SELL 0.75 : SMA5 < SMA20 and RSI < 45 and volume > 1.8 × avg volume

    avg volume = SMA of the last 10 volumes.

Opening-range breakout (ORB)
----------------------------
    range     = max(last 24) − min(last 24)
    threshold = 0.1 × range
    1. BUY  0.7 : price > high + threshold
    2. SELL 0.7 : price < low − threshold

    The current price is part of its own 24-sample window, so it can never
    exceed the window high.  The "open" is the current price; there is no
    session-open lookup.
"""

from __future__ import annotations

import logging
from typing import Sequence

from trade_signals.models.recommendation import Recommendation
from trade_signals.signals.indicators import sma

logger = logging.getLogger(__name__)

STRATEGY_NAMES: tuple[str, ...] = ("turtle", "scalping", "orb")

TURTLE_FAST_WINDOW = 20
TURTLE_SLOW_WINDOW = 55
ORB_WINDOW = 24
ORB_THRESHOLD_FRACTION = 0.1
SCALPING_VOLUME_WINDOW = 10

_NO_PRICE_DATA = "No price data"


def channel_extremes(prices: Sequence[float], window: int) -> tuple[float, float]:
    """Return ``(high, low)`` over the last ``window`` prices.

    Uses whatever is available when fewer than ``window`` prices exist.

    Raises:
        ValueError: If ``prices`` is empty.
    """
    tail = prices[-window:]
    if not tail:
        raise ValueError("channel_extremes() requires at least one price.")
    return max(tail), min(tail)


# ── Turtle ────────────────────────────────────────────────────────────────────


def turtle_signal(prices: Sequence[float], current_price: float) -> Recommendation:
    """Donchian-channel breakout on 20- and 55-period extremes."""
    if not prices:
        return Recommendation.hold(_NO_PRICE_DATA)

    high20, low20 = channel_extremes(prices, TURTLE_FAST_WINDOW)
    high55, low55 = channel_extremes(prices, TURTLE_SLOW_WINDOW)

    if current_price > high20:
        return Recommendation(
            action="buy", confidence=0.7, reason="Turtle breakout (20-period high)"
        )
    if current_price < low20:
        return Recommendation(
            action="sell", confidence=0.7, reason="Turtle breakdown (20-period low)"
        )
    if current_price > high55:
        return Recommendation(
            action="buy", confidence=0.8, reason="Turtle major breakout (55-period high)"
        )
    if current_price < low55:
        return Recommendation(
            action="sell", confidence=0.8, reason="Turtle major breakdown (55-period low)"
        )

    return Recommendation.hold("No turtle signal")


# ── Scalping ──────────────────────────────────────────────────────────────────


def scalping_signal(
    prices: Sequence[float],
    rsi_value: float,
    volumes: Sequence[float],
) -> Recommendation:
    """RSI extremes and short-term trend, both gated on a volume surge."""
    if not prices or not volumes:
        return Recommendation.hold(_NO_PRICE_DATA)

    current_price = prices[-1]
    sma5 = sma(prices, 5)
    sma10 = sma(prices, 10)
    sma20 = sma(prices, 20)
    avg_volume = sma(volumes, SCALPING_VOLUME_WINDOW)
    current_volume = volumes[-1]

    logger.debug(
        "scalping inputs: price=%.8g rsi=%.2f sma5=%.8g sma10=%.8g sma20=%.8g "
        "volume=%.8g avg_volume=%.8g",
        current_price, rsi_value, sma5, sma10, sma20, current_volume, avg_volume,
    )

    strong_volume = current_volume > avg_volume * 2.0
    rising_volume = current_volume > avg_volume * 1.8

    if rsi_value < 25 and current_price > sma20 and strong_volume:
        return Recommendation(
            action="buy", confidence=0.8, reason="Deeply oversold with strong volume"
        )
    if rsi_value > 75 and current_price < sma20 and strong_volume:
        return Recommendation(
            action="sell", confidence=0.8, reason="Deeply overbought with strong volume"
        )
    if sma5 > sma20 and rsi_value > 55 and rising_volume:
        return Recommendation(action="buy", confidence=0.75, reason="Strong uptrend")
    if sma5 < sma20 and rsi_value < 45 and rising_volume:
        return Recommendation(action="sell", confidence=0.75, reason="Strong downtrend")

    return Recommendation.hold("No scalping signal")


# ── Opening-range breakout ────────────────────────────────────────────────────


def orb_signal(
    prices: Sequence[float],
    volumes: Sequence[float] | None = None,
) -> Recommendation:
    """Breakout beyond the trailing 24-sample range by 10% of its width.

    ``volumes`` is accepted for interface parity with the other evaluators
    and does not affect the decision.
    """
    if not prices:
        return Recommendation.hold(_NO_PRICE_DATA)

    current_price = prices[-1]
    high_price, low_price = channel_extremes(prices, ORB_WINDOW)
    return orb_breakout(current_price, high_price, low_price)


def orb_breakout(
    current_price: float,
    high_price: float,
    low_price: float,
) -> Recommendation:
    """Decide an ORB signal from a price and an already-computed range."""
    threshold = (high_price - low_price) * ORB_THRESHOLD_FRACTION

    if current_price > high_price + threshold:
        return Recommendation(action="buy", confidence=0.7, reason="ORB breakout (up)")
    if current_price < low_price - threshold:
        return Recommendation(action="sell", confidence=0.7, reason="ORB breakdown (down)")

    return Recommendation.hold("No ORB signal")
