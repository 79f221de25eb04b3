"""
Indicator library — simple moving average and single-window RSI.

Both functions are pure and never raise for short input.  Instead they
return sentinel values the strategy evaluators know how to read:

    sma(series, period)  → 0.0  when len(series) < period
    rsi(series, period)  → 50.0 when len(series) < period + 1
                         → 100.0 when the window has no losses

RSI variant
-----------
This is a single trailing-window RSI: gains and losses are summed over the
last ``period`` deltas only, with no exponential smoothing carried over from
earlier windows.  It reads higher/lower than the canonical Wilder RSI on the
same data, and the strategy thresholds are tuned for this variant, so do not
swap in the smoothed version.
"""

from __future__ import annotations

from typing import Sequence


def sma(series: Sequence[float], period: int) -> float:
    """Arithmetic mean of the last ``period`` values.

    Returns ``0.0`` when fewer than ``period`` values exist; callers treat
    that as "undefined".
    """
    if period <= 0 or len(series) < period:
        return 0.0
    return sum(series[-period:]) / period


def rsi(series: Sequence[float], period: int = 14) -> float:
    """Relative strength index over the last ``period`` price deltas.

    Args:
        series: Prices, oldest first.
        period: Number of trailing deltas to include.

    Returns:
        Value in [0, 100].  ``50.0`` when fewer than ``period + 1`` prices
        exist, ``100.0`` when no delta in the window is negative.
    """
    if period <= 0 or len(series) < period + 1:
        return 50.0

    gains = 0.0
    losses = 0.0
    n = len(series)
    for i in range(n - period, n):
        change = series[i] - series[i - 1]
        if change > 0:
            gains += change
        else:
            losses += abs(change)

    avg_gain = gains / period
    avg_loss = losses / period

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return 100.0 - (100.0 / (1.0 + rs))
