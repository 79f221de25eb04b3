"""
Market data models — the ingestion boundary for candle feeds.

The exchange returns prices and volumes as numeric strings (``"1234.50"``)
or as numbers depending on endpoint and version.  ``Candle`` converts both
to ``float`` explicitly and rejects anything that is not a finite number, so
the signal engine downstream can assume clean float sequences.

``MarketSnapshot`` is an ordered (oldest first) run of candles for a single
pair and resolution.  Both models are frozen.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

from trade_signals.utils.time_utils import utcnow


def _to_float(v: Any) -> float:
    if isinstance(v, bool):
        raise ValueError(f"expected a number, got boolean {v!r}.")
    if isinstance(v, str):
        v = v.strip()
        if not v:
            raise ValueError("expected a number, got an empty string.")
    try:
        out = float(v)
    except (TypeError, ValueError):
        raise ValueError(f"expected a number or numeric string, got {v!r}.") from None
    if not math.isfinite(out):
        raise ValueError(f"expected a finite number, got {v!r}.")
    return out


class Candle(BaseModel):
    """One OHLCV bar.

    Only ``close`` and ``volume`` are required; the signal engine uses
    nothing else.

    Attributes:
        close: Closing price.
        volume: Traded volume over the bar.
        open: Opening price, if provided by the feed.
        high: Highest traded price, if provided.
        low: Lowest traded price, if provided.
        time: Bar timestamp (UTC), if provided.
    """

    model_config = ConfigDict(frozen=True)

    close: float
    volume: float
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    time: Optional[datetime] = None

    @field_validator("close", "volume", mode="before")
    @classmethod
    def coerce_required(cls, v: Any) -> float:
        return _to_float(v)

    @field_validator("open", "high", "low", mode="before")
    @classmethod
    def coerce_optional(cls, v: Any) -> Optional[float]:
        if v is None:
            return None
        return _to_float(v)

    @field_validator("volume")
    @classmethod
    def validate_volume(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"volume must be non-negative, got {v}.")
        return v


class MarketSnapshot(BaseModel):
    """Chronologically ordered candles for one pair.

    Attributes:
        symbol: Exchange pair identifier, e.g. ``"BTCTRY"``.
        resolution: Bar resolution the candles were requested at, e.g. ``"1h"``.
        candles: Bars, oldest first.  The last bar is "current".
        fetched_at: UTC time the snapshot was assembled.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    resolution: str = "1h"
    candles: list[Candle] = Field(default_factory=list)
    fetched_at: datetime = Field(default_factory=utcnow)

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("symbol must not be empty.")
        return v

    @property
    def prices(self) -> list[float]:
        return [c.close for c in self.candles]

    @property
    def volumes(self) -> list[float]:
        return [c.volume for c in self.candles]

    def __len__(self) -> int:
        return len(self.candles)

    @classmethod
    def from_series(
        cls,
        symbol: str,
        prices: Sequence[Any],
        volumes: Sequence[Any],
        resolution: str = "1h",
    ) -> "MarketSnapshot":
        """Build a snapshot from aligned close and volume sequences.

        Raises:
            ValueError: If the sequences differ in length.
            pydantic.ValidationError: If any value is not numeric.
        """
        if len(prices) != len(volumes):
            raise ValueError(
                f"prices and volumes must be aligned; got {len(prices)} prices "
                f"and {len(volumes)} volumes."
            )
        candles = [Candle(close=p, volume=v) for p, v in zip(prices, volumes)]
        return cls(symbol=symbol, resolution=resolution, candles=candles)
