"""
Portfolio valuation: price account balances in a single quote asset.

Rules
-----
    - Balances <= 0 (or unparseable) are skipped.
    - The quote asset itself is valued 1:1.
    - Any other asset is valued with the ``last`` price of the
      ``{asset}{quote}`` ticker, e.g. ``BTCTRY``.
    - Assets with no such ticker are kept with value 0 and listed in
      ``PortfolioValuation.unpriced`` so the caller can see what is missing.

Pure function over already-fetched balance and ticker records; no I/O.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssetValuation:
    """One asset's holding and its value in the quote asset."""

    asset: str
    balance: float
    value: float


@dataclass
class PortfolioValuation:
    """All valued holdings plus the total, in ``quote_asset`` units."""

    quote_asset: str
    assets: list[AssetValuation] = field(default_factory=list)
    unpriced: list[str] = field(default_factory=list)

    @property
    def total_value(self) -> float:
        return sum(a.value for a in self.assets)


def value_balances(
    balances: Iterable[dict[str, Any]],
    tickers: Iterable[dict[str, Any]],
    quote_asset: str = "TRY",
) -> PortfolioValuation:
    """Value every positive balance in ``quote_asset``.

    Args:
        balances:    Records with ``asset`` and ``balance`` keys.
        tickers:     Records with ``pair`` and ``last`` keys.
        quote_asset: Asset to value in, e.g. ``"TRY"``.

    Returns:
        ``PortfolioValuation`` with holdings in input order.
    """
    quote = quote_asset.upper()
    last_by_pair: dict[str, float] = {}
    for ticker in tickers:
        pair = str(ticker.get("pair", "")).upper()
        last = _as_float(ticker.get("last"))
        if pair and last is not None:
            last_by_pair[pair] = last

    result = PortfolioValuation(quote_asset=quote)
    for record in balances:
        amount = _as_float(record.get("balance"))
        if amount is None or amount <= 0:
            continue
        asset = str(record.get("asset", "")).upper()

        if asset == quote:
            value = amount
        else:
            last = last_by_pair.get(f"{asset}{quote}")
            if last is None:
                result.unpriced.append(asset)
                value = 0.0
            else:
                value = amount * last

        result.assets.append(AssetValuation(asset=asset, balance=amount, value=value))

    if result.unpriced:
        logger.warning(
            "No %s ticker for %d asset(s): %s",
            quote, len(result.unpriced), ", ".join(result.unpriced),
        )
    return result


def _as_float(v: Any) -> float | None:
    if v is None:
        return None
    try:
        return float(v)
    except (TypeError, ValueError):
        return None
