"""
ASCII terminal formatters for CLI commands.

All formatters return plain multi-line strings suitable for ``typer.echo()``.
No third-party dependencies (no ``rich``, no ``colorama``).
"""

from __future__ import annotations

from typing import Any

from trade_signals.models.recommendation import Recommendation
from trade_signals.portfolio.valuation import PortfolioValuation

_ACTION_TAGS = {"buy": "[BUY]", "sell": "[SELL]", "hold": "[HOLD]"}


def format_recommendation(symbol: str, strategy: str, rec: Recommendation) -> str:
    """Format one recommendation as a short block::

        BTCTRY  strategy=turtle
          [BUY] confidence 70%
          Turtle breakout (20-period high)
    """
    tag = _ACTION_TAGS.get(rec.action, f"[{rec.action.upper()}]")
    return "\n".join([
        f"{symbol.upper()}  strategy={strategy}",
        f"  {tag} confidence {rec.confidence:.0%}",
        f"  {rec.reason}",
    ])


def format_portfolio(valuation: PortfolioValuation) -> str:
    """Format holdings as a table sorted by value, largest first."""
    quote = valuation.quote_asset
    if not valuation.assets:
        return "  (no balances)"

    lines = [
        f"  {'Asset':<8} {'Balance':>18} {'Value (' + quote + ')':>18}",
        "  " + "-" * 46,
    ]
    for a in sorted(valuation.assets, key=lambda a: a.value, reverse=True):
        marker = "  *" if a.asset in valuation.unpriced else ""
        lines.append(f"  {a.asset:<8} {a.balance:>18,.8f} {a.value:>18,.2f}{marker}")
    lines.append("  " + "-" * 46)
    lines.append(f"  {'Total':<8} {'':>18} {valuation.total_value:>18,.2f}")
    if valuation.unpriced:
        lines.append(f"  * no {quote} ticker; valued at 0")
    return "\n".join(lines)


def format_open_orders(orders: list[dict[str, Any]]) -> str:
    """Format open orders, one per line."""
    if not orders:
        return "  (no open orders)"
    lines = [f"  {'Pair':<10} {'Side':<5} {'Type':<7} {'Quantity':>16} {'Price':>16}"]
    for o in orders:
        lines.append(
            f"  {str(o.get('pairSymbol') or o.get('pair', '?')):<10} "
            f"{str(o.get('method') or o.get('side', '?')):<5} "
            f"{str(o.get('orderType') or o.get('type', '?')):<7} "
            f"{str(o.get('quantity', '')):>16} {str(o.get('price', '')):>16}"
        )
    return "\n".join(lines)
