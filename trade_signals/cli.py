"""
Trade Signals — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Build one ``BtcTurkClient`` from ``config.exchange``.
  4. Execute the action.
  5. Report result to stdout.

Install and run::

    pip install -e .
    trade-signals --help
    trade-signals validate-config
    trade-signals signal BTCTRY --strategy turtle
    trade-signals balances
    trade-signals open-orders
    trade-signals place-order BTCTRY buy 0.001 --price 2000000
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="trade-signals",
    help="Buy/sell/hold signals and account tools for BtcTurk pairs.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from trade_signals.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from trade_signals.utils.logging import configure_logging
    configure_logging(config.logging)


def _build_client(config):
    from trade_signals.ingestion.btcturk_client import BtcTurkClient
    return BtcTurkClient(config.exchange)


def _exit_on_exchange_error(exc: Exception) -> None:
    typer.echo(f"[ERROR] Exchange request failed: {exc}", err=True)
    raise typer.Exit(code=1)


_CONFIG_OPTION = typer.Option(None, "--config", help="Path to TOML config file.")


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = _CONFIG_OPTION,
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields (secrets masked).",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  REST API:          {config.exchange.base_url}")
    typer.echo(f"  Graph API:         {config.exchange.graph_url}")
    typer.echo(f"  Credentials:       {'set' if config.exchange.has_credentials else 'not set'}")
    typer.echo(f"  Default strategy:  {config.signals.default_strategy}")
    typer.echo(f"  Resolution:        {config.signals.resolution}")
    typer.echo(f"  Candle count:      {config.signals.candle_count}")
    typer.echo(f"  Min data points:   {config.signals.min_data_points}")
    typer.echo(f"  Quote asset:       {config.portfolio.quote_asset}")
    typer.echo(f"  Log level:         {config.logging.level}")
    typer.echo(f"  Debug mode:        {config.debug}")

    if show_full:
        dumped = config.model_dump()
        for key in ("api_key", "api_secret"):
            if dumped["exchange"].get(key):
                dumped["exchange"][key] = "***"
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(dumped, indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("signal")
def signal(
    symbol: str = typer.Argument(..., help="Pair symbol, e.g. BTCTRY."),
    strategy: Optional[str] = typer.Option(
        None,
        "--strategy",
        "-s",
        help="turtle | scalping | orb. Defaults to config signals.default_strategy.",
    ),
    resolution: Optional[str] = typer.Option(
        None, "--resolution", help="Candle resolution override, e.g. 1h."
    ),
    count: Optional[int] = typer.Option(
        None, "--count", min=1, help="Number of candles to fetch."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the recommendation as JSON."),
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Fetch recent candles and print a buy/sell/hold recommendation.

    Always exits 0: fetch and computation failures are reported as a hold
    with the failure in the reason.
    """
    from trade_signals.reporting.formatters import format_recommendation
    from trade_signals.signals.orchestrator import SignalService

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    overrides: dict = {}
    if resolution:
        overrides["resolution"] = resolution
    if count:
        overrides["candle_count"] = count
    signal_config = config.signals.model_copy(update=overrides)
    chosen = (strategy or signal_config.default_strategy).strip().lower()

    with _build_client(config) as client:
        rec = SignalService(client, signal_config).generate(symbol, chosen)

    if as_json:
        typer.echo(json.dumps({"symbol": symbol.upper(), "strategy": chosen, **rec.model_dump()}))
    else:
        typer.echo(format_recommendation(symbol, chosen, rec))


@app.command("balances")
def balances(config_path: Optional[str] = _CONFIG_OPTION) -> None:
    """Print non-zero balances valued in the configured quote asset."""
    import httpx

    from trade_signals.ingestion.btcturk_client import ExchangeAuthError
    from trade_signals.portfolio.valuation import value_balances
    from trade_signals.reporting.formatters import format_portfolio

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        with _build_client(config) as client:
            raw_balances = client.get_balances()
            tickers = client.get_tickers()
    except (ExchangeAuthError, httpx.HTTPError) as exc:
        _exit_on_exchange_error(exc)

    valuation = value_balances(raw_balances, tickers, config.portfolio.quote_asset)
    typer.echo(format_portfolio(valuation))


@app.command("open-orders")
def open_orders(config_path: Optional[str] = _CONFIG_OPTION) -> None:
    """List the account's open orders."""
    import httpx

    from trade_signals.ingestion.btcturk_client import ExchangeAuthError
    from trade_signals.reporting.formatters import format_open_orders

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        with _build_client(config) as client:
            orders = client.get_open_orders()
    except (ExchangeAuthError, httpx.HTTPError) as exc:
        _exit_on_exchange_error(exc)

    typer.echo(format_open_orders(orders))


@app.command("place-order")
def place_order(
    symbol: str = typer.Argument(..., help="Pair symbol, e.g. BTCTRY."),
    side: str = typer.Argument(..., help="buy or sell."),
    quantity: float = typer.Argument(..., help="Quantity in base-asset units."),
    price: Optional[float] = typer.Option(
        None, "--price", help="Limit price. Omit for a market order."
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Submit a single market or limit order."""
    import httpx

    from trade_signals.ingestion.btcturk_client import ExchangeAuthError

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    kind = "limit" if price else "market"
    summary = f"{kind} {side.lower()} {quantity} {symbol.upper()}"
    if price:
        summary += f" @ {price}"
    if not yes and not typer.confirm(f"Place {summary}?"):
        typer.echo("Aborted.")
        raise typer.Exit(code=1)

    try:
        with _build_client(config) as client:
            result = client.place_order(symbol, side, quantity, price)
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except (ExchangeAuthError, httpx.HTTPError) as exc:
        _exit_on_exchange_error(exc)

    typer.echo(json.dumps(result, indent=2, default=str))
    typer.echo(f"[OK] Submitted {summary}.")


if __name__ == "__main__":
    app()
