"""
BtcTurk exchange client.

API:   https://api.btcturk.com         (private + public REST)
Graph: https://graph-api.btcturk.com   (public OHLC candles)
Docs:  https://docs.btcturk.com

Credential setup (.env, gitignored):
  BTCTURK_API_KEY=your_public_key
  BTCTURK_API_SECRET=your_private_key

Request signing (private endpoints):
  stamp     = current Unix time in milliseconds
  signature = base64( HMAC-SHA256( key=base64decode(secret), msg=api_key + stamp ) )
  headers   = X-PCK: api_key, X-Stamp: stamp, X-Signature: signature

Endpoints used:
  GET  /api/v1/users/balances     (signed)
  GET  /api/v1/ticker             (signed for parity with the other calls)
  GET  /api/v1/openOrders         (signed)
  POST /api/v1/order              (signed)
  GET  {graph}/v1/ohlcs?pair=&resolution=&count=   (public)

One client instance is built from ``ExchangeConfig`` at startup and passed
to whatever needs it.  The client holds an ``httpx.Client``; close it with
``close()`` or use it as a context manager.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import logging
from typing import Any, Optional

import httpx

from trade_signals.config import ExchangeConfig
from trade_signals.models.market import Candle, MarketSnapshot
from trade_signals.utils.time_utils import epoch_millis, from_epoch

logger = logging.getLogger(__name__)

VALID_ORDER_SIDES = frozenset({"buy", "sell"})


class ExchangeAuthError(RuntimeError):
    """Raised when a signed endpoint is called without credentials."""


def create_signature(api_key: str, api_secret: str, stamp: str) -> str:
    """Return the base64 HMAC-SHA256 signature for ``api_key + stamp``.

    The exchange issues secrets base64-encoded; a secret that is not valid
    base64 is used as raw UTF-8 bytes.
    """
    try:
        key = base64.b64decode(api_secret, validate=True)
    except (binascii.Error, ValueError):
        key = api_secret.encode("utf-8")
    digest = hmac.new(key, f"{api_key}{stamp}".encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


class BtcTurkClient:
    """Typed wrapper around the BtcTurk REST and graph APIs.

    Usage (public candles only — no credentials required)::

        client = BtcTurkClient(ExchangeConfig())
        snapshot = client.get_ohlcv("BTCTRY", "1h", 100)

    Usage (private endpoints — requires BTCTURK_API_KEY + SECRET)::

        config = load_config()
        with BtcTurkClient(config.exchange) as client:
            balances = client.get_balances()

    Attributes:
        config: Endpoint URLs, credentials and timeout.
    """

    def __init__(
        self,
        config: ExchangeConfig,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        """Initialise the client.

        Args:
            config: Exchange section of ``AppConfig``.
            http_client: Pre-built ``httpx.Client`` (tests pass one with a
                ``MockTransport``).  Built from ``config`` when omitted.
        """
        self.config = config
        self._http = http_client or httpx.Client(timeout=config.timeout_seconds)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "BtcTurkClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ── Signed requests ────────────────────────────────────────────────────────

    def _auth_headers(self) -> dict[str, str]:
        if not self.config.has_credentials:
            raise ExchangeAuthError(
                "BTCTURK_API_KEY and BTCTURK_API_SECRET must be set in .env."
            )
        stamp = epoch_millis()
        return {
            "X-PCK": self.config.api_key,
            "X-Stamp": stamp,
            "X-Signature": create_signature(
                self.config.api_key, self.config.api_secret, stamp
            ),
            "Content-Type": "application/json",
        }

    def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Send a signed request to the REST API and return the decoded JSON.

        Raises:
            ExchangeAuthError: If credentials are missing.
            httpx.HTTPStatusError: On non-2xx response.
            httpx.RequestError: On transport failure.
        """
        headers = self._auth_headers()
        resp = self._http.request(
            method,
            f"{self.config.base_url}{path}",
            headers=headers,
            json=json if method.upper() != "GET" else None,
        )
        if resp.is_error:
            logger.error(
                "BtcTurk %s %s failed: %d %s",
                method, path, resp.status_code, resp.reason_phrase,
            )
        resp.raise_for_status()
        return resp.json()

    # ── Account / market endpoints ─────────────────────────────────────────────

    def get_balances(self) -> list[dict[str, Any]]:
        """Return the account's per-asset balance records."""
        return _data_list(self._request("GET", "/api/v1/users/balances"))

    def get_tickers(self) -> list[dict[str, Any]]:
        """Return ticker records for every listed pair."""
        return _data_list(self._request("GET", "/api/v1/ticker"))

    def get_open_orders(self) -> list[dict[str, Any]]:
        """Return the account's open orders.

        The exchange groups orders as ``{"asks": [...], "bids": [...]}``;
        both sides are flattened into one list, asks first.
        """
        payload = self._request("GET", "/api/v1/openOrders")
        data = payload.get("data") if isinstance(payload, dict) else None
        if isinstance(data, dict):
            return list(data.get("asks") or []) + list(data.get("bids") or [])
        return _data_list(payload)

    def place_order(
        self,
        symbol: str,
        side: str,
        quantity: float,
        price: Optional[float] = None,
    ) -> Any:
        """Submit a single market (no price) or limit (with price) order.

        Args:
            symbol: Pair, e.g. ``"BTCTRY"``.
            side: ``"buy"`` or ``"sell"``.
            quantity: Order quantity in base-asset units.
            price: Limit price; ``None`` sends a market order.

        Returns:
            Decoded JSON response from the exchange.

        Raises:
            ValueError: If ``side`` is not buy/sell or ``quantity`` is not positive.
        """
        side = side.strip().lower()
        if side not in VALID_ORDER_SIDES:
            raise ValueError(f"side must be one of {sorted(VALID_ORDER_SIDES)}, got '{side}'.")
        if quantity <= 0:
            raise ValueError(f"quantity must be positive, got {quantity}.")

        order: dict[str, Any] = {
            "pair": symbol.upper(),
            "side": side,
            "type": "limit" if price else "market",
            "quantity": str(quantity),
        }
        if price:
            order["price"] = str(price)

        logger.info(
            "Placing %s %s order on %s: quantity=%s price=%s",
            order["type"], side, order["pair"], order["quantity"], order.get("price"),
        )
        return self._request("POST", "/api/v1/order", json=order)

    # ── Candles (public) ───────────────────────────────────────────────────────

    def get_ohlcv(
        self,
        symbol: str,
        resolution: str = "1h",
        count: int = 100,
    ) -> MarketSnapshot:
        """Fetch recent candles for ``symbol`` from the graph API.

        Args:
            symbol: Pair, e.g. ``"BTCTRY"``.
            resolution: Bar resolution, e.g. ``"1h"``.
            count: Number of bars to request.

        Returns:
            ``MarketSnapshot`` with candles sorted oldest first.

        Raises:
            httpx.HTTPStatusError: On non-2xx response.
            pydantic.ValidationError: If a candle has a non-numeric close/volume.
        """
        resp = self._http.get(
            f"{self.config.graph_url}/v1/ohlcs",
            params={"pair": symbol.upper(), "resolution": resolution, "count": count},
        )
        resp.raise_for_status()
        return self._parse_ohlcv_response(resp.json(), symbol, resolution)

    # ── Response parsers ───────────────────────────────────────────────────────

    def _parse_ohlcv_response(
        self, data: Any, symbol: str, resolution: str
    ) -> MarketSnapshot:
        """Parse a ``/v1/ohlcs`` payload (bare list or ``{"data": [...]}``)."""
        rows = data if isinstance(data, list) else _data_list(data)
        candles = [
            Candle(
                close=row.get("close"),
                volume=row.get("volume"),
                open=row.get("open"),
                high=row.get("high"),
                low=row.get("low"),
                time=from_epoch(row["time"]) if row.get("time") is not None else None,
            )
            for row in rows
        ]
        if candles and all(c.time is not None for c in candles):
            candles.sort(key=lambda c: c.time)
        logger.debug(
            "BtcTurkClient: parsed %d candles for %s @ %s", len(candles), symbol, resolution
        )
        return MarketSnapshot(symbol=symbol, resolution=resolution, candles=candles)


def _data_list(payload: Any) -> list[dict[str, Any]]:
    """Extract the ``data`` list from a response envelope (empty when absent)."""
    if isinstance(payload, dict):
        return payload.get("data") or []
    return []
