"""
Tests for trade_signals/ingestion/btcturk_client.py.

HTTP is served by ``httpx.MockTransport``; no network access.

What we test
------------
create_signature():
  - HMAC-SHA256 keyed with the base64-decoded secret.
  - Falls back to raw bytes for a non-base64 secret.

Signed endpoints:
  - X-PCK / X-Stamp / X-Signature headers are present and consistent.
  - Missing credentials raise ExchangeAuthError before any request.
  - Non-2xx responses raise httpx.HTTPStatusError.
  - ``data`` envelopes are unwrapped; open orders are flattened.

place_order():
  - Market vs limit body; quantity / price sent as strings.
  - Invalid side / quantity rejected locally.

get_ohlcv():
  - Bare list and ``{"data": [...]}`` payloads.
  - Numeric strings coerced; candles sorted oldest first.
  - Non-numeric close raises ValidationError.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json

import httpx
import pytest
from pydantic import ValidationError

from trade_signals.config import ExchangeConfig
from trade_signals.ingestion.btcturk_client import (
    BtcTurkClient,
    ExchangeAuthError,
    create_signature,
)

CREDS = ExchangeConfig(api_key="test-key", api_secret="c2VjcmV0")  # "secret"


def _client(handler, config: ExchangeConfig = CREDS) -> BtcTurkClient:
    return BtcTurkClient(config, http_client=httpx.Client(transport=httpx.MockTransport(handler)))


class _Recorder:
    """MockTransport handler that records requests and replies with a fixed payload."""

    def __init__(self, payload, status_code: int = 200) -> None:
        self.payload = payload
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.payload)


# ── Signing ───────────────────────────────────────────────────────────────────

class TestCreateSignature:
    def test_base64_secret_is_decoded(self):
        expected = base64.b64encode(
            hmac.new(b"secret", b"test-key123", hashlib.sha256).digest()
        ).decode()
        assert create_signature("test-key", "c2VjcmV0", "123") == expected

    def test_non_base64_secret_used_raw(self):
        expected = base64.b64encode(
            hmac.new(b"not base64!!", b"k1", hashlib.sha256).digest()
        ).decode()
        assert create_signature("k", "not base64!!", "1") == expected


class TestSignedRequests:
    def test_headers_are_signed(self):
        rec = _Recorder({"data": []})
        _client(rec).get_balances()
        req = rec.requests[0]
        assert req.url.path == "/api/v1/users/balances"
        assert req.headers["X-PCK"] == "test-key"
        stamp = req.headers["X-Stamp"]
        assert stamp.isdigit()
        assert req.headers["X-Signature"] == create_signature("test-key", "c2VjcmV0", stamp)

    def test_missing_credentials_raise_before_request(self):
        rec = _Recorder({"data": []})
        with pytest.raises(ExchangeAuthError):
            _client(rec, ExchangeConfig()).get_balances()
        assert rec.requests == []

    def test_http_error_raises(self):
        rec = _Recorder({"message": "unauthorized"}, status_code=401)
        with pytest.raises(httpx.HTTPStatusError):
            _client(rec).get_tickers()

    def test_data_envelope_unwrapped(self):
        rec = _Recorder({"data": [{"pair": "BTCTRY", "last": 100}]})
        assert _client(rec).get_tickers() == [{"pair": "BTCTRY", "last": 100}]

    def test_missing_data_gives_empty_list(self):
        assert _client(_Recorder({"success": True})).get_balances() == []

    def test_open_orders_flattened(self):
        rec = _Recorder({"data": {"asks": [{"id": 1}], "bids": [{"id": 2}, {"id": 3}]}})
        assert [o["id"] for o in _client(rec).get_open_orders()] == [1, 2, 3]

    def test_open_orders_plain_list(self):
        rec = _Recorder({"data": [{"id": 9}]})
        assert _client(rec).get_open_orders() == [{"id": 9}]


# ── Orders ────────────────────────────────────────────────────────────────────

class TestPlaceOrder:
    def test_market_order_body(self):
        rec = _Recorder({"success": True})
        _client(rec).place_order("btctry", "BUY", 0.5)
        req = rec.requests[0]
        assert req.method == "POST"
        assert req.url.path == "/api/v1/order"
        assert json.loads(req.content) == {
            "pair": "BTCTRY",
            "side": "buy",
            "type": "market",
            "quantity": "0.5",
        }

    def test_limit_order_body(self):
        rec = _Recorder({"success": True})
        _client(rec).place_order("BTCTRY", "sell", 0.25, price=2000000.0)
        body = json.loads(rec.requests[0].content)
        assert body["type"] == "limit"
        assert body["price"] == "2000000.0"
        assert body["quantity"] == "0.25"

    def test_invalid_side_rejected_locally(self):
        rec = _Recorder({})
        with pytest.raises(ValueError, match="side"):
            _client(rec).place_order("BTCTRY", "hold", 1.0)
        assert rec.requests == []

    def test_non_positive_quantity_rejected(self):
        with pytest.raises(ValueError, match="quantity"):
            _client(_Recorder({})).place_order("BTCTRY", "buy", 0)


# ── Candles ───────────────────────────────────────────────────────────────────

class TestGetOhlcv:
    def test_bare_list_payload(self):
        rec = _Recorder([
            {"time": 1700003600, "close": "101.5", "volume": "3.0", "open": "100", "high": "102", "low": "99"},
            {"time": 1700000000, "close": "100.0", "volume": "2.0", "open": "99", "high": "101", "low": "98"},
        ])
        snap = _client(rec, ExchangeConfig()).get_ohlcv("btctry", "1h", 2)
        req = rec.requests[0]
        assert req.url.host == "graph-api.btcturk.com"
        assert req.url.params["pair"] == "BTCTRY"
        assert req.url.params["resolution"] == "1h"
        assert req.url.params["count"] == "2"
        assert "X-PCK" not in req.headers
        # Sorted oldest first.
        assert snap.prices == [100.0, 101.5]
        assert snap.volumes == [2.0, 3.0]
        assert snap.symbol == "BTCTRY"

    def test_data_envelope_payload(self):
        rec = _Recorder({"data": [{"close": 5, "volume": 1}] * 25})
        snap = _client(rec).get_ohlcv("ETHTRY")
        assert len(snap) == 25

    def test_non_numeric_close_raises(self):
        rec = _Recorder([{"close": "n/a", "volume": "1"}])
        with pytest.raises(ValidationError):
            _client(rec).get_ohlcv("BTCTRY")

    def test_http_error_raises(self):
        with pytest.raises(httpx.HTTPStatusError):
            _client(_Recorder({}, status_code=503)).get_ohlcv("BTCTRY")


def test_context_manager_closes_http_client():
    http = httpx.Client(transport=httpx.MockTransport(_Recorder({})))
    with BtcTurkClient(CREDS, http_client=http):
        pass
    assert http.is_closed
