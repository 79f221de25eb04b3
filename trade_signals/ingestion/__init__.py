"""
Ingestion layer — exchange client and candle parsing.

Submodules:
  btcturk_client — BtcTurk REST + graph API (signing, balances, tickers,
                   candles, orders)

Credential placement (.env, gitignored):
  BTCTURK_API_KEY     — public API key
  BTCTURK_API_SECRET  — private API key (base64, as issued)
"""
