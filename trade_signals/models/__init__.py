"""
Domain models: market data in, recommendations out.

Submodules:
  market          — Candle, MarketSnapshot (numeric coercion at the boundary)
  recommendation  — Recommendation (frozen buy/sell/hold value)
"""
