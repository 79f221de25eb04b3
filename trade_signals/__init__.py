"""Trade Signals — buy/sell/hold recommendations from exchange candle data."""

__version__ = "0.1.0"
