"""
Portfolio valuation.

Modules
-------
valuation : AssetValuation + PortfolioValuation + value_balances() — pure,
            no I/O; callers fetch balances and tickers via the client.
"""
