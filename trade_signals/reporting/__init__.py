"""
Reporting: plain-text formatters used by the CLI.
"""
