"""
Personal Banking Core

Accounts, balances and an append-only ledger of deposits, withdrawals and
transfers. All monetary values are exact Decimals.
"""

__version__ = "1.0.0"
