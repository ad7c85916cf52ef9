"""
State management for TokenSwap exchanges
"""

from .balances import Address, Amount, BalanceTable, ZERO_ADDRESS
from .pool import PoolState
from .shares import ShareTable
from .token import EtherLedger, Token, TokenLedger, derive_address

__all__ = [
    "Address",
    "Amount",
    "BalanceTable",
    "ZERO_ADDRESS",
    "PoolState",
    "ShareTable",
    "EtherLedger",
    "Token",
    "TokenLedger",
    "derive_address",
]
