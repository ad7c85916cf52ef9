"""
Core exchange algorithms
"""

from .cpmm import (
    PRICE_PRECISION,
    compute_deposit,
    compute_withdrawal,
    get_price,
    quote_output,
    required_token_amount,
)
from .errors import (
    ExchangeError,
    InsufficientLiquidity,
    InsufficientShares,
    InvalidAddress,
    InvalidAmount,
    InvariantViolation,
    RatioMismatch,
    ReentrantCall,
    SlippageExceeded,
    TransferFailed,
)
from .exchange import Exchange, SwapDirection
from .invariants import check_all
from .transaction import Transaction, TransactionError

__all__ = [
    "PRICE_PRECISION",
    "compute_deposit",
    "compute_withdrawal",
    "get_price",
    "quote_output",
    "required_token_amount",
    "ExchangeError",
    "InsufficientLiquidity",
    "InsufficientShares",
    "InvalidAddress",
    "InvalidAmount",
    "InvariantViolation",
    "RatioMismatch",
    "ReentrantCall",
    "SlippageExceeded",
    "TransferFailed",
    "Exchange",
    "SwapDirection",
    "check_all",
    "Transaction",
    "TransactionError",
]
