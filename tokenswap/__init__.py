"""
TokenSwap: a constant-product exchange between one token and ether.
"""

from .config import ExchangeConfig, load_config
from .core import Exchange, SwapDirection
from .state import EtherLedger, PoolState, Token
from .units import from_wei, to_wei

__version__ = "0.1.0"

__all__ = [
    "ExchangeConfig",
    "load_config",
    "Exchange",
    "SwapDirection",
    "EtherLedger",
    "PoolState",
    "Token",
    "from_wei",
    "to_wei",
]
