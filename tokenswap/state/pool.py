"""
Pool state for a token/ether exchange.
"""

from __future__ import annotations

from dataclasses import dataclass

from .balances import Amount


@dataclass(frozen=True)
class PoolState:
    """
    Reserves and share supply of one exchange pool.

    Instances are immutable; every operation produces a new state via
    `dataclasses.replace`, so a reference to an old state is a consistent
    snapshot.

    Attributes:
        reserve_token: Token units held by the pool
        reserve_base: Base-asset (ether) units held by the pool
        total_shares: Total liquidity shares issued
    """
    reserve_token: Amount = 0
    reserve_base: Amount = 0
    total_shares: Amount = 0

    def __post_init__(self):
        """Validate field types and signs."""
        for name in ("reserve_token", "reserve_base", "total_shares"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{name} must be an int")
            if value < 0:
                raise ValueError(f"{name} must be non-negative: {value}")

    def is_empty(self) -> bool:
        return self.total_shares == 0

    def get_constant_product(self) -> int:
        """Compute k = reserve_token * reserve_base."""
        return self.reserve_token * self.reserve_base

    def to_dict(self) -> dict[str, int]:
        return {
            "reserve_token": self.reserve_token,
            "reserve_base": self.reserve_base,
            "total_shares": self.total_shares,
        }

    def __repr__(self) -> str:
        return (
            f"PoolState(reserves=({self.reserve_token}, {self.reserve_base}), "
            f"total_shares={self.total_shares})"
        )
