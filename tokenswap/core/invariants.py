"""Invariant checkers for an exchange pool.

Each function returns True when the invariant holds, and `check_all()` returns
the list of violated invariant IDs (empty = all pass).
"""

from __future__ import annotations

from typing import Callable

from ..state.pool import PoolState
from ..state.shares import ShareTable


def inv_reserves_empty_together(pool: PoolState, shares: ShareTable) -> bool:
    return (pool.reserve_token == 0) == (pool.reserve_base == 0) == (pool.total_shares == 0)


def inv_no_providers_when_empty(pool: PoolState, shares: ShareTable) -> bool:
    return (pool.total_shares == 0) == shares.is_empty()


def inv_shares_sum_to_supply(pool: PoolState, shares: ShareTable) -> bool:
    return shares.total() == pool.total_shares


# ---------------------------------------------------------------------------
# Registry + check_all
# ---------------------------------------------------------------------------

INVARIANT_REGISTRY: dict[str, Callable[[PoolState, ShareTable], bool]] = {
    "inv_reserves_empty_together": inv_reserves_empty_together,
    "inv_no_providers_when_empty": inv_no_providers_when_empty,
    "inv_shares_sum_to_supply": inv_shares_sum_to_supply,
}


def check_all(pool: PoolState, shares: ShareTable) -> list[str]:
    """Return list of violated invariant IDs (empty = all pass)."""
    return [name for name, fn in INVARIANT_REGISTRY.items() if not fn(pool, shares)]


def check_swap_product(before: PoolState, after: PoolState) -> list[str]:
    """A swap must never decrease reserve_token * reserve_base."""
    if after.get_constant_product() < before.get_constant_product():
        return ["inv_swap_product_non_decreasing"]
    return []
