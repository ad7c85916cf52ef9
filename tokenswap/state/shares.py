"""
Liquidity-share balance tracking for a single exchange pool.

Shares are tracked separately from asset balances and are never transferable
between providers.
"""

from __future__ import annotations

from typing import Dict

from .balances import Address, Amount


class ShareTable:
    """
    Share balance table mapping provider -> share amount.

    Notes:
    - Share balances are always non-negative.
    - Zero balances are omitted, so an empty table means no providers.
    """

    def __init__(self) -> None:
        self._shares: Dict[Address, Amount] = {}

    def get(self, provider: Address) -> Amount:
        """Get share balance for provider. Returns 0 if not found."""
        return self._shares.get(provider, 0)

    def set(self, provider: Address, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"Share balance cannot be negative: {amount}")
        if amount == 0:
            self._shares.pop(provider, None)
        else:
            self._shares[provider] = amount

    def mint(self, provider: Address, amount: Amount) -> None:
        """Credit newly issued shares to provider."""
        if amount < 0:
            raise ValueError(f"Mint amount must be non-negative: {amount}")
        self.set(provider, self.get(provider) + amount)

    def burn(self, provider: Address, amount: Amount) -> None:
        """Destroy shares held by provider."""
        if amount < 0:
            raise ValueError(f"Burn amount must be non-negative: {amount}")
        current = self.get(provider)
        if amount > current:
            raise ValueError(f"Insufficient shares: {current} < {amount}")
        self.set(provider, current - amount)

    def total(self) -> Amount:
        return sum(self._shares.values())

    def get_all_balances(self) -> Dict[Address, Amount]:
        return dict(self._shares)

    def restore(self, balances: Dict[Address, Amount]) -> None:
        """Replace the whole table (used when a transaction rolls back)."""
        self._shares = {p: a for p, a in balances.items() if a != 0}

    def is_empty(self) -> bool:
        return not self._shares

    def __len__(self) -> int:
        return len(self._shares)

    def __repr__(self) -> str:
        return f"ShareTable({len(self._shares)} providers)"
