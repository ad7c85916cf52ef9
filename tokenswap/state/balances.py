"""
Single-asset balance tracking.

Implements BalanceTable[Address] -> Amount
"""

from typing import Dict


# Type aliases
Address = str  # 20-byte hex string (0x...)
Amount = int  # Non-negative integer, 18-decimal fixed point at the user boundary

ZERO_ADDRESS = "0x" + "00" * 20


class BalanceTable:
    """
    Sparse balance table mapping address -> amount for one asset.

    Note: this class stores balances in a plain dict. Callers must not rely on
    dict iteration order; sort explicitly where ordering matters.
    """

    def __init__(self):
        """Initialize empty balance table."""
        self._balances: Dict[Address, Amount] = {}

    def get(self, address: Address) -> Amount:
        """Get balance for address. Returns 0 if not found."""
        return self._balances.get(address, 0)

    def set(self, address: Address, amount: Amount) -> None:
        """
        Set balance for address.

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        if amount == 0:
            # Remove zero balances to keep table sparse
            self._balances.pop(address, None)
        else:
            self._balances[address] = amount

    def add(self, address: Address, delta: int) -> None:
        """
        Add delta to balance (delta may be negative).

        Raises:
            ValueError: If resulting balance would be negative
        """
        current = self.get(address)
        new_balance = current + delta
        if new_balance < 0:
            raise ValueError(
                f"Insufficient balance: {current} + {delta} = {new_balance} < 0"
            )
        self.set(address, new_balance)

    def subtract(self, address: Address, delta: Amount) -> None:
        """Subtract a non-negative amount from a balance."""
        if delta < 0:
            raise ValueError(f"Delta must be non-negative: {delta}")
        self.add(address, -delta)

    def move(self, sender: Address, recipient: Address, amount: Amount) -> None:
        """
        Move amount from sender to recipient.

        Both sides are validated before either balance changes.
        """
        if amount < 0:
            raise ValueError(f"Amount must be non-negative: {amount}")
        if self.get(sender) < amount:
            raise ValueError(
                f"Insufficient balance: {self.get(sender)} < {amount}"
            )
        self.subtract(sender, amount)
        self.add(recipient, amount)

    def total(self) -> Amount:
        """Sum of all balances."""
        return sum(self._balances.values())

    def get_all_balances(self) -> Dict[Address, Amount]:
        """Return a copy of all non-zero balances."""
        return dict(self._balances)

    def __len__(self) -> int:
        return len(self._balances)

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"
