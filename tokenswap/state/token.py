"""
Ledgers the exchange moves value through.

`TokenLedger` is the interface the exchange calls for the traded token.
`Token` is an in-process ERC-20 style implementation of it; `EtherLedger`
tracks the native base asset.

Both ledgers validate a transfer completely before touching any balance and
report failure by returning False, so a rejected transfer never leaves a
partial balance change behind.
"""

from __future__ import annotations

import hashlib
from typing import Dict, Optional, Tuple

from .balances import Address, Amount, BalanceTable


DEFAULT_DECIMALS = 18


def derive_address(*parts: str) -> Address:
    """
    Deterministically derive a 20-byte address from string parts.

        address = "0x" || H("TokenSwap" || part0 || part1 || ...)[:20]
    """
    data = b"TokenSwap" + b"".join(p.encode("utf-8") for p in parts)
    return "0x" + hashlib.sha256(data).hexdigest()[:40]


def _is_amount(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class TokenLedger:
    """Interface for a fungible token ledger."""

    address: Address

    def balance_of(self, owner: Address) -> Amount:
        raise NotImplementedError

    def transfer(self, sender: Address, recipient: Address, amount: Amount) -> bool:
        raise NotImplementedError

    def transfer_from(self, spender: Address, owner: Address, recipient: Address, amount: Amount) -> bool:
        raise NotImplementedError


class Token(TokenLedger):
    """
    ERC-20 style token with a fixed supply minted to the deployer.

    `transfer_from` requires `owner` to have approved `spender` for at least
    `amount` via `approve`; the allowance is consumed on success.
    """

    def __init__(
        self,
        name: str,
        symbol: str,
        initial_supply: Amount,
        deployer: Address,
        *,
        decimals: int = DEFAULT_DECIMALS,
        address: Optional[Address] = None,
    ) -> None:
        if not name or not symbol:
            raise ValueError("token name and symbol must be non-empty")
        if not _is_amount(initial_supply):
            raise ValueError(f"initial_supply must be a non-negative int: {initial_supply!r}")
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self.address = address or derive_address("Token", name, symbol, deployer)
        self._balances = BalanceTable()
        self._allowances: Dict[Tuple[Address, Address], Amount] = {}
        self._total_supply = initial_supply
        self._balances.set(deployer, initial_supply)

    @property
    def total_supply(self) -> Amount:
        return self._total_supply

    def balance_of(self, owner: Address) -> Amount:
        return self._balances.get(owner)

    def allowance(self, owner: Address, spender: Address) -> Amount:
        return self._allowances.get((owner, spender), 0)

    def approve(self, owner: Address, spender: Address, amount: Amount) -> bool:
        if not _is_amount(amount):
            return False
        if amount == 0:
            self._allowances.pop((owner, spender), None)
        else:
            self._allowances[(owner, spender)] = amount
        return True

    def transfer(self, sender: Address, recipient: Address, amount: Amount) -> bool:
        if not _is_amount(amount) or self._balances.get(sender) < amount:
            return False
        self._balances.move(sender, recipient, amount)
        return True

    def transfer_from(self, spender: Address, owner: Address, recipient: Address, amount: Amount) -> bool:
        if not _is_amount(amount):
            return False
        allowed = self.allowance(owner, spender)
        if allowed < amount or self._balances.get(owner) < amount:
            return False
        self._balances.move(owner, recipient, amount)
        self.approve(owner, spender, allowed - amount)
        return True

    def __repr__(self) -> str:
        return f"Token({self.symbol}, address={self.address}, supply={self._total_supply})"


class EtherLedger:
    """Native base-asset balances (the value attached to exchange calls)."""

    def __init__(self) -> None:
        self._balances = BalanceTable()

    def get_balance(self, address: Address) -> Amount:
        return self._balances.get(address)

    def mint(self, address: Address, amount: Amount) -> None:
        """Credit new base asset to address (test and simulation funding)."""
        if not _is_amount(amount):
            raise ValueError(f"mint amount must be a non-negative int: {amount!r}")
        self._balances.add(address, amount)

    def transfer(self, sender: Address, recipient: Address, amount: Amount) -> bool:
        if not _is_amount(amount) or self._balances.get(sender) < amount:
            return False
        self._balances.move(sender, recipient, amount)
        return True

    def total(self) -> Amount:
        return self._balances.total()

    def __repr__(self) -> str:
        return f"EtherLedger({len(self._balances)} accounts)"
