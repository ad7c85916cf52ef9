"""
Token/ether exchange: a single constant-product pool.

This is the imperative shell around the pure math in `cpmm.py`. Each public
operation:

1. Validates inputs and computes the new `PoolState` (checks).
2. Installs the new pool state and share balances (effects).
3. Moves value through the token and ether ledgers (interactions).

Steps 2 and 3 run inside a `Transaction`, so a rejected transfer restores the
pool, the share table, and any transfers that already completed. Every
operation holds the exchange lock for its whole duration, and a ledger
callback that tries to start another mutating operation on the same thread
is rejected with `ReentrantCall`.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import replace
from enum import Enum
from typing import Callable, Dict, Iterator, Optional, Tuple

from ..config import ExchangeConfig
from ..state.balances import ZERO_ADDRESS, Address, Amount
from ..state.pool import PoolState
from ..state.shares import ShareTable
from ..state.token import EtherLedger, TokenLedger, derive_address
from . import cpmm
from .errors import (
    InsufficientShares,
    InvalidAddress,
    InvalidAmount,
    InvariantViolation,
    ReentrantCall,
    SlippageExceeded,
    TransferFailed,
)
from .invariants import check_all, check_swap_product
from .transaction import Transaction, TransactionError

logger = logging.getLogger(__name__)


class SwapDirection(Enum):
    BASE_TO_TOKEN = "base_to_token"
    TOKEN_TO_BASE = "token_to_base"


def _require_amount(name: str, value: int, *, allow_zero: bool = False) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0 or (value == 0 and not allow_zero):
        bound = "non-negative" if allow_zero else "positive"
        raise InvalidAmount(f"{name} must be {bound}: {value}")


class Exchange:
    """
    Liquidity pool between one token and the base asset.

    Attributes:
        token: Ledger of the traded token
        ether: Ledger of the base asset
        token_address: Address of the traded token
        address: The exchange's own account on both ledgers
        config: Runtime configuration
    """

    def __init__(
        self,
        token: TokenLedger,
        ether: EtherLedger,
        *,
        config: Optional[ExchangeConfig] = None,
        address: Optional[Address] = None,
    ) -> None:
        token_address = getattr(token, "address", None)
        if not token_address or token_address == ZERO_ADDRESS:
            raise InvalidAddress("invalid token address")
        self.token = token
        self.ether = ether
        self.token_address: Address = token_address
        self.address: Address = address or derive_address("Exchange", token_address)
        self.config = config or ExchangeConfig()
        self._pool = PoolState()
        self._shares = ShareTable()
        self._lock = threading.RLock()
        self._active: Optional[str] = None

    # ------------------------------------------------------------------
    # Read-only surface
    # ------------------------------------------------------------------

    def snapshot(self) -> PoolState:
        """Current pool state (immutable)."""
        with self._lock:
            return self._pool

    def get_reserve(self) -> Amount:
        """Token reserve held by the pool."""
        with self._lock:
            return self._pool.reserve_token

    def get_base_reserve(self) -> Amount:
        with self._lock:
            return self._pool.reserve_base

    @property
    def total_shares(self) -> Amount:
        with self._lock:
            return self._pool.total_shares

    def shares_of(self, provider: Address) -> Amount:
        with self._lock:
            return self._shares.get(provider)

    def share_balances(self) -> Dict[Address, Amount]:
        with self._lock:
            return self._shares.get_all_balances()

    def get_price(self, input_reserve: Amount, output_reserve: Amount) -> Amount:
        """Spot price input/output scaled by `cpmm.PRICE_PRECISION`."""
        return cpmm.get_price(input_reserve, output_reserve)

    def get_token_amount(self, base_amount_in: Amount) -> Amount:
        """Tokens received for selling `base_amount_in` of the base asset."""
        with self._lock:
            pool = self._pool
            return cpmm.quote_output(pool.reserve_base, pool.reserve_token, base_amount_in)

    def get_eth_amount(self, token_amount_in: Amount) -> Amount:
        """Base asset received for selling `token_amount_in` tokens."""
        with self._lock:
            pool = self._pool
            return cpmm.quote_output(pool.reserve_token, pool.reserve_base, token_amount_in)

    # ------------------------------------------------------------------
    # Liquidity
    # ------------------------------------------------------------------

    def add_liquidity(self, caller: Address, token_amount: Amount, base_amount: Amount) -> Amount:
        """
        Deposit tokens and the attached base asset; returns shares minted.

        The first deposit sets the price and mints `base_amount` shares. Later
        deposits take `base_amount * reserve_token // reserve_base` tokens
        (rejecting an under-supplied `token_amount`) and mint shares in
        proportion to `base_amount / reserve_base`.
        """
        _require_amount("token_amount", token_amount)
        _require_amount("base_amount", base_amount)
        with self._operation("add_liquidity"):
            pool = self._pool
            token_used, minted = cpmm.compute_deposit(
                pool.reserve_token,
                pool.reserve_base,
                pool.total_shares,
                token_amount,
                base_amount,
                ratio_policy=self.config.ratio_policy,
            )
            new_pool = replace(
                pool,
                reserve_token=pool.reserve_token + token_used,
                reserve_base=pool.reserve_base + base_amount,
                total_shares=pool.total_shares + minted,
            )
            with self._transaction("add_liquidity") as tx:
                self._pool = new_pool
                self._shares.mint(caller, minted)
                self._pull_base(tx, caller, base_amount)
                self._pull_token(tx, caller, token_used)
                self._check_invariants()
            logger.info(
                "add_liquidity provider=%s token=%d base=%d shares=%d first=%s",
                caller, token_used, base_amount, minted, pool.is_empty(),
            )
            return minted

    def remove_liquidity(self, caller: Address, shares_amount: Amount) -> Tuple[Amount, Amount]:
        """Burn shares; returns (token_out, base_out) paid to the caller."""
        _require_amount("shares_amount", shares_amount)
        with self._operation("remove_liquidity"):
            held = self._shares.get(caller)
            if shares_amount > held:
                raise InsufficientShares(f"insufficient shares: {held} < {shares_amount}")
            pool = self._pool
            token_out, base_out = cpmm.compute_withdrawal(
                shares_amount,
                pool.reserve_token,
                pool.reserve_base,
                pool.total_shares,
            )
            new_pool = replace(
                pool,
                reserve_token=pool.reserve_token - token_out,
                reserve_base=pool.reserve_base - base_out,
                total_shares=pool.total_shares - shares_amount,
            )
            with self._transaction("remove_liquidity") as tx:
                self._pool = new_pool
                self._shares.burn(caller, shares_amount)
                self._push_token(tx, caller, token_out)
                self._push_base(tx, caller, base_out)
                self._check_invariants()
            logger.info(
                "remove_liquidity provider=%s shares=%d token=%d base=%d",
                caller, shares_amount, token_out, base_out,
            )
            return token_out, base_out

    # ------------------------------------------------------------------
    # Swaps
    # ------------------------------------------------------------------

    def swap(
        self,
        caller: Address,
        direction: SwapDirection,
        input_amount: Amount,
        min_output: Amount = 0,
    ) -> Amount:
        """
        Sell `input_amount` of one asset for the other; returns the output amount.

        Raises SlippageExceeded if the output is below `min_output`.
        """
        direction = SwapDirection(direction)
        _require_amount("input_amount", input_amount)
        _require_amount("min_output", min_output, allow_zero=True)
        with self._operation("swap"):
            pool = self._pool
            if direction is SwapDirection.BASE_TO_TOKEN:
                output = cpmm.quote_output(pool.reserve_base, pool.reserve_token, input_amount)
                new_pool = replace(
                    pool,
                    reserve_base=pool.reserve_base + input_amount,
                    reserve_token=pool.reserve_token - output,
                )
            else:
                output = cpmm.quote_output(pool.reserve_token, pool.reserve_base, input_amount)
                new_pool = replace(
                    pool,
                    reserve_token=pool.reserve_token + input_amount,
                    reserve_base=pool.reserve_base - output,
                )
            if output < min_output:
                raise SlippageExceeded(output, min_output)

            with self._transaction("swap") as tx:
                self._pool = new_pool
                if direction is SwapDirection.BASE_TO_TOKEN:
                    self._pull_base(tx, caller, input_amount)
                    self._push_token(tx, caller, output)
                else:
                    self._pull_token(tx, caller, input_amount)
                    self._push_base(tx, caller, output)
                violations = check_swap_product(pool, self._pool)
                if violations:
                    raise InvariantViolation(violations)
                self._check_invariants()
            logger.info(
                "swap trader=%s direction=%s in=%d out=%d",
                caller, direction.value, input_amount, output,
            )
            return output

    def swap_base_for_token(self, caller: Address, base_amount_in: Amount, min_token_out: Amount = 0) -> Amount:
        return self.swap(caller, SwapDirection.BASE_TO_TOKEN, base_amount_in, min_token_out)

    def swap_token_for_base(self, caller: Address, token_amount_in: Amount, min_base_out: Amount = 0) -> Amount:
        return self.swap(caller, SwapDirection.TOKEN_TO_BASE, token_amount_in, min_base_out)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        """Hold the lock and mark `name` as the one mutating operation in progress."""
        with self._lock:
            if self._active is not None:
                raise ReentrantCall(f"{name} called while {self._active} is in progress")
            self._active = name
            try:
                yield
            finally:
                self._active = None

    def _transaction(self, name: str) -> Transaction:
        def snapshot() -> Tuple[PoolState, Dict[Address, Amount]]:
            return self._pool, self._shares.get_all_balances()

        def restore(saved: Tuple[PoolState, Dict[Address, Amount]]) -> None:
            self._pool, shares = saved
            self._shares.restore(shares)

        return Transaction(name, snapshot=snapshot, restore=restore)

    def _check_invariants(self) -> None:
        if not self.config.check_invariants:
            return
        violations = check_all(self._pool, self._shares)
        if violations:
            raise InvariantViolation(violations)

    @staticmethod
    def _compensate(what: str, transfer: Callable[..., bool], *args) -> Callable[[], None]:
        def undo() -> None:
            if not transfer(*args):
                raise TransactionError(f"could not reverse {what}")

        return undo

    def _pull_token(self, tx: Transaction, caller: Address, amount: Amount) -> None:
        if amount == 0:
            return
        if not self.token.transfer_from(self.address, caller, self.address, amount):
            raise TransferFailed(f"token transfer of {amount} from {caller} rejected")
        tx.add_compensation(
            self._compensate("token pull", self.token.transfer, self.address, caller, amount)
        )

    def _push_token(self, tx: Transaction, caller: Address, amount: Amount) -> None:
        if amount == 0:
            return
        if not self.token.transfer(self.address, caller, amount):
            raise TransferFailed(f"token transfer of {amount} to {caller} rejected")
        tx.add_compensation(
            self._compensate("token payout", self.token.transfer, caller, self.address, amount)
        )

    def _pull_base(self, tx: Transaction, caller: Address, amount: Amount) -> None:
        if amount == 0:
            return
        if not self.ether.transfer(caller, self.address, amount):
            raise TransferFailed(f"base transfer of {amount} from {caller} rejected")
        tx.add_compensation(
            self._compensate("base pull", self.ether.transfer, self.address, caller, amount)
        )

    def _push_base(self, tx: Transaction, caller: Address, amount: Amount) -> None:
        if amount == 0:
            return
        if not self.ether.transfer(self.address, caller, amount):
            raise TransferFailed(f"base transfer of {amount} to {caller} rejected")
        tx.add_compensation(
            self._compensate("base payout", self.ether.transfer, caller, self.address, amount)
        )

    def __repr__(self) -> str:
        return f"Exchange(token={self.token_address}, {self._pool!r})"
