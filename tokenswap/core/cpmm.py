"""
Constant Product Market Maker (CPMM) math for a token/ether pool.

All functions are pure and operate on non-negative Python ints with floor
division; results are bit-exact with 256-bit unsigned contract arithmetic for
every input that does not overflow there.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Deterministic Rounding
- Time Complexity: O(1) per operation
- Invariant: After each swap, x' * y' >= x * y (no fee; truncation of the
  output keeps the product from decreasing)
"""

from __future__ import annotations

from typing import Tuple

from ..config import RATIO_POLICIES, RATIO_POLICY_EXACT, RATIO_POLICY_MINIMUM
from ..state.balances import Amount
from .errors import InsufficientLiquidity, InvalidAmount, RatioMismatch

# Spot prices are reported scaled by this factor.
PRICE_PRECISION = 1000


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def quote_output(input_reserve: Amount, output_reserve: Amount, input_amount: Amount) -> Amount:
    """
    Compute the output of a swap against the constant-product curve.

        output = floor(input_amount * output_reserve / (input_reserve + input_amount))

    No fee is charged. Because input_reserve > 0, the denominator is strictly
    larger than input_amount and the output is strictly below output_reserve.

    Raises:
        InvalidAmount: If input_amount is not positive
        InsufficientLiquidity: If either reserve is empty
    """
    for name, v in (
        ("input_reserve", input_reserve),
        ("output_reserve", output_reserve),
        ("input_amount", input_amount),
    ):
        _require_int(name, v)

    if input_amount <= 0:
        raise InvalidAmount(f"input_amount must be positive: {input_amount}")
    if input_reserve <= 0 or output_reserve <= 0:
        raise InsufficientLiquidity(
            f"Reserves must be positive: ({input_reserve}, {output_reserve})"
        )

    return (input_amount * output_reserve) // (input_reserve + input_amount)


def get_price(input_reserve: Amount, output_reserve: Amount) -> Amount:
    """
    Spot price of the input asset in output units, scaled by PRICE_PRECISION.

        price = floor(input_reserve * PRICE_PRECISION / output_reserve)
    """
    _require_int("input_reserve", input_reserve)
    _require_int("output_reserve", output_reserve)
    if input_reserve <= 0 or output_reserve <= 0:
        raise InsufficientLiquidity(
            f"Reserves must be positive: ({input_reserve}, {output_reserve})"
        )
    return (input_reserve * PRICE_PRECISION) // output_reserve


def required_token_amount(base_amount: Amount, reserve_token: Amount, reserve_base: Amount) -> Amount:
    """Token amount that matches base_amount at the current reserve ratio (floor)."""
    if reserve_base <= 0:
        raise InsufficientLiquidity("Cannot price a deposit against an empty pool")
    return (base_amount * reserve_token) // reserve_base


def compute_deposit(
    reserve_token: Amount,
    reserve_base: Amount,
    total_shares: Amount,
    token_amount: Amount,
    base_amount: Amount,
    *,
    ratio_policy: str = RATIO_POLICY_MINIMUM,
) -> Tuple[Amount, Amount]:
    """
    Compute the token amount consumed and shares minted for a deposit.

    For the first deposit (total_shares == 0):
        token_used = token_amount
        shares = base_amount

    For subsequent deposits:
        token_used = floor(base_amount * reserve_token / reserve_base)
        shares = floor(total_shares * base_amount / reserve_base)

    Under the "minimum" policy a token_amount above token_used is accepted and
    only token_used is consumed; under "exact" it must equal token_used.

    Returns:
        Tuple of (token_used, shares_minted)

    Raises:
        InvalidAmount: If an amount is not positive or the deposit mints no shares
        RatioMismatch: If token_amount does not satisfy the reserve ratio
    """
    for name, v in (
        ("reserve_token", reserve_token),
        ("reserve_base", reserve_base),
        ("total_shares", total_shares),
        ("token_amount", token_amount),
        ("base_amount", base_amount),
    ):
        _require_int(name, v)

    if ratio_policy not in RATIO_POLICIES:
        raise ValueError(f"unknown ratio_policy: {ratio_policy!r}")
    if token_amount <= 0:
        raise InvalidAmount(f"token_amount must be positive: {token_amount}")
    if base_amount <= 0:
        raise InvalidAmount(f"base_amount must be positive: {base_amount}")

    if total_shares == 0:
        return token_amount, base_amount

    token_used = required_token_amount(base_amount, reserve_token, reserve_base)
    if token_amount < token_used:
        raise RatioMismatch(token_amount, token_used)
    if ratio_policy == RATIO_POLICY_EXACT and token_amount != token_used:
        raise RatioMismatch(token_amount, token_used)

    shares = (total_shares * base_amount) // reserve_base
    if shares <= 0:
        raise InvalidAmount(f"Deposit too small to mint shares: {base_amount}")

    return token_used, shares


def compute_withdrawal(
    shares_amount: Amount,
    reserve_token: Amount,
    reserve_base: Amount,
    total_shares: Amount,
) -> Tuple[Amount, Amount]:
    """
    Compute asset amounts returned for burning shares.

        token_out = floor(reserve_token * shares_amount / total_shares)
        base_out = floor(reserve_base * shares_amount / total_shares)

    Burning the whole supply returns both reserves exactly.
    """
    if shares_amount <= 0:
        raise InvalidAmount(f"shares_amount must be positive: {shares_amount}")
    if total_shares <= 0:
        raise InsufficientLiquidity("Cannot withdraw from an empty pool")
    if shares_amount > total_shares:
        raise ValueError(f"Cannot burn more shares than supply: {shares_amount} > {total_shares}")

    token_out = (reserve_token * shares_amount) // total_shares
    base_out = (reserve_base * shares_amount) // total_shares
    return token_out, base_out
