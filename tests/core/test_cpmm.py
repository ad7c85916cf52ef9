# [TESTER] v1

from __future__ import annotations

import pytest

from tokenswap.core.cpmm import (
    PRICE_PRECISION,
    compute_deposit,
    compute_withdrawal,
    get_price,
    quote_output,
    required_token_amount,
)
from tokenswap.core.errors import InsufficientLiquidity, InvalidAmount, RatioMismatch

E18 = 10**18


def test_quote_output_matches_reference_values() -> None:
    # 2000 TOKEN / 1000 ether pool.
    reserve_token, reserve_base = 2000 * E18, 1000 * E18
    assert quote_output(reserve_base, reserve_token, 1 * E18) == 1_998_001_998_001_998_001
    assert quote_output(reserve_base, reserve_token, 100 * E18) == 181_818_181_818_181_818_181
    assert quote_output(reserve_base, reserve_token, 1000 * E18) == 1000 * E18
    assert quote_output(reserve_token, reserve_base, 2 * E18) == 999_000_999_000_999_000
    assert quote_output(reserve_token, reserve_base, 100 * E18) == 47_619_047_619_047_619_047
    assert quote_output(reserve_token, reserve_base, 2000 * E18) == 500 * E18


def test_quote_output_truncates_toward_zero() -> None:
    # 1 * 10 / (3 + 1) = 2.5
    assert quote_output(3, 10, 1) == 2
    # Tiny trades against a deep pool can round to nothing.
    assert quote_output(10**30, 1, 1) == 0


def test_quote_output_never_drains_reserve() -> None:
    out = quote_output(1, 1000, 10**40)
    assert out < 1000
    assert out == 999


def test_quote_output_rejects_empty_reserves() -> None:
    with pytest.raises(InsufficientLiquidity):
        quote_output(0, 100, 1)
    with pytest.raises(InsufficientLiquidity):
        quote_output(100, 0, 1)


@pytest.mark.parametrize("amount", [0, -1])
def test_quote_output_rejects_non_positive_input(amount: int) -> None:
    with pytest.raises(InvalidAmount):
        quote_output(100, 100, amount)


def test_quote_output_rejects_non_int() -> None:
    with pytest.raises(TypeError):
        quote_output(100, 100, 1.5)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        quote_output(100, True, 1)  # type: ignore[arg-type]


def test_get_price_is_scaled() -> None:
    assert get_price(2000 * E18, 1000 * E18) == 2 * PRICE_PRECISION
    assert get_price(1000 * E18, 2000 * E18) == PRICE_PRECISION // 2
    with pytest.raises(InsufficientLiquidity):
        get_price(0, 1)


def test_first_deposit_mints_base_amount() -> None:
    token_used, shares = compute_deposit(0, 0, 0, 100 * E18, 1 * E18)
    assert token_used == 100 * E18
    assert shares == 1 * E18


def test_subsequent_deposit_takes_ratio_amount() -> None:
    token_used, shares = compute_deposit(2000, 1000, 1000, 500, 100)
    assert token_used == 200
    assert shares == 100


def test_subsequent_deposit_rejects_under_supply() -> None:
    with pytest.raises(RatioMismatch) as excinfo:
        compute_deposit(2000, 1000, 1000, 199, 100)
    assert excinfo.value.required == 200
    assert excinfo.value.supplied == 199


def test_exact_policy_rejects_over_supply() -> None:
    with pytest.raises(RatioMismatch):
        compute_deposit(2000, 1000, 1000, 201, 100, ratio_policy="exact")
    assert compute_deposit(2000, 1000, 1000, 200, 100, ratio_policy="exact") == (200, 100)


def test_unknown_policy_is_rejected() -> None:
    with pytest.raises(ValueError):
        compute_deposit(2000, 1000, 1000, 200, 100, ratio_policy="refund")


def test_deposit_too_small_to_mint_is_rejected() -> None:
    # shares = 1 * 1 // 1000 == 0
    with pytest.raises(InvalidAmount):
        compute_deposit(2000, 1000, 1, 10, 1)


def test_required_token_amount_floors() -> None:
    assert required_token_amount(1, 2, 3) == 0
    assert required_token_amount(3, 2, 3) == 2
    with pytest.raises(InsufficientLiquidity):
        required_token_amount(1, 1, 0)


def test_withdrawal_is_proportional_and_full_burn_is_exact() -> None:
    assert compute_withdrawal(1, 7, 5, 3) == (2, 1)
    assert compute_withdrawal(3, 7, 5, 3) == (7, 5)


def test_withdrawal_rejects_bad_amounts() -> None:
    with pytest.raises(InvalidAmount):
        compute_withdrawal(0, 7, 5, 3)
    with pytest.raises(InsufficientLiquidity):
        compute_withdrawal(1, 0, 0, 0)
    with pytest.raises(ValueError):
        compute_withdrawal(4, 7, 5, 3)
