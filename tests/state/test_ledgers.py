# [TESTER] v1

from __future__ import annotations

import pytest

from tokenswap.state import BalanceTable, EtherLedger, PoolState, ShareTable, Token, derive_address

ALICE = derive_address("Account", "alice")
BOB = derive_address("Account", "bob")
SPENDER = derive_address("Exchange", "spender")


def test_balance_table_stays_sparse() -> None:
    table = BalanceTable()
    table.set(ALICE, 10)
    table.add(ALICE, -10)
    assert table.get(ALICE) == 0
    assert table.get_all_balances() == {}
    assert len(table) == 0


def test_balance_table_rejects_overdraft() -> None:
    table = BalanceTable()
    table.set(ALICE, 5)
    with pytest.raises(ValueError):
        table.subtract(ALICE, 6)
    with pytest.raises(ValueError):
        table.move(ALICE, BOB, 6)
    assert table.get(ALICE) == 5
    assert table.get(BOB) == 0


def test_share_table_mint_and_burn() -> None:
    shares = ShareTable()
    shares.mint(ALICE, 7)
    shares.mint(BOB, 3)
    shares.burn(ALICE, 7)
    assert shares.get_all_balances() == {BOB: 3}
    assert shares.total() == 3
    with pytest.raises(ValueError):
        shares.burn(BOB, 4)
    shares.restore({ALICE: 1, BOB: 0})
    assert shares.get_all_balances() == {ALICE: 1}


def test_pool_state_validates_fields() -> None:
    assert PoolState().is_empty()
    with pytest.raises(ValueError):
        PoolState(reserve_token=-1)
    with pytest.raises(TypeError):
        PoolState(reserve_base=1.0)  # type: ignore[arg-type]
    pool = PoolState(reserve_token=4, reserve_base=5, total_shares=5)
    assert pool.get_constant_product() == 20
    assert pool.to_dict() == {"reserve_token": 4, "reserve_base": 5, "total_shares": 5}


def test_token_mints_supply_to_deployer() -> None:
    token = Token("TOKEN", "TKN", 1_000, ALICE)
    assert token.total_supply == 1_000
    assert token.balance_of(ALICE) == 1_000
    assert token.decimals == 18
    assert token.address.startswith("0x") and len(token.address) == 42
    assert token.address == Token("TOKEN", "TKN", 5, ALICE).address


def test_token_transfer_reports_failure_without_moving() -> None:
    token = Token("TOKEN", "TKN", 100, ALICE)
    assert not token.transfer(ALICE, BOB, 101)
    assert not token.transfer(ALICE, BOB, -1)
    assert token.transfer(ALICE, BOB, 40)
    assert (token.balance_of(ALICE), token.balance_of(BOB)) == (60, 40)


def test_transfer_from_consumes_allowance() -> None:
    token = Token("TOKEN", "TKN", 100, ALICE)
    assert not token.transfer_from(SPENDER, ALICE, SPENDER, 10)

    assert token.approve(ALICE, SPENDER, 30)
    assert token.transfer_from(SPENDER, ALICE, SPENDER, 10)
    assert token.allowance(ALICE, SPENDER) == 20
    assert token.balance_of(SPENDER) == 10

    assert not token.transfer_from(SPENDER, ALICE, SPENDER, 21)
    assert token.transfer_from(SPENDER, ALICE, BOB, 20)
    assert token.allowance(ALICE, SPENDER) == 0
    assert token.balance_of(ALICE) == 70


def test_transfer_from_checks_balance_as_well_as_allowance() -> None:
    token = Token("TOKEN", "TKN", 5, ALICE)
    token.approve(ALICE, SPENDER, 100)
    assert not token.transfer_from(SPENDER, ALICE, SPENDER, 6)
    assert token.allowance(ALICE, SPENDER) == 100


def test_token_rejects_bad_construction() -> None:
    with pytest.raises(ValueError):
        Token("", "TKN", 1, ALICE)
    with pytest.raises(ValueError):
        Token("TOKEN", "TKN", -1, ALICE)


def test_ether_ledger() -> None:
    ether = EtherLedger()
    ether.mint(ALICE, 10)
    assert ether.transfer(ALICE, BOB, 4)
    assert not ether.transfer(ALICE, BOB, 7)
    assert (ether.get_balance(ALICE), ether.get_balance(BOB)) == (6, 4)
    assert ether.total() == 10
    with pytest.raises(ValueError):
        ether.mint(ALICE, -1)
