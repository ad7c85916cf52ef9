from __future__ import annotations

import textwrap
from pathlib import Path

from tokenswap.cli import main

ROOT = Path(__file__).resolve().parents[2]


def test_quote_prints_decimal_output(capsys) -> None:
    rc = main(["quote", "--input-reserve", "1000", "--output-reserve", "2000", "--amount", "1"])
    assert rc == 0
    assert capsys.readouterr().out.strip() == "1.998001998001998001"


def test_quote_reports_empty_reserve(capsys) -> None:
    rc = main(["quote", "--input-reserve", "0", "--output-reserve", "2000", "--amount", "1"])
    assert rc == 1
    assert "error:" in capsys.readouterr().err


def test_bundled_scenario_replays(capsys) -> None:
    rc = main(["simulate", str(ROOT / "scenarios" / "seed_and_swap.yaml")])
    out = capsys.readouterr().out
    assert rc == 0, out
    assert "FAIL" not in out
    assert "rejected as expected (SlippageExceeded)" in out
    assert "rejected as expected (RatioMismatch)" in out


def test_scenario_with_unexpected_failure_exits_nonzero(tmp_path, capsys) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text(
        textwrap.dedent(
            """
            deployer: alice
            accounts:
              alice: {ether: "10"}
            steps:
              - {op: add_liquidity, caller: alice, token: "20", base: "10"}
              - {op: swap_base_for_token, caller: alice, amount: "1"}
            """
        ),
        encoding="utf-8",
    )
    rc = main(["simulate", str(path)])
    out = capsys.readouterr().out
    assert rc == 1
    assert "[2] swap_base_for_token by alice: FAIL TransferFailed" in out


def test_scenario_config_overrides_ratio_policy(tmp_path, capsys) -> None:
    path = tmp_path / "exact.yaml"
    path.write_text(
        textwrap.dedent(
            """
            config: {ratio_policy: exact}
            deployer: alice
            accounts:
              alice: {ether: "100"}
            steps:
              - {op: add_liquidity, caller: alice, token: "20", base: "10"}
              - {op: add_liquidity, caller: alice, token: "3", base: "1", expect_error: RatioMismatch}
              - {op: add_liquidity, caller: alice, token: "2", base: "1"}
            """
        ),
        encoding="utf-8",
    )
    assert main(["simulate", str(path)]) == 0
    assert "total_shares=11.0" in capsys.readouterr().out


def test_malformed_scenario_is_reported(tmp_path, capsys) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("steps:\n  - {op: mint, caller: deployer}\n", encoding="utf-8")
    assert main(["simulate", str(path)]) == 1
    assert "unknown op" in capsys.readouterr().err


def test_config_file_is_loaded(tmp_path, capsys) -> None:
    path = tmp_path / "cfg.yaml"
    path.write_text("decimals: 2\n", encoding="utf-8")
    rc = main(["--config", str(path), "quote", "--input-reserve", "10", "--output-reserve", "20", "--amount", "10"])
    assert rc == 0
    assert capsys.readouterr().out.strip() == "10.0"
