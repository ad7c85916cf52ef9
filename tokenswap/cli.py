#!/usr/bin/env python3
"""
Command-line entry point.

    tokenswap quote --input-reserve 1000 --output-reserve 2000 --amount 1
    tokenswap simulate scenarios/seed_and_swap.yaml

Amounts on the command line and in scenario files are decimal strings in
whole units (ether / TOKEN); they are converted with `units.to_wei`.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence

import yaml

from . import units
from .config import ExchangeConfig, config_from_mapping, load_config
from .core import errors
from .core.exchange import Exchange
from .core.cpmm import quote_output
from .logging import configure_logging
from .state.balances import Address
from .state.token import EtherLedger, Token, derive_address

logger = logging.getLogger(__name__)

_STEP_OPS = ("add_liquidity", "remove_liquidity", "swap_base_for_token", "swap_token_for_base")


class ScenarioError(Exception):
    """Raised when a scenario file is malformed or a step does not behave as declared."""


def _amount(value: Any, decimals: int, *, name: str) -> int:
    if isinstance(value, (int, str)) and not isinstance(value, bool):
        try:
            return units.to_wei(str(value), decimals)
        except ValueError as exc:
            raise ScenarioError(f"{name}: {exc}") from exc
    raise ScenarioError(f"{name} must be a decimal string or int, got {value!r}")


def account_address(name: str) -> Address:
    return derive_address("Account", name)


class Scenario:
    """A fresh token, ether ledger, and exchange plus named accounts."""

    def __init__(self, doc: Mapping[str, Any], *, config: ExchangeConfig) -> None:
        if not isinstance(doc, Mapping):
            raise ScenarioError("scenario must be a mapping")
        if "config" in doc:
            if not isinstance(doc["config"], Mapping):
                raise ScenarioError("config must be a mapping")
            config = config_from_mapping(doc["config"], base=config)
        self.config = config
        self.decimals = config.decimals

        token_doc = doc.get("token") or {}
        deployer_name = str(doc.get("deployer", "deployer"))
        self.accounts: Dict[str, Address] = {deployer_name: account_address(deployer_name)}
        self.token = Token(
            str(token_doc.get("name", "TOKEN")),
            str(token_doc.get("symbol", "TKN")),
            _amount(token_doc.get("supply", "1000000"), self.decimals, name="token.supply"),
            self.accounts[deployer_name],
            decimals=self.decimals,
        )
        self.ether = EtherLedger()
        self.exchange = Exchange(self.token, self.ether, config=config)

        accounts = doc.get("accounts") or {}
        if not isinstance(accounts, Mapping):
            raise ScenarioError("accounts must be a mapping")
        for name, funding in accounts.items():
            addr = self.accounts.setdefault(str(name), account_address(str(name)))
            funding = funding or {}
            if "ether" in funding:
                self.ether.mint(addr, _amount(funding["ether"], self.decimals, name=f"{name}.ether"))
            if "token" in funding:
                amount = _amount(funding["token"], self.decimals, name=f"{name}.token")
                if not self.token.transfer(self.accounts[deployer_name], addr, amount):
                    raise ScenarioError(f"deployer cannot fund {name} with {funding['token']} tokens")

    def address(self, name: str) -> Address:
        if name not in self.accounts:
            raise ScenarioError(f"unknown account: {name}")
        return self.accounts[name]

    def run_step(self, step: Mapping[str, Any]) -> Any:
        op = step.get("op")
        if op not in _STEP_OPS:
            raise ScenarioError(f"unknown op {op!r}; expected one of {', '.join(_STEP_OPS)}")
        caller = self.address(str(step.get("caller", "")))
        d = self.decimals
        ex = self.exchange

        if op == "add_liquidity":
            token_amount = _amount(step.get("token"), d, name="token")
            base_amount = _amount(step.get("base"), d, name="base")
            self.token.approve(caller, ex.address, token_amount)
            return ex.add_liquidity(caller, token_amount, base_amount)
        if op == "remove_liquidity":
            raw = step.get("shares", "all")
            shares = ex.shares_of(caller) if raw == "all" else _amount(raw, d, name="shares")
            return ex.remove_liquidity(caller, shares)
        amount = _amount(step.get("amount"), d, name="amount")
        min_out = _amount(step.get("min_out", 0), d, name="min_out")
        if op == "swap_base_for_token":
            return ex.swap_base_for_token(caller, amount, min_out)
        self.token.approve(caller, ex.address, amount)
        return ex.swap_token_for_base(caller, amount, min_out)

    def describe_pool(self) -> str:
        pool = self.exchange.snapshot()
        d = self.decimals
        return (
            f"reserve_token={units.from_wei(pool.reserve_token, d)} "
            f"reserve_base={units.from_wei(pool.reserve_base, d)} "
            f"total_shares={units.from_wei(pool.total_shares, d)}"
        )


def _format_result(result: Any, decimals: int) -> str:
    if isinstance(result, tuple):
        return "(" + ", ".join(units.from_wei(v, decimals) for v in result) + ")"
    return units.from_wei(result, decimals)


def run_scenario(doc: Mapping[str, Any], *, config: ExchangeConfig, out=None) -> int:
    """Replay a scenario; returns the number of failed steps."""
    out = out or sys.stdout
    scenario = Scenario(doc, config=config)
    steps = doc.get("steps") or []
    if not isinstance(steps, list):
        raise ScenarioError("steps must be a list")
    logger.info("replaying %d steps against exchange %s", len(steps), scenario.exchange.address)

    failures = 0
    for i, step in enumerate(steps, start=1):
        if not isinstance(step, Mapping):
            raise ScenarioError(f"step {i} must be a mapping")
        expected = step.get("expect_error")
        label = f"[{i}] {step.get('op')} by {step.get('caller')}"
        try:
            result = scenario.run_step(step)
        except errors.ExchangeError as exc:
            if expected == type(exc).__name__:
                print(f"{label}: rejected as expected ({type(exc).__name__})", file=out)
            else:
                failures += 1
                print(f"{label}: FAIL {type(exc).__name__}: {exc}", file=out)
            continue
        if expected:
            failures += 1
            print(f"{label}: FAIL expected {expected}, got {_format_result(result, scenario.decimals)}", file=out)
            continue
        print(f"{label}: {_format_result(result, scenario.decimals)} | {scenario.describe_pool()}", file=out)
    return failures


def _cmd_quote(args: argparse.Namespace, config: ExchangeConfig) -> int:
    d = config.decimals
    try:
        out = quote_output(
            units.to_wei(args.input_reserve, d),
            units.to_wei(args.output_reserve, d),
            units.to_wei(args.amount, d),
        )
    except (ValueError, errors.ExchangeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(units.from_wei(out, d))
    return 0


def _cmd_simulate(args: argparse.Namespace, config: ExchangeConfig) -> int:
    try:
        doc = yaml.safe_load(Path(args.scenario).read_text(encoding="utf-8"))
        failures = run_scenario(doc or {}, config=config)
    except (OSError, yaml.YAMLError, ScenarioError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 1 if failures else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tokenswap", description="Constant-product token/ether exchange")
    parser.add_argument("--config", type=Path, default=None, help="YAML config file")
    parser.add_argument("--log-level", default=None, help="override the configured log level")
    sub = parser.add_subparsers(dest="command", required=True)

    quote = sub.add_parser("quote", help="quote a swap output for given reserves")
    quote.add_argument("--input-reserve", required=True)
    quote.add_argument("--output-reserve", required=True)
    quote.add_argument("--amount", required=True)
    quote.set_defaults(func=_cmd_quote)

    simulate = sub.add_parser("simulate", help="replay a YAML scenario against a fresh exchange")
    simulate.add_argument("scenario", type=Path)
    simulate.set_defaults(func=_cmd_simulate)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    try:
        config = load_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    configure_logging(getattr(logging, (args.log_level or config.log_level).upper(), logging.INFO))
    return int(args.func(args, config))


if __name__ == "__main__":
    raise SystemExit(main())
