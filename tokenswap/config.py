"""
Exchange configuration.

Values are resolved in order: dataclass defaults, then an optional YAML file,
then `TOKENSWAP_*` environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

ENV_PREFIX = "TOKENSWAP_"

RATIO_POLICY_MINIMUM = "minimum"
RATIO_POLICY_EXACT = "exact"
RATIO_POLICIES = (RATIO_POLICY_MINIMUM, RATIO_POLICY_EXACT)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ExchangeConfig:
    # Fixed-point scale of user-facing amounts (18 = wei/ether).
    decimals: int = 18

    # Deposit ratio handling for non-initial add_liquidity:
    # - "minimum": token_amount must cover the ratio-required amount; only that amount is taken.
    # - "exact": token_amount must equal the ratio-required amount.
    ratio_policy: str = RATIO_POLICY_MINIMUM

    # Run the full invariant registry after every mutating operation.
    # The swap product check runs regardless.
    check_invariants: bool = True

    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not isinstance(self.decimals, int) or isinstance(self.decimals, bool) or not (0 <= self.decimals <= 77):
            raise ValueError(f"decimals must be an int in [0, 77]: {self.decimals!r}")
        if self.ratio_policy not in RATIO_POLICIES:
            raise ValueError(f"ratio_policy must be one of {RATIO_POLICIES}: {self.ratio_policy!r}")
        if not isinstance(self.check_invariants, bool):
            raise ValueError("check_invariants must be a bool")
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_LOG_LEVELS}: {self.log_level!r}")


def _parse_bool(name: str, raw: str) -> bool:
    v = raw.strip().lower()
    if v in ("1", "true", "yes", "on"):
        return True
    if v in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    raw = environ.get(ENV_PREFIX + "DECIMALS")
    if raw is not None and raw.strip():
        try:
            out["decimals"] = int(raw.strip())
        except ValueError as exc:
            raise ValueError(f"{ENV_PREFIX}DECIMALS must be an int: {raw!r}") from exc
    raw = environ.get(ENV_PREFIX + "RATIO_POLICY")
    if raw is not None and raw.strip():
        out["ratio_policy"] = raw.strip().lower()
    raw = environ.get(ENV_PREFIX + "CHECK_INVARIANTS")
    if raw is not None and raw.strip():
        out["check_invariants"] = _parse_bool(ENV_PREFIX + "CHECK_INVARIANTS", raw)
    raw = environ.get(ENV_PREFIX + "LOG_LEVEL")
    if raw is not None and raw.strip():
        out["log_level"] = raw.strip().upper()
    return out


def config_from_mapping(data: Mapping[str, Any], *, base: Optional[ExchangeConfig] = None) -> ExchangeConfig:
    """Apply a mapping of overrides to `base` (or the defaults); unknown keys are rejected."""
    known = {f.name for f in fields(ExchangeConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"unknown config keys: {', '.join(unknown)}")
    values = dict(data)
    if isinstance(values.get("log_level"), str):
        values["log_level"] = values["log_level"].upper()
    return replace(base or ExchangeConfig(), **values)


def load_config(
    path: Optional[Union[str, Path]] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> ExchangeConfig:
    """
    Load configuration from an optional YAML file and the environment.

    The YAML document must be a mapping of ExchangeConfig field names; an empty
    file is treated as no overrides.
    """
    config = ExchangeConfig()
    if path is not None:
        obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
        if obj is None:
            obj = {}
        if not isinstance(obj, dict):
            raise ValueError(f"config file must contain a mapping: {path}")
        config = config_from_mapping(obj, base=config)
    env = os.environ if environ is None else environ
    overrides = _env_overrides(env)
    if overrides:
        config = replace(config, **overrides)
    return config
