from __future__ import annotations

import pytest

from tokenswap.config import ExchangeConfig, config_from_mapping, load_config


def test_defaults() -> None:
    config = load_config(environ={})
    assert config == ExchangeConfig()
    assert config.decimals == 18
    assert config.ratio_policy == "minimum"
    assert config.check_invariants is True


def test_yaml_file_then_environment(tmp_path) -> None:
    path = tmp_path / "tokenswap.yaml"
    path.write_text("ratio_policy: exact\nlog_level: debug\ndecimals: 6\n", encoding="utf-8")

    config = load_config(path, environ={})
    assert (config.ratio_policy, config.log_level, config.decimals) == ("exact", "DEBUG", 6)

    config = load_config(path, environ={"TOKENSWAP_RATIO_POLICY": "Minimum", "TOKENSWAP_CHECK_INVARIANTS": "off"})
    assert config.ratio_policy == "minimum"
    assert config.check_invariants is False
    assert config.decimals == 6


def test_empty_yaml_file_means_defaults(tmp_path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path, environ={}) == ExchangeConfig()


def test_rejects_unknown_keys_and_bad_values(tmp_path) -> None:
    with pytest.raises(ValueError, match="unknown config keys: fee_bps"):
        config_from_mapping({"fee_bps": 30})
    with pytest.raises(ValueError):
        ExchangeConfig(ratio_policy="refund")
    with pytest.raises(ValueError):
        load_config(environ={"TOKENSWAP_DECIMALS": "eighteen"})
    with pytest.raises(ValueError):
        load_config(environ={"TOKENSWAP_CHECK_INVARIANTS": "maybe"})

    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path, environ={})
