from __future__ import annotations

from pathlib import Path

import pytest

from normcore.config import (BYZANTIUM_BLOCK_REWARD, PRESETS, Fork,
                             ForkSchedule, get_config, load_config, summary)
from normcore.errors import ConfigError


def test_presets_cover_both_chain_families() -> None:
    assert ("ethereum", "mainnet") in PRESETS
    assert ("ethereum", "dev") in PRESETS
    assert ("polkadot", "westend") in PRESETS


def test_ethereum_mainnet_defaults() -> None:
    cfg = load_config("ethereum", "mainnet", env={})
    assert cfg.currency.symbol == "ETH"
    assert cfg.currency.decimals == 18
    assert cfg.max_uncle_depth == 8
    assert cfg.uncle_reward_multiplier == 32
    assert cfg.fee_market_tx_type == 2
    assert [f.name for f in cfg.fork_schedule.forks] == ["frontier", "byzantium", "constantinople"]
    assert cfg.fork_schedule.active_fork(4_370_000).name == "byzantium"


def test_polkadot_presets() -> None:
    cfg = load_config("Polkadot", " Westend ", env={})
    assert (cfg.currency.symbol, cfg.currency.decimals) == ("WND", 12)
    assert load_config("polkadot", "mainnet", env={}).currency.symbol == "DOT"
    assert cfg.fork_schedule.reward_at(10**9) == 0


def test_unknown_network_lists_supported() -> None:
    with pytest.raises(ConfigError) as ei:
        load_config("ethereum", "ropsten", env={})
    assert ei.value.data["key"] == "network"
    assert "ethereum/mainnet" in ei.value.data["supported"]


def test_yaml_file_overrides_preset(tmp_path: Path) -> None:
    p = tmp_path / "net.yaml"
    p.write_text(
        "currency:\n"
        "  symbol: ETC\n"
        "fork_schedule:\n"
        "  - {name: genesis, block: 0, reward: 5000000000000000000}\n"
        "  - {name: later, block: 100, reward: 4000000000000000000}\n"
        "max_uncle_depth: 6\n",
        encoding="utf-8",
    )
    cfg = load_config("ethereum", "mainnet", env={}, config_file=p)
    assert cfg.currency.symbol == "ETC"
    assert cfg.currency.decimals == 18
    assert cfg.max_uncle_depth == 6
    assert cfg.fork_schedule.reward_at(99) == 5 * 10**18
    assert cfg.fork_schedule.reward_at(100) == 4 * 10**18


def test_config_file_from_environment(tmp_path: Path) -> None:
    p = tmp_path / "net.yaml"
    p.write_text("uncle_reward_multiplier: 16\n", encoding="utf-8")
    cfg = load_config("ethereum", "dev", env={"NORMALIZER_CONFIG_FILE": str(p)})
    assert cfg.uncle_reward_multiplier == 16


def test_empty_yaml_file_is_a_no_op(tmp_path: Path) -> None:
    p = tmp_path / "empty.yaml"
    p.write_text("", encoding="utf-8")
    assert load_config("ethereum", "dev", env={}, config_file=p) == load_config("ethereum", "dev", env={})


@pytest.mark.parametrize(
    "content",
    ["- just\n- a list\n", "currency: [unclosed\n"],
)
def test_bad_yaml_file_is_a_config_error(tmp_path: Path, content: str) -> None:
    p = tmp_path / "bad.yaml"
    p.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError) as ei:
        load_config("ethereum", "dev", env={}, config_file=p)
    assert ei.value.data["key"] == "config_file"


def test_missing_yaml_file_is_a_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config("ethereum", "dev", env={}, config_file=tmp_path / "nope.yaml")


def test_environment_overrides_yaml(tmp_path: Path) -> None:
    p = tmp_path / "net.yaml"
    p.write_text("max_uncle_depth: 6\n", encoding="utf-8")
    env = {
        "NORMALIZER_CONFIG_FILE": str(p),
        "NORMALIZER_MAX_UNCLE_DEPTH": "7",
        "NORMALIZER_CURRENCY_SYMBOL": " GOR ",
        "NORMALIZER_CURRENCY_DECIMALS": "9",
    }
    cfg = load_config("ethereum", "dev", env=env)
    assert cfg.max_uncle_depth == 7
    assert cfg.currency.symbol == "GOR"
    assert cfg.currency.decimals == 9


def test_explicit_overrides_win() -> None:
    cfg = load_config(
        "ethereum",
        "dev",
        env={"NORMALIZER_MAX_UNCLE_DEPTH": "7"},
        overrides={"max_uncle_depth": 3, "fee_market_tx_type": 4},
    )
    assert cfg.max_uncle_depth == 3
    assert cfg.fee_market_tx_type == 4


@pytest.mark.parametrize(
    "overrides, key",
    [
        ({"max_uncle_depth": 0}, "max_uncle_depth"),
        ({"uncle_reward_multiplier": -1}, "uncle_reward_multiplier"),
        ({"currency": {"symbol": ""}}, "currency"),
        ({"currency": "ETH"}, "currency"),
        ({"fork_schedule": []}, "fork_schedule"),
        ({"fork_schedule": [{"block": 0}]}, "fork_schedule"),
        ({"fork_schedule": ["frontier"]}, "fork_schedule"),
        (
            {"fork_schedule": [{"block": 10, "reward": 1}, {"block": 5, "reward": 1}]},
            "fork_schedule",
        ),
        ({"fork_schedule": [{"block": 0, "reward": -1}]}, "fork_schedule"),
    ],
)
def test_invalid_values_are_rejected(overrides, key) -> None:
    with pytest.raises(ConfigError) as ei:
        load_config("ethereum", "dev", env={}, overrides=overrides)
    assert ei.value.data["key"] == key


def test_non_integer_environment_value_is_rejected() -> None:
    with pytest.raises(ConfigError):
        load_config("ethereum", "dev", env={"NORMALIZER_MAX_UNCLE_DEPTH": "eight"})


def test_get_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NORMALIZER_BLOCKCHAIN", "polkadot")
    monkeypatch.setenv("NORMALIZER_NETWORK", "mainnet")
    get_config.cache_clear()
    cfg = get_config()
    assert (cfg.blockchain, cfg.network) == ("polkadot", "mainnet")
    assert get_config() is cfg


def test_fork_schedule_before_first_entry_uses_first() -> None:
    sched = ForkSchedule(forks=(Fork("a", 10, 7), Fork("b", 20, 3)))
    assert sched.reward_at(0) == 7
    assert sched.reward_at(25) == 3
    assert ForkSchedule.from_entries([Fork("x", 0, BYZANTIUM_BLOCK_REWARD)]).reward_at(1) == BYZANTIUM_BLOCK_REWARD


def test_summary_mentions_key_knobs() -> None:
    s = summary(load_config("ethereum", "mainnet", env={}))
    assert s.startswith("ethereum/mainnet{")
    assert "currency=ETH/18" in s
    assert "byzantium@4370000" in s
    assert "uncle_mult=32" in s


def test_to_dict_is_plain_data() -> None:
    d = load_config("ethereum", "mainnet", env={}).to_dict()
    assert d["currency"]["symbol"] == "ETH"
    assert d["fork_schedule"]["forks"][1] == {
        "name": "byzantium",
        "block": 4_370_000,
        "reward": BYZANTIUM_BLOCK_REWARD,
    }
