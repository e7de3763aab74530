"""
normcore.config — network configuration for the operation normalizer.

This module centralizes the chain constants the builders need:
  • Currency (symbol, decimals) operations are denominated in
  • Block-reward fork schedule: ordered (activation block, base reward) entries
  • Uncle rules (max uncle depth, uncle-reward multiplier)
  • Fee-market transaction type and address format

Resolution order (later wins):
  1) built-in preset for (blockchain, network)
  2) YAML file named by NORMALIZER_CONFIG_FILE (or `config_file=`)
  3) environment variables
  4) explicit `overrides=`

Environment variables (all optional):
  NORMALIZER_BLOCKCHAIN               -> default blockchain for get_config() (default: ethereum)
  NORMALIZER_NETWORK                  -> default network for get_config()    (default: dev)
  NORMALIZER_CONFIG_FILE              -> path to a YAML file with network overrides
  NORMALIZER_CURRENCY_SYMBOL          -> e.g. "ETH"
  NORMALIZER_CURRENCY_DECIMALS        -> integer
  NORMALIZER_MAX_UNCLE_DEPTH          -> integer > 0 (default: 8)
  NORMALIZER_UNCLE_REWARD_MULTIPLIER  -> integer > 0 (default: 32)

YAML layout (every key optional):

    currency:
      symbol: ETH
      decimals: 18
    fork_schedule:            # ascending activation blocks
      - {name: frontier,       block: 0,       reward: 5000000000000000000}
      - {name: byzantium,      block: 4370000, reward: 3000000000000000000}
      - {name: constantinople, block: 7280000, reward: 2000000000000000000}
    max_uncle_depth: 8
    uncle_reward_multiplier: 32
    fee_market_tx_type: 2

Programmatic usage:
    from normcore.config import load_config
    cfg = load_config("ethereum", "mainnet")
    reward = cfg.fork_schedule.reward_at(block_number)
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, replace
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml

from .errors import ConfigError
from .types import Currency

WEI_PER_ETH = 10**18

FRONTIER_BLOCK_REWARD = 5 * WEI_PER_ETH
BYZANTIUM_BLOCK_REWARD = 3 * WEI_PER_ETH
CONSTANTINOPLE_BLOCK_REWARD = 2 * WEI_PER_ETH

MAX_UNCLE_DEPTH = 8
UNCLE_REWARD_MULTIPLIER = 32
FEE_MARKET_TX_TYPE = 2


# ------------------------------ dataclasses ---------------------------------


@dataclass(frozen=True)
class Fork:
    name: str
    block: int
    reward: int


@dataclass(frozen=True)
class ForkSchedule:
    """
    Ordered table of (activation block, base reward). The reward in effect at a
    height is the one of the last fork whose activation block is ≤ that height.
    """

    forks: Tuple[Fork, ...]

    def active_fork(self, number: int) -> Fork:
        active = self.forks[0]
        for fork in self.forks:
            if fork.block <= number:
                active = fork
        return active

    def reward_at(self, number: int) -> int:
        return self.active_fork(number).reward

    @classmethod
    def from_entries(cls, entries: Any) -> "ForkSchedule":
        if not isinstance(entries, (list, tuple)) or not entries:
            raise ConfigError("fork_schedule must be a non-empty list", key="fork_schedule")
        forks = []
        for i, e in enumerate(entries):
            if isinstance(e, Fork):
                forks.append(e)
                continue
            if not isinstance(e, Mapping):
                raise ConfigError(f"fork_schedule[{i}] must be a mapping", key="fork_schedule")
            try:
                forks.append(
                    Fork(
                        name=str(e.get("name", f"fork{i}")),
                        block=int(e["block"]),
                        reward=int(e["reward"]),
                    )
                )
            except (KeyError, TypeError, ValueError) as exc:
                raise ConfigError(
                    f"fork_schedule[{i}] is invalid: {exc}", key="fork_schedule"
                ) from exc
        return cls(forks=tuple(forks))


@dataclass(frozen=True)
class NetworkConfig:
    blockchain: str
    network: str
    currency: Currency
    fork_schedule: ForkSchedule
    max_uncle_depth: int = MAX_UNCLE_DEPTH
    uncle_reward_multiplier: int = UNCLE_REWARD_MULTIPLIER
    fee_market_tx_type: int = FEE_MARKET_TX_TYPE

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


# ------------------------------ presets -------------------------------------


def _eth_schedule(byzantium: int, constantinople: int) -> ForkSchedule:
    return ForkSchedule(
        forks=(
            Fork("frontier", 0, FRONTIER_BLOCK_REWARD),
            Fork("byzantium", byzantium, BYZANTIUM_BLOCK_REWARD),
            Fork("constantinople", constantinople, CONSTANTINOPLE_BLOCK_REWARD),
        )
    )


_ETH = Currency(symbol="ETH", decimals=18)

# Event-sourced chains carry no block reward; the schedule is a single zero entry.
_NO_REWARD = ForkSchedule(forks=(Fork("genesis", 0, 0),))

PRESETS: Dict[Tuple[str, str], NetworkConfig] = {
    ("ethereum", "mainnet"): NetworkConfig(
        blockchain="ethereum",
        network="mainnet",
        currency=_ETH,
        fork_schedule=_eth_schedule(4_370_000, 7_280_000),
    ),
    ("ethereum", "dev"): NetworkConfig(
        blockchain="ethereum",
        network="dev",
        currency=_ETH,
        fork_schedule=_eth_schedule(0, 0),
    ),
    ("polkadot", "dev"): NetworkConfig(
        blockchain="polkadot",
        network="dev",
        currency=Currency(symbol="DOT", decimals=10),
        fork_schedule=_NO_REWARD,
    ),
    ("polkadot", "westend"): NetworkConfig(
        blockchain="polkadot",
        network="westend",
        currency=Currency(symbol="WND", decimals=12),
        fork_schedule=_NO_REWARD,
    ),
    ("polkadot", "mainnet"): NetworkConfig(
        blockchain="polkadot",
        network="mainnet",
        currency=Currency(symbol="DOT", decimals=10),
        fork_schedule=_NO_REWARD,
    ),
}


# ------------------------------ loader --------------------------------------


def _positive_int(name: str, value: Any) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be an integer, got {value!r}", key=name) from exc
    if n <= 0:
        raise ConfigError(f"{name} must be > 0", key=name)
    return n


def _validate(cfg: NetworkConfig) -> NetworkConfig:
    if not cfg.currency.symbol:
        raise ConfigError("currency.symbol must be non-empty", key="currency")
    if cfg.currency.decimals < 0:
        raise ConfigError("currency.decimals must be ≥ 0", key="currency")
    blocks = [f.block for f in cfg.fork_schedule.forks]
    if blocks != sorted(blocks):
        raise ConfigError("fork_schedule activation blocks must ascend", key="fork_schedule")
    if any(f.reward < 0 for f in cfg.fork_schedule.forks):
        raise ConfigError("fork_schedule rewards must be ≥ 0", key="fork_schedule")
    _positive_int("max_uncle_depth", cfg.max_uncle_depth)
    _positive_int("uncle_reward_multiplier", cfg.uncle_reward_multiplier)
    return cfg


def read_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    p = Path(path).expanduser()
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"cannot read config file {p}: {exc}", key="config_file") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {p}: {exc}", key="config_file") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{p}: top-level YAML must be a mapping", key="config_file")
    return data


def _apply_mapping(cfg: NetworkConfig, m: Mapping[str, Any]) -> NetworkConfig:
    changes: Dict[str, Any] = {}
    cur = m.get("currency")
    if cur is not None:
        if not isinstance(cur, Mapping):
            raise ConfigError("currency must be a mapping", key="currency")
        changes["currency"] = Currency(
            symbol=str(cur.get("symbol", cfg.currency.symbol)),
            decimals=int(cur.get("decimals", cfg.currency.decimals)),
        )
    if m.get("fork_schedule") is not None:
        changes["fork_schedule"] = ForkSchedule.from_entries(m["fork_schedule"])
    for key in ("max_uncle_depth", "uncle_reward_multiplier", "fee_market_tx_type"):
        if m.get(key) is not None:
            changes[key] = int(m[key])
    return replace(cfg, **changes) if changes else cfg


def _env_mapping(env: Mapping[str, str]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    symbol = env.get("NORMALIZER_CURRENCY_SYMBOL")
    decimals = env.get("NORMALIZER_CURRENCY_DECIMALS")
    if symbol is not None or decimals is not None:
        cur: Dict[str, Any] = {}
        if symbol is not None:
            cur["symbol"] = symbol.strip()
        if decimals is not None:
            cur["decimals"] = decimals
        out["currency"] = cur
    if "NORMALIZER_MAX_UNCLE_DEPTH" in env:
        out["max_uncle_depth"] = env["NORMALIZER_MAX_UNCLE_DEPTH"]
    if "NORMALIZER_UNCLE_REWARD_MULTIPLIER" in env:
        out["uncle_reward_multiplier"] = env["NORMALIZER_UNCLE_REWARD_MULTIPLIER"]
    return out


def load_config(
    blockchain: str = "ethereum",
    network: str = "dev",
    *,
    env: Optional[Mapping[str, str]] = None,
    config_file: Optional[Union[str, Path]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> NetworkConfig:
    """
    Build a NetworkConfig for (blockchain, network).

    Args:
        blockchain: chain family name, e.g. "ethereum", "polkadot"
        network: network name, e.g. "mainnet", "dev"
        env: mapping to read variables from (default: os.environ)
        config_file: YAML file to merge (default: NORMALIZER_CONFIG_FILE, if set)
        overrides: explicit field overrides, same keys as the YAML layout

    Raises:
        ConfigError for unknown networks or invalid values.
    """
    env = os.environ if env is None else env
    key = (blockchain.strip().lower(), network.strip().lower())
    try:
        cfg = PRESETS[key]
    except KeyError:
        raise ConfigError(
            f"unsupported network {key[0]}/{key[1]}",
            key="network",
            data={"supported": sorted(f"{b}/{n}" for b, n in PRESETS)},
        ) from None

    path = config_file or env.get("NORMALIZER_CONFIG_FILE")
    try:
        if path:
            cfg = _apply_mapping(cfg, read_yaml(path))
        cfg = _apply_mapping(cfg, _env_mapping(env))
        if overrides:
            cfg = _apply_mapping(cfg, overrides)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"invalid configuration value: {exc}") from exc
    return _validate(cfg)


@lru_cache(maxsize=1)
def get_config() -> NetworkConfig:
    """
    Cached default config for NORMALIZER_BLOCKCHAIN/NORMALIZER_NETWORK.
    """
    return load_config(
        os.environ.get("NORMALIZER_BLOCKCHAIN", "ethereum"),
        os.environ.get("NORMALIZER_NETWORK", "dev"),
    )


# ----------------------------- pretty-print ---------------------------------


def summary(cfg: Optional[NetworkConfig] = None) -> str:
    """
    Return a one-line summary of the most important network knobs.
    """
    cfg = cfg or get_config()
    forks = ",".join(f"{f.name}@{f.block}" for f in cfg.fork_schedule.forks)
    return (
        f"{cfg.blockchain}/{cfg.network}{{"
        f"currency={cfg.currency.symbol}/{cfg.currency.decimals}, "
        f"forks=[{forks}], uncle_depth={cfg.max_uncle_depth}, "
        f"uncle_mult={cfg.uncle_reward_multiplier}, fee_market_type={cfg.fee_market_tx_type}"
        "}"
    )


__all__ = [
    "Fork",
    "ForkSchedule",
    "NetworkConfig",
    "PRESETS",
    "load_config",
    "get_config",
    "read_yaml",
    "summary",
    "FRONTIER_BLOCK_REWARD",
    "BYZANTIUM_BLOCK_REWARD",
    "CONSTANTINOPLE_BLOCK_REWARD",
    "MAX_UNCLE_DEPTH",
    "UNCLE_REWARD_MULTIPLIER",
    "FEE_MARKET_TX_TYPE",
]
