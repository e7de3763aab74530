"""
Shared pytest fixtures for every package's tests:
- Network configs (ethereum dev/mainnet, polkadot dev) with env isolation
- Currency and address formatter used by the builders
- Hypothesis profiles (dev/ci/fast), picked via HYPOTHESIS_PROFILE or CI
"""
from __future__ import annotations

import os
from typing import Callable

import pytest
from hypothesis import HealthCheck, settings

from normcore.address import hex_address
from normcore.config import NetworkConfig, get_config, load_config
from normcore.types import Currency

# ---- hypothesis profiles ----

settings.register_profile(
    "dev",
    max_examples=100,
    deadline=None,
    suppress_health_check=(HealthCheck.too_slow,),
)
settings.register_profile(
    "ci",
    max_examples=300,
    deadline=None,
    suppress_health_check=(HealthCheck.too_slow,),
    derandomize=True,
)
settings.register_profile("fast", max_examples=25, deadline=None)


def _env_truthy(name: str) -> bool:
    return (os.getenv(name) or "").lower() not in ("", "0", "false", "no", "off")


settings.load_profile(os.getenv("HYPOTHESIS_PROFILE") or ("ci" if _env_truthy("CI") else "dev"))

_ENV_KEYS = (
    "NORMALIZER_BLOCKCHAIN",
    "NORMALIZER_NETWORK",
    "NORMALIZER_CONFIG_FILE",
    "NORMALIZER_CURRENCY_SYMBOL",
    "NORMALIZER_CURRENCY_DECIMALS",
    "NORMALIZER_MAX_UNCLE_DEPTH",
    "NORMALIZER_UNCLE_REWARD_MULTIPLIER",
    "NORMALIZER_LOG_FORMAT",
    "NORMALIZER_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch):
    """Tests never see a developer's NORMALIZER_* settings or a stale cached config."""
    for k in _ENV_KEYS:
        monkeypatch.delenv(k, raising=False)
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def eth_dev() -> NetworkConfig:
    return load_config("ethereum", "dev", env={})


@pytest.fixture
def eth_mainnet() -> NetworkConfig:
    return load_config("ethereum", "mainnet", env={})


@pytest.fixture
def dot_dev() -> NetworkConfig:
    return load_config("polkadot", "dev", env={})


@pytest.fixture
def eth() -> Currency:
    return Currency(symbol="ETH", decimals=18)


@pytest.fixture
def fmt() -> Callable[[bytes], str]:
    return hex_address
