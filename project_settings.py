"""Runtime settings resolved from the environment.

Nothing here is cached: every accessor reads the environment when called, so
switching `HOTSTUFF_ENV` or `TRADING_BACKEND_URL` takes effect on the next
request. A repo-root `.env` file is folded into the environment once, without
overriding variables that are already set.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Literal

from config import (
    BASE_DIR,
    ENV_API_WALLET_KEY,
    ENV_BACKEND_URL,
    ENV_LOG_LEVEL,
    ENV_MAINNET_URL,
    ENV_NETWORK,
    ENV_TESTNET_URL,
    MAINNET_EXCHANGE_URL,
    REQUEST_TIMEOUT_MS,
    TESTNET_EXCHANGE_URL,
)

Network = Literal["mainnet", "testnet"]

logger = logging.getLogger(__name__)
_ENV_BOOTSTRAPPED = False


def ensure_env_loaded() -> None:
    global _ENV_BOOTSTRAPPED  # pylint: disable=global-statement
    if _ENV_BOOTSTRAPPED:
        return
    env_path = BASE_DIR / ".env"
    if not env_path.exists():
        _ENV_BOOTSTRAPPED = True
        return
    try:
        with env_path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                key = key.strip()
                if not key:
                    continue
                value = value.strip().strip('"').strip("'")
                os.environ.setdefault(key, value)
    except OSError:
        logger.debug("Unable to read .env file at %s", env_path)
    _ENV_BOOTSTRAPPED = True


@dataclass(frozen=True, slots=True)
class NetworkSettings:
    """Exchange endpoint selection for a single call."""

    network: Network
    exchange_url: str
    timeout_ms: int = REQUEST_TIMEOUT_MS

    @property
    def is_testnet(self) -> bool:
        return self.network == "testnet"

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0


@dataclass(frozen=True, slots=True)
class RelaySettings:
    backend_url: str | None

    @property
    def configured(self) -> bool:
        return bool(self.backend_url)


def load_network_settings() -> NetworkSettings:
    """Anything other than an explicit `mainnet` selects the test network."""
    ensure_env_loaded()
    raw = os.getenv(ENV_NETWORK, "").strip().lower()
    if raw == "mainnet":
        url = os.getenv(ENV_MAINNET_URL, "").strip() or MAINNET_EXCHANGE_URL
        return NetworkSettings(network="mainnet", exchange_url=url)
    url = os.getenv(ENV_TESTNET_URL, "").strip() or TESTNET_EXCHANGE_URL
    return NetworkSettings(network="testnet", exchange_url=url)


def load_relay_settings() -> RelaySettings:
    ensure_env_loaded()
    value = os.getenv(ENV_BACKEND_URL, "").strip()
    return RelaySettings(backend_url=value or None)


def api_wallet_key_from_env() -> str:
    ensure_env_loaded()
    return os.getenv(ENV_API_WALLET_KEY, "").strip()


def log_level_from_env(default: str = "INFO") -> str:
    ensure_env_loaded()
    return os.getenv(ENV_LOG_LEVEL, default).strip().upper() or default
