"""
Project-wide configuration.

Static, non-sensitive defaults for the trading client and the relay. The API
wallet key and anything else secret stays in `.env` or environment variables;
values that may change at runtime are resolved in `project_settings`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Final

# Root directory of the project (useful for resolving relative paths).
BASE_DIR: Final[Path] = Path(__file__).resolve().parent

# Validity windows attached to signed actions, in milliseconds (exchange unit).
ORDER_EXPIRY_MS: Final[int] = 60 * 60 * 1000  # 1h
CANCEL_EXPIRY_MS: Final[int] = 5 * 60 * 1000  # 5m

# Upper bound on a single exchange/relay round trip.
REQUEST_TIMEOUT_MS: Final[int] = 5_000

# Exchange endpoints; override with HOTSTUFF_MAINNET_URL / HOTSTUFF_TESTNET_URL.
# Placeholders until confirmed against the exchange's published API docs.
MAINNET_EXCHANGE_URL: Final[str] = "https://api.hotstuff.trade/exchange"
TESTNET_EXCHANGE_URL: Final[str] = "https://testnet-api.hotstuff.trade/exchange"

# Environment variable names.
ENV_NETWORK: Final[str] = "HOTSTUFF_ENV"
ENV_MAINNET_URL: Final[str] = "HOTSTUFF_MAINNET_URL"
ENV_TESTNET_URL: Final[str] = "HOTSTUFF_TESTNET_URL"
ENV_API_WALLET_KEY: Final[str] = "HOTSTUFF_API_WALLET_KEY"
ENV_BACKEND_URL: Final[str] = "TRADING_BACKEND_URL"
ENV_LOG_LEVEL: Final[str] = "LOG_LEVEL"

# Path the relay forwards to on the trading backend.
RELAY_PLACE_ORDER_PATH: Final[str] = "/place-order"

# Directory for the rotating application log.
LOG_DIR: Final[Path] = BASE_DIR / "logs"
