"""Wallet configuration: network selection, node URL, cache and HTTP policies."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from stellar_sdk import Network

from stellar_wallet.shared.network import RetryConfig, TimeoutConfig
from stellar_wallet.shared.units import DECIMALS

logger = logging.getLogger(__name__)

NETWORK_PASSPHRASES = {
    "public": Network.PUBLIC_NETWORK_PASSPHRASE,
    "testnet": Network.TESTNET_NETWORK_PASSPHRASE,
}

DEFAULT_NODE_URLS = {
    "public": "http://localhost:3000",
    "testnet": "http://localhost:3001",
}

DEFAULT_CACHE_TTL = 60.0


def default_storage_dir() -> Path:
    env_dir = os.getenv("STELLAR_WALLET_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    return Path.home() / ".config" / "stellar-quick-wallet"


@dataclass
class WalletConfig:
    network: str = "public"
    node_url: str | None = None
    decimals: int = DECIMALS
    cache_ttl: float | None = DEFAULT_CACHE_TTL
    storage_dir: Path = field(default_factory=default_storage_dir)
    timeout_config: TimeoutConfig = field(default_factory=TimeoutConfig)
    retry_config: RetryConfig = field(default_factory=RetryConfig)

    def __post_init__(self):
        if self.network not in NETWORK_PASSPHRASES:
            raise ValueError(
                f"Unknown network {self.network!r}, expected one of "
                f"{sorted(NETWORK_PASSPHRASES)}"
            )
        if self.node_url is None:
            self.node_url = DEFAULT_NODE_URLS[self.network]
        self.storage_dir = Path(self.storage_dir).expanduser()

    @property
    def network_passphrase(self) -> str:
        return NETWORK_PASSPHRASES[self.network]

    @classmethod
    def from_environment(cls) -> "WalletConfig":
        network = os.getenv("STELLAR_WALLET_NETWORK", "public").lower()
        node_url = os.getenv("STELLAR_WALLET_NODE_URL") or None
        ttl_env = os.getenv("STELLAR_WALLET_CACHE_TTL")
        cache_ttl: float | None = DEFAULT_CACHE_TTL
        if ttl_env:
            cache_ttl = None if ttl_env.lower() == "none" else float(ttl_env)
        return cls(network=network, node_url=node_url, cache_ttl=cache_ttl)

    @classmethod
    def load(cls, path: Path) -> "WalletConfig":
        if not path.exists():
            logger.info("No config file at %s, using defaults", path)
            return cls()

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        timeout_cfg = data.get("timeout", {})
        retry_cfg = data.get("retry", {})
        return cls(
            network=data.get("network", "public"),
            node_url=data.get("node_url"),
            cache_ttl=data.get("cache_ttl", DEFAULT_CACHE_TTL),
            storage_dir=Path(data["storage_dir"])
            if data.get("storage_dir")
            else default_storage_dir(),
            timeout_config=TimeoutConfig(
                connect_timeout=timeout_cfg.get("connect_timeout", 5.0),
                read_timeout=timeout_cfg.get("read_timeout", 15.0),
            ),
            retry_config=RetryConfig(
                max_retries=retry_cfg.get("max_retries", 3),
                base_delay=retry_cfg.get("base_delay", 1.0),
                max_delay=retry_cfg.get("max_delay", 30.0),
            ),
        )

    def save(self, path: Path) -> None:
        config = {
            "network": self.network,
            "node_url": self.node_url,
            "cache_ttl": self.cache_ttl,
            "storage_dir": str(self.storage_dir),
            "timeout": {
                "connect_timeout": self.timeout_config.connect_timeout,
                "read_timeout": self.timeout_config.read_timeout,
            },
            "retry": {
                "max_retries": self.retry_config.max_retries,
                "base_delay": self.retry_config.base_delay,
                "max_delay": self.retry_config.max_delay,
            },
        }
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
