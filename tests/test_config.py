"""Unit tests for wallet configuration."""

from pathlib import Path

import pytest

from stellar_wallet.shared.config import (
    DEFAULT_CACHE_TTL,
    DEFAULT_NODE_URLS,
    WalletConfig,
    default_storage_dir,
)
from stellar_wallet.shared.network import RetryConfig, TimeoutConfig


class TestWalletConfig:
    def test_defaults(self):
        config = WalletConfig()
        assert config.network == "public"
        assert config.node_url == DEFAULT_NODE_URLS["public"]
        assert config.decimals == 7
        assert config.cache_ttl == DEFAULT_CACHE_TTL
        assert config.network_passphrase == "Public Global Stellar Network ; September 2015"

    def test_testnet(self):
        config = WalletConfig(network="testnet")
        assert config.network_passphrase == "Test SDF Network ; September 2015"
        assert config.node_url == DEFAULT_NODE_URLS["testnet"]

    def test_unknown_network_rejected(self):
        with pytest.raises(ValueError, match="Unknown network"):
            WalletConfig(network="futurenet")

    def test_storage_dir_follows_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("STELLAR_WALLET_DIR", str(tmp_path))
        assert default_storage_dir() == tmp_path
        assert WalletConfig().storage_dir == tmp_path

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("STELLAR_WALLET_NETWORK", "TESTNET")
        monkeypatch.setenv("STELLAR_WALLET_NODE_URL", "http://node.local:8000")
        monkeypatch.setenv("STELLAR_WALLET_CACHE_TTL", "5")
        config = WalletConfig.from_environment()
        assert config.network == "testnet"
        assert config.node_url == "http://node.local:8000"
        assert config.cache_ttl == 5.0

    def test_from_environment_disables_ttl(self, monkeypatch):
        monkeypatch.setenv("STELLAR_WALLET_CACHE_TTL", "none")
        assert WalletConfig.from_environment().cache_ttl is None

    def test_save_and_load_round_trip(self, tmp_path):
        path = tmp_path / "config.json"
        original = WalletConfig(
            network="testnet",
            node_url="http://node.local:8000",
            cache_ttl=30.0,
            storage_dir=tmp_path / "data",
            timeout_config=TimeoutConfig(connect_timeout=2.0, read_timeout=4.0),
            retry_config=RetryConfig(max_retries=1, base_delay=0.5, max_delay=2.0),
        )
        original.save(path)

        loaded = WalletConfig.load(path)
        assert loaded.network == "testnet"
        assert loaded.node_url == "http://node.local:8000"
        assert loaded.cache_ttl == 30.0
        assert loaded.storage_dir == tmp_path / "data"
        assert loaded.timeout_config.request_timeout == (2.0, 4.0)
        assert loaded.retry_config.max_retries == 1

    def test_load_missing_file_uses_defaults(self, tmp_path):
        config = WalletConfig.load(tmp_path / "missing.json")
        assert config.network == "public"
        assert isinstance(config.storage_dir, Path)
