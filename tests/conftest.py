import tempfile
from pathlib import Path

import pytest
import pytest_asyncio

from stellar_wallet.shared.config import WalletConfig
from stellar_wallet.shared.storage import MemoryStorage
from stellar_wallet.wallet import Wallet
from wallet_vectors import RANDOM_ADDRESS, FakeLedgerAPI


@pytest.fixture
def fake_api():
    """Fixture providing an in-memory ledger service (fee 0.0008025, reserve 0.5)"""
    return FakeLedgerAPI()


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def wallet_config(tmp_path):
    return WalletConfig(network="public", storage_dir=tmp_path)


@pytest.fixture
def wallet(wallet_config, fake_api, memory_storage):
    """Fixture providing a wallet that has not been initialized yet"""
    return Wallet(config=wallet_config, api=fake_api, storage=memory_storage)


@pytest_asyncio.fixture
async def loaded_wallet(wallet, fake_api):
    """Fixture providing a loaded watch-only wallet holding 12.345 XLM"""
    fake_api.set_account(RANDOM_ADDRESS, "12.345")
    await wallet.open({"data": RANDOM_ADDRESS})
    await wallet.load()
    return wallet


@pytest.fixture(autouse=True)
def isolate_wallet_storage(monkeypatch):
    """Run tests with isolated wallet storage."""
    with tempfile.TemporaryDirectory(prefix="stellar-wallet-test-") as tmp_dir:
        monkeypatch.setenv("STELLAR_WALLET_DIR", str(Path(tmp_dir)))
        yield
