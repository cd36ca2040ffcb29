from __future__ import annotations

from enum import Enum
from typing import Any

from stellar_wallet.features.history.service import (
    HistoryService,
    TransactionPage,
    TransactionRecord,
)
from stellar_wallet.features.importing.service import ImportService
from stellar_wallet.features.transfer.estimator import FeeEstimator
from stellar_wallet.features.transfer.validators import TransferValidator
from stellar_wallet.keys import is_valid_public_key, key_pair_from_seed
from stellar_wallet.shared.api import LedgerAPI, LedgerServiceProtocol
from stellar_wallet.shared.cache import LedgerCache
from stellar_wallet.shared.config import WalletConfig
from stellar_wallet.shared.errors import WalletError
from stellar_wallet.shared.logging import get_logger
from stellar_wallet.shared.network import NetworkClient
from stellar_wallet.shared.storage import JsonFileStorage, StorageProtocol
from stellar_wallet.shared.units import Amount
from stellar_wallet.transaction import TransactionManager

logger = get_logger(__name__)


class WalletState(Enum):
    CREATED = "created"
    INITIALIZING = "initializing"
    INITIALIZED = "initialized"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class Wallet:
    """A single Stellar account tracked from the ledger service.

    Key material is never held: ``create`` only derives the address, and
    operations that sign take the seed (or an external secret) per call.
    """

    DUMMY_EXCHANGE_DEPOSIT_ADDRESS = (
        "GDYSRGTDKQ4WVAASBDZR3IVQUGJMY5HPE5X3ENRLBN5JF6M3RDLS547J"
    )
    BALANCE_KEY = "balance"

    is_meta_supported = True
    meta_names = ["memo"]
    is_import_supported = True

    def __init__(
        self,
        config: WalletConfig | None = None,
        api: LedgerServiceProtocol | None = None,
        storage: StorageProtocol | None = None,
    ):
        self.config = config or WalletConfig.from_environment()
        if api is None:
            client = NetworkClient(
                node_url=self.config.node_url,
                timeout_config=self.config.timeout_config,
                retry_config=self.config.retry_config,
            )
            api = LedgerAPI(client, self.config.decimals)
        self.api = api
        self.storage = storage
        self.state = WalletState.CREATED

        self._address: str | None = None
        self._balance = 0
        self._sequence = 0
        self._is_active = False
        self._log = logger

        self.ledger = LedgerCache(api, ttl=self.config.cache_ttl)
        self.estimator = FeeEstimator(self)
        self.validator = TransferValidator(self, self.estimator)
        self.transactions = TransactionManager(
            self, api, self.config.network_passphrase
        )
        self.importer = ImportService(self, self.transactions)
        self.history = HistoryService(self, api)

    @property
    def address(self) -> str:
        if self._address is None:
            raise RuntimeError("Wallet is not initialized")
        return self._address

    @property
    def balance(self) -> Amount:
        return Amount(self._balance, self.decimals)

    @property
    def sequence(self) -> int:
        return self._sequence

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def decimals(self) -> int:
        return self.config.decimals

    @property
    def network(self) -> str:
        return self.config.network

    @property
    def dummy_exchange_deposit_address(self) -> str:
        return self.DUMMY_EXCHANGE_DEPOSIT_ADDRESS

    def _begin_initializing(self) -> None:
        if self.state is not WalletState.CREATED:
            raise RuntimeError(
                f"Wallet already initialized (state: {self.state.value})"
            )
        self.state = WalletState.INITIALIZING

    def _init(self, address: str) -> None:
        self._address = address
        self._log = logger.with_context(address=address)
        if self.storage is None:
            self.storage = JsonFileStorage(self.config.storage_dir, address)
        self._balance = int(self.storage.get(self.BALANCE_KEY) or 0)
        self.state = WalletState.INITIALIZED
        self._log.info("Wallet initialized")

    async def create(self, seed: bytes) -> None:
        key_pair = key_pair_from_seed(seed)
        self._begin_initializing()
        self._init(key_pair.public_key)

    async def open(self, public_key: dict[str, Any]) -> None:
        if not isinstance(public_key, dict) or not isinstance(
            public_key.get("data"), str
        ):
            raise TypeError("public_key must be a dict with a 'data' address string")
        address = public_key["data"]
        if not is_valid_public_key(address):
            raise WalletError.invalid_address(address)
        self._begin_initializing()
        self._init(address)

    async def load(self) -> None:
        if self.state not in (
            WalletState.INITIALIZED,
            WalletState.LOADED,
            WalletState.ERROR,
        ):
            raise RuntimeError(f"Cannot load wallet in state {self.state.value}")

        self.state = WalletState.LOADING
        try:
            self.ledger.forget_account(self.address)
            snapshot = await self.ledger.get_account_snapshot(self.address)
            self._balance = snapshot.balance
            self._sequence = snapshot.sequence
            self._is_active = snapshot.is_active
            self._persist_balance()
        except Exception as e:
            self.state = WalletState.ERROR
            self._log.error("Failed to load wallet: %s", e)
            raise
        self.state = WalletState.LOADED
        self._log.info(
            "Wallet loaded: balance=%s active=%s", self.balance, self._is_active
        )

    async def cleanup(self) -> None:
        self.ledger.invalidate_all()
        self.history.clear()

    def _require_initialized(self) -> None:
        if self._address is None:
            raise RuntimeError("Wallet is not initialized")

    def _require_loaded(self) -> None:
        if self.state is not WalletState.LOADED:
            raise RuntimeError(
                f"Wallet must be loaded first (state: {self.state.value})"
            )

    def _persist_balance(self) -> None:
        self.storage.set(self.BALANCE_KEY, str(self._balance))
        self.storage.save()

    def apply_outgoing(self, amount: int, fee: int) -> None:
        self._sequence += 1
        self._balance = max(self._balance - amount - fee, 0)
        self._persist_balance()

    def apply_incoming(self, amount: int, activated: bool = False) -> None:
        self._balance += amount
        if activated:
            self._is_active = True
        self._persist_balance()

    def get_public_key(self) -> dict[str, str]:
        return {"data": self.address}

    def get_private_key(self, seed: bytes) -> list[dict[str, str]]:
        key_pair = key_pair_from_seed(seed)
        return [{"address": key_pair.public_key, "secret": key_pair.secret}]

    async def validate_address(self, address: str) -> bool:
        self._require_initialized()
        return self.validator.validate_address(address)

    async def validate_meta(self, meta: dict[str, Any] | None = None) -> bool:
        return self.validator.validate_meta(meta)

    async def validate_amount(self, address: str, amount: Amount) -> bool:
        self._require_loaded()
        return await self.validator.validate_amount(address, amount)

    async def estimate_max_amount(self) -> Amount:
        self._require_loaded()
        return Amount(await self.estimator.estimate_max_amount(), self.decimals)

    async def estimate_transaction_fee(self) -> Amount:
        self._require_loaded()
        return Amount(await self.estimator.estimate_transaction_fee(), self.decimals)

    async def create_transaction(
        self,
        address: str,
        amount: Amount,
        seed: bytes,
        meta: dict[str, Any] | None = None,
    ) -> str:
        key_pair = key_pair_from_seed(seed)
        self._require_loaded()
        memo = (meta or {}).get("memo")
        tx_id = await self.transactions.create_transaction(
            address, amount, memo, key_pair
        )
        self._log.info("Sent %s to %s", amount, address, extra={"context": {"tx_id": tx_id}})
        return tx_id

    async def estimate_import(self, secret: str) -> Amount:
        key_pair = self.importer.check_secret(secret)
        self._require_loaded()
        plan = await self.importer.prepare(key_pair)
        return self.importer.check_plan(plan)

    async def create_import(self, secret: str) -> str:
        key_pair = self.importer.check_secret(secret)
        self._require_loaded()
        plan = await self.importer.prepare(key_pair)
        return await self.importer.create_import(plan)

    async def load_transactions(self, cursor: str | None = None) -> TransactionPage:
        self._require_initialized()
        return await self.history.load_transactions(cursor)

    async def load_transaction(self, tx_id: str) -> TransactionRecord | None:
        self._require_initialized()
        return await self.history.load_transaction(tx_id)
