"""Import (sweep) of an external account into the wallet."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from stellar_sdk import Keypair

from stellar_wallet.envelope import OperationKind
from stellar_wallet.features.transfer.estimator import DUST_THRESHOLD
from stellar_wallet.keys import key_pair_from_secret
from stellar_wallet.shared.cache import LedgerCache
from stellar_wallet.shared.errors import WalletError
from stellar_wallet.shared.logging import get_logger
from stellar_wallet.shared.units import Amount
from stellar_wallet.transaction import PreparedTransaction, TransactionManager

logger = get_logger(__name__)


class WalletProtocolForImport(Protocol):
    """Protocol defining wallet interface needed for imports."""

    ledger: LedgerCache

    @property
    def address(self) -> str: ...
    @property
    def is_active(self) -> bool: ...
    @property
    def decimals(self) -> int: ...

    def apply_incoming(self, amount: int, activated: bool = False) -> None: ...


@dataclass
class ImportPlan:
    """Snapshot of an external account and what sweeping it would move."""

    key_pair: Keypair = field(repr=False)
    address: str
    balance: int
    sequence: int
    fee: int
    min_reserve: int

    @property
    def sendable(self) -> int:
        # The external account keeps nothing, but its own reserve cannot move.
        return self.balance - self.min_reserve - self.fee


class ImportService:
    def __init__(
        self, wallet: WalletProtocolForImport, transactions: TransactionManager
    ):
        self.wallet = wallet
        self.transactions = transactions

    def check_secret(self, secret: str) -> Keypair:
        """Derive the external key pair; no network access."""
        key_pair = key_pair_from_secret(secret)
        if key_pair.public_key == self.wallet.address:
            raise WalletError.own_key_import_rejected()
        return key_pair

    async def prepare(self, key_pair: Keypair) -> ImportPlan:
        snapshot = await self.wallet.ledger.get_account_snapshot(key_pair.public_key)
        params = await self.wallet.ledger.get_ledger_params()
        return ImportPlan(
            key_pair=key_pair,
            address=key_pair.public_key,
            balance=snapshot.balance,
            sequence=snapshot.sequence,
            fee=params.fee,
            min_reserve=params.min_reserve,
        )

    def check_plan(self, plan: ImportPlan) -> Amount:
        sendable = plan.sendable
        if not self.wallet.is_active and sendable < plan.min_reserve:
            raise WalletError.minimum_reserve_destination(
                Amount(plan.min_reserve, self.wallet.decimals)
            )
        if sendable < DUST_THRESHOLD:
            raise WalletError.small_amount(Amount(DUST_THRESHOLD, self.wallet.decimals))
        return Amount(max(sendable, 0), self.wallet.decimals)

    async def create_import(self, plan: ImportPlan) -> str:
        amount = self.check_plan(plan)
        operation = TransactionManager.select_operation(
            self.wallet.address, amount.value, self.wallet.is_active
        )
        prepared = PreparedTransaction(
            source=plan.address,
            sequence=plan.sequence + 1,
            fee=plan.fee,
            operation=operation,
        )
        prepared.sign(plan.key_pair, self.transactions.passphrase)
        tx_id = await self.transactions.submit(prepared)

        self.wallet.ledger.forget_account(plan.address)
        self.wallet.apply_incoming(
            amount.value, activated=operation.kind is OperationKind.CREATE_ACCOUNT
        )
        logger.info(
            "Imported %s from %s",
            amount,
            plan.address,
            extra={"context": {"tx_id": tx_id}},
        )
        return tx_id
