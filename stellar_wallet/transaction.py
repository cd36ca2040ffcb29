from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from stellar_sdk import Keypair

from stellar_wallet.envelope import (
    Operation,
    OperationKind,
    SignedEnvelope,
    TimeBounds,
    build_and_sign_envelope,
)
from stellar_wallet.shared.api import LedgerServiceProtocol
from stellar_wallet.shared.cache import LedgerCache
from stellar_wallet.shared.network import NetworkError
from stellar_wallet.shared.units import Amount

logger = logging.getLogger(__name__)


class TransactionStage(Enum):
    PREPARED = "prepared"
    SIGNED = "signed"
    SUBMITTED = "submitted"
    APPLIED = "applied"


class WalletProtocol(Protocol):
    ledger: LedgerCache

    @property
    def address(self) -> str: ...
    @property
    def sequence(self) -> int: ...

    def apply_outgoing(self, amount: int, fee: int) -> None: ...
    def apply_incoming(self, amount: int, activated: bool = False) -> None: ...


@dataclass
class PreparedTransaction:
    source: str
    sequence: int
    fee: int
    operation: Operation
    memo: str | None = None
    time_bounds: TimeBounds = field(default_factory=TimeBounds.from_timeout)
    stage: TransactionStage = TransactionStage.PREPARED
    envelope: SignedEnvelope | None = None
    tx_id: str | None = None

    @property
    def amount(self) -> int:
        return self.operation.amount

    @property
    def destination(self) -> str:
        return self.operation.destination

    def sign(self, key_pair: Keypair, passphrase: str) -> SignedEnvelope:
        if self.stage is not TransactionStage.PREPARED:
            raise RuntimeError(f"Cannot sign a transaction in stage {self.stage.value}")
        if key_pair.public_key != self.source:
            raise ValueError("Signing key does not match the transaction source")

        self.envelope = build_and_sign_envelope(
            source=self.source,
            sequence=self.sequence,
            fee=self.fee,
            operation=self.operation,
            memo=self.memo,
            key_pair=key_pair,
            passphrase=passphrase,
            time_bounds=self.time_bounds,
        )
        self.stage = TransactionStage.SIGNED
        return self.envelope


class TransactionManager:
    """Builds, signs and submits single-operation transfers for one wallet.

    Local wallet state is only touched through ``apply_outgoing`` /
    ``apply_incoming`` once the node has accepted the envelope.
    """

    def __init__(
        self, wallet: WalletProtocol, api: LedgerServiceProtocol, passphrase: str
    ):
        self.wallet = wallet
        self.api = api
        self.passphrase = passphrase

    @staticmethod
    def select_operation(
        destination: str, amount: int, destination_active: bool
    ) -> Operation:
        kind = OperationKind.PAYMENT if destination_active else OperationKind.CREATE_ACCOUNT
        return Operation(kind=kind, destination=destination, amount=amount)

    async def prepare_transfer(
        self,
        source: str,
        sequence: int,
        destination: str,
        amount: int,
        memo: str | None = None,
    ) -> PreparedTransaction:
        """Prepare a transfer consuming ``sequence + 1`` of ``source``."""
        params = await self.wallet.ledger.get_ledger_params()
        snapshot = await self.wallet.ledger.get_account_snapshot(destination)
        operation = self.select_operation(destination, amount, snapshot.is_active)
        logger.debug(
            "Prepared %s of %d from %s to %s",
            operation.kind.name.lower(),
            amount,
            source,
            destination,
        )
        return PreparedTransaction(
            source=source,
            sequence=sequence + 1,
            fee=params.fee,
            operation=operation,
            memo=memo,
        )

    async def submit(self, prepared: PreparedTransaction) -> str:
        if prepared.stage is not TransactionStage.SIGNED or prepared.envelope is None:
            raise RuntimeError("Transaction must be signed before submission")

        try:
            tx_id = await self.api.submit_transaction(prepared.envelope.xdr)
        except NetworkError as e:
            logger.error(
                "Submission of %s failed: %s", prepared.envelope.hash, e.message
            )
            raise

        prepared.tx_id = tx_id
        prepared.stage = TransactionStage.SUBMITTED
        # The destination may have just been activated.
        self.wallet.ledger.forget_account(prepared.destination)
        return tx_id

    async def create_transaction(
        self,
        destination: str,
        amount: Amount,
        memo: str | None,
        key_pair: Keypair,
    ) -> str:
        prepared = await self.prepare_transfer(
            self.wallet.address, self.wallet.sequence, destination, amount.value, memo
        )
        prepared.sign(key_pair, self.passphrase)
        tx_id = await self.submit(prepared)

        self.wallet.apply_outgoing(prepared.amount, prepared.fee)
        prepared.stage = TransactionStage.APPLIED
        logger.info("Transaction %s applied: -%d stroops", tx_id, prepared.amount + prepared.fee)
        return tx_id
