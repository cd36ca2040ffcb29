"""Building and signing the single-operation transactions the wallet submits.

Only native ``payment`` and ``create_account`` operations are produced, with
an optional text memo and time bounds.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

from stellar_sdk import Account, Asset, Keypair, TransactionBuilder

from stellar_wallet.shared.units import DECIMALS, MAX_INT64, atom_to_unit

MEMO_TEXT_MAX_BYTES = 28
MAX_UINT32 = 0xFFFFFFFF
TRANSACTION_TIMEOUT = 300


class OperationKind(Enum):
    CREATE_ACCOUNT = "create_account"
    PAYMENT = "payment"


@dataclass(frozen=True)
class Operation:
    kind: OperationKind
    destination: str
    amount: int


@dataclass(frozen=True)
class TimeBounds:
    min_time: int
    max_time: int

    @classmethod
    def from_timeout(
        cls, seconds: int = TRANSACTION_TIMEOUT, now: datetime | None = None
    ) -> "TimeBounds":
        now = now or datetime.now(timezone.utc)
        return cls(min_time=0, max_time=int((now + timedelta(seconds=seconds)).timestamp()))


@dataclass(frozen=True)
class SignedEnvelope:
    xdr: str
    hash: str


def build_and_sign_envelope(
    source: str,
    sequence: int,
    fee: int,
    operation: Operation,
    memo: str | None,
    key_pair: Keypair,
    passphrase: str,
    time_bounds: TimeBounds | None = None,
) -> SignedEnvelope:
    """Build a one-operation transaction and sign it with ``key_pair``.

    ``sequence`` is the sequence number the transaction consumes, i.e. the
    source account's current sequence plus one.
    """
    if not 0 < operation.amount <= MAX_INT64:
        raise ValueError(f"Operation amount out of range: {operation.amount}")
    if not 0 <= fee <= MAX_UINT32:
        raise ValueError(f"Fee out of range: {fee}")
    if not 0 < sequence <= MAX_INT64:
        raise ValueError(f"Sequence number out of range: {sequence}")
    if memo is not None and len(memo.encode("utf-8")) > MEMO_TEXT_MAX_BYTES:
        raise ValueError(f"Memo text exceeds {MEMO_TEXT_MAX_BYTES} bytes")

    bounds = time_bounds or TimeBounds.from_timeout()
    # build() consumes the account's next sequence number.
    builder = TransactionBuilder(
        source_account=Account(source, sequence - 1),
        network_passphrase=passphrase,
        base_fee=fee,
    ).add_time_bounds(bounds.min_time, bounds.max_time)
    if memo is not None:
        builder.add_text_memo(memo)

    amount = atom_to_unit(operation.amount, DECIMALS)
    if operation.kind is OperationKind.CREATE_ACCOUNT:
        builder.append_create_account_op(
            destination=operation.destination, starting_balance=amount
        )
    else:
        builder.append_payment_op(
            destination=operation.destination, asset=Asset.native(), amount=amount
        )

    envelope = builder.build()
    envelope.sign(key_pair)
    return SignedEnvelope(xdr=envelope.to_xdr(), hash=envelope.hash_hex())
