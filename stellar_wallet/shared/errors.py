"""Wallet error taxonomy.

A single exception type tagged by WalletErrorKind. Kinds that report a limit
(dust threshold, max sendable, reserve) carry it in ``amount``; memo errors
name the offending meta field in ``meta``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from stellar_wallet.shared.units import Amount


class WalletErrorKind(Enum):
    INVALID_ADDRESS = "invalid_address"
    DESTINATION_EQUALS_SOURCE = "destination_equals_source"
    INVALID_MEMO = "invalid_memo"
    INACTIVE_ACCOUNT = "inactive_account"
    SMALL_AMOUNT = "small_amount"
    BIG_AMOUNT = "big_amount"
    MINIMUM_RESERVE_DESTINATION = "minimum_reserve_destination"
    INVALID_SECRET = "invalid_secret"
    OWN_KEY_IMPORT_REJECTED = "own_key_import_rejected"


@dataclass
class WalletError(Exception):
    kind: WalletErrorKind
    message: str
    amount: Amount | None = None
    meta: str | None = None

    def __str__(self) -> str:
        return self.message

    @classmethod
    def invalid_address(cls, address: str) -> "WalletError":
        return cls(WalletErrorKind.INVALID_ADDRESS, f'Invalid address "{address}"')

    @classmethod
    def destination_equals_source(cls) -> "WalletError":
        return cls(
            WalletErrorKind.DESTINATION_EQUALS_SOURCE,
            "Destination address equals source address",
        )

    @classmethod
    def invalid_memo(cls, memo: str) -> "WalletError":
        return cls(WalletErrorKind.INVALID_MEMO, f'Invalid Memo: "{memo}"', meta="memo")

    @classmethod
    def inactive_account(cls) -> "WalletError":
        return cls(WalletErrorKind.INACTIVE_ACCOUNT, "Inactive account")

    @classmethod
    def small_amount(cls, threshold: Amount) -> "WalletError":
        return cls(WalletErrorKind.SMALL_AMOUNT, "Small amount", amount=threshold)

    @classmethod
    def big_amount(cls, ceiling: Amount) -> "WalletError":
        return cls(WalletErrorKind.BIG_AMOUNT, "Big amount", amount=ceiling)

    @classmethod
    def minimum_reserve_destination(cls, reserve: Amount) -> "WalletError":
        return cls(
            WalletErrorKind.MINIMUM_RESERVE_DESTINATION,
            "Less than minimum reserve on destination address",
            amount=reserve,
        )

    @classmethod
    def invalid_secret(cls) -> "WalletError":
        return cls(WalletErrorKind.INVALID_SECRET, "Invalid private key")

    @classmethod
    def own_key_import_rejected(cls) -> "WalletError":
        return cls(
            WalletErrorKind.OWN_KEY_IMPORT_REJECTED,
            "Private key equal wallet private key",
        )
