"""Maximum sendable amount and fee estimation."""

from __future__ import annotations

from typing import Protocol

from stellar_wallet.shared.cache import LedgerCache, LedgerParameters
from stellar_wallet.shared.units import Amount

DUST_THRESHOLD = 1


class WalletProtocol(Protocol):
    """Wallet state the transfer feature reads."""

    ledger: LedgerCache

    @property
    def address(self) -> str: ...
    @property
    def is_active(self) -> bool: ...
    @property
    def balance(self) -> Amount: ...
    @property
    def decimals(self) -> int: ...


def max_sendable(balance: int, params: LedgerParameters) -> int:
    """Source-side headroom: what can leave the account while keeping its reserve.

    Destination reserve requirements are not considered here.
    """
    if balance < params.min_reserve:
        return 0
    return max(balance - params.fee - params.min_reserve, 0)


class FeeEstimator:
    def __init__(self, wallet: WalletProtocol):
        self.wallet = wallet

    async def estimate_max_amount(self) -> int:
        params = await self.wallet.ledger.get_ledger_params()
        return max_sendable(self.wallet.balance.value, params)

    async def estimate_transaction_fee(self) -> int:
        # Single-operation transactions pay the base fee regardless of amount.
        params = await self.wallet.ledger.get_ledger_params()
        return params.fee
