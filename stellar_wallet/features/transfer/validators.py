"""Transfer validators: destination address, memo and amount."""

from __future__ import annotations

import logging
from typing import Any

from stellar_wallet.envelope import MEMO_TEXT_MAX_BYTES
from stellar_wallet.features.transfer.estimator import (
    DUST_THRESHOLD,
    FeeEstimator,
    WalletProtocol,
)
from stellar_wallet.keys import is_valid_public_key
from stellar_wallet.shared.errors import WalletError
from stellar_wallet.shared.units import MAX_INT64, Amount

logger = logging.getLogger(__name__)


class TransferValidator:
    """Each check raises WalletError on the first violated rule and returns True otherwise."""

    def __init__(self, wallet: WalletProtocol, estimator: FeeEstimator | None = None):
        self.wallet = wallet
        self.estimator = estimator or FeeEstimator(wallet)

    def _amount(self, value: int) -> Amount:
        return Amount(value, self.wallet.decimals)

    def validate_address(self, address: str) -> bool:
        if not is_valid_public_key(address):
            raise WalletError.invalid_address(address)
        if address == self.wallet.address:
            raise WalletError.destination_equals_source()
        return True

    def validate_meta(self, meta: dict[str, Any] | None = None) -> bool:
        memo = (meta or {}).get("memo")
        if memo is not None and len(memo.encode("utf-8")) > MEMO_TEXT_MAX_BYTES:
            raise WalletError.invalid_memo(memo)
        return True

    async def validate_amount(self, address: str, amount: Amount) -> bool:
        # Local checks first; the destination lookup is the only extra round trip.
        if not self.wallet.is_active:
            raise WalletError.inactive_account()

        value = amount.value
        if value < DUST_THRESHOLD:
            raise WalletError.small_amount(self._amount(DUST_THRESHOLD))

        max_amount = await self.estimator.estimate_max_amount()
        if value > max_amount:
            raise WalletError.big_amount(self._amount(max_amount))

        if value > MAX_INT64:
            raise WalletError.big_amount(self._amount(MAX_INT64))

        destination = await self.wallet.ledger.get_account_snapshot(address)
        params = await self.wallet.ledger.get_ledger_params()
        if not destination.is_active and value < params.min_reserve:
            logger.info(
                "Amount %d below reserve %d for inactive destination %s",
                value,
                params.min_reserve,
                address,
            )
            raise WalletError.minimum_reserve_destination(
                self._amount(params.min_reserve)
            )
        return True
