"""Async access to the ledger query and submission service.

The node speaks lumens as decimal strings; this module is the boundary where
they become integer stroops.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Protocol

from stellar_wallet.shared.cache import AccountSnapshot, LedgerParameters
from stellar_wallet.shared.network import NetworkClient
from stellar_wallet.shared.units import DECIMALS, unit_to_atom

logger = logging.getLogger(__name__)

API_PREFIX = "api/v1"
# Two ledger entries (the account itself plus one) make up the baseline reserve.
RESERVE_MULTIPLIER = 2


@dataclass
class RawTransactionPage:
    txs: list[dict[str, Any]]
    has_more: bool
    cursor: str | None


class LedgerServiceProtocol(Protocol):
    async def fetch_account_info(self, address: str) -> AccountSnapshot: ...
    async def fetch_ledger_parameters(self) -> LedgerParameters: ...
    async def submit_transaction(self, envelope_xdr: str) -> str: ...
    async def fetch_transactions(
        self, address: str, cursor: str | None = None
    ) -> RawTransactionPage: ...
    async def fetch_transaction(self, tx_id: str) -> dict[str, Any] | None: ...


class LedgerAPI:
    def __init__(self, client: NetworkClient, decimals: int = DECIMALS):
        self.client = client
        self.decimals = decimals

    async def _get(self, endpoint: str, context: str, **kwargs) -> Any:
        return await asyncio.to_thread(self.client.get, endpoint, context, **kwargs)

    async def fetch_account_info(self, address: str) -> AccountSnapshot:
        data = await self._get(f"{API_PREFIX}/account/{address}", "Fetch account info")
        return AccountSnapshot(
            balance=unit_to_atom(data.get("balance") or 0, self.decimals),
            sequence=int(data.get("sequence") or 0),
            is_active=bool(data.get("isActive")),
        )

    async def fetch_ledger_parameters(self) -> LedgerParameters:
        data = await self._get(f"{API_PREFIX}/ledger", "Fetch ledger parameters")
        return LedgerParameters(
            fee=unit_to_atom(data["baseFee"], self.decimals),
            min_reserve=unit_to_atom(data["baseReserve"], self.decimals)
            * RESERVE_MULTIPLIER,
        )

    async def submit_transaction(self, envelope_xdr: str) -> str:
        data = await asyncio.to_thread(
            self.client.post,
            f"{API_PREFIX}/tx/send",
            "Submit transaction",
            json={"rawtx": envelope_xdr},
        )
        tx_id = data["txId"]
        logger.info("Transaction submitted: %s", tx_id)
        return tx_id

    async def fetch_transactions(
        self, address: str, cursor: str | None = None
    ) -> RawTransactionPage:
        params = {"cursor": cursor} if cursor else {}
        data = await self._get(
            f"{API_PREFIX}/account/{address}/txs",
            "Fetch transaction history",
            params=params,
        )
        txs = data.get("txs", [])
        has_more = len(txs) == data.get("limit")
        return RawTransactionPage(
            txs=txs,
            has_more=has_more,
            cursor=txs[-1].get("cursor") if has_more and txs else None,
        )

    async def fetch_transaction(self, tx_id: str) -> dict[str, Any] | None:
        data = await asyncio.to_thread(
            self.client.get_optional, f"{API_PREFIX}/tx/{tx_id}", "Fetch transaction"
        )
        if data is None:
            return None
        return data.get("tx", data)
