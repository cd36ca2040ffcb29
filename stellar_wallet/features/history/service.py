"""Transaction history business logic service for Stellar Quick Wallet."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol

from stellar_wallet.shared.api import LedgerServiceProtocol
from stellar_wallet.shared.logging import get_logger
from stellar_wallet.shared.units import Amount, unit_to_atom

logger = get_logger(__name__)

EXPLORER_BASE_URL = "https://stellar.expert/explorer"


def explorer_url(tx_id: str, network: str) -> str:
    segment = "testnet" if network == "testnet" else "public"
    return f"{EXPLORER_BASE_URL}/{segment}/tx/{tx_id}"


def parse_timestamp(value: Any) -> datetime | None:
    """Accept ISO 8601 strings or epoch milliseconds."""
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class TransactionRecord:
    """Data class representing one transfer as seen from the wallet."""

    id: str
    from_address: str
    to: str | None
    amount: Amount
    fee: Amount
    incoming: bool
    timestamp: datetime | None
    memo: str | None
    network: str

    @property
    def url(self) -> str:
        return explorer_url(self.id, self.network)


@dataclass
class TransactionPage:
    transactions: list[TransactionRecord] = field(default_factory=list)
    has_more: bool = False
    cursor: str | None = None


class WalletProtocolForHistory(Protocol):
    """Protocol defining wallet interface needed for history."""

    @property
    def address(self) -> str: ...
    @property
    def decimals(self) -> int: ...
    @property
    def network(self) -> str: ...


class HistoryService:
    def __init__(self, wallet: WalletProtocolForHistory, api: LedgerServiceProtocol):
        self.wallet = wallet
        self.api = api
        self._records: dict[str, TransactionRecord] = {}

    def transform(self, raw: dict[str, Any]) -> TransactionRecord:
        own = self.wallet.address
        decimals = self.wallet.decimals
        incoming = raw.get("from") != own

        to = None
        total = 0
        for operation in raw.get("operations", []):
            destination = operation.get("destination")
            if incoming and destination == own:
                to = destination
                total += unit_to_atom(operation.get("amount") or 0, decimals)
            elif not incoming and destination != own:
                # Last outgoing destination wins.
                to = destination
                total += unit_to_atom(operation.get("amount") or 0, decimals)

        return TransactionRecord(
            id=raw["id"],
            from_address=raw.get("from", ""),
            to=to,
            amount=Amount(total, decimals),
            fee=Amount(unit_to_atom(raw.get("fee") or 0, decimals), decimals),
            incoming=incoming,
            timestamp=parse_timestamp(raw.get("timestamp")),
            memo=raw.get("memo"),
            network=self.wallet.network,
        )

    async def load_transactions(self, cursor: str | None = None) -> TransactionPage:
        if not cursor:
            self._records.clear()

        page = await self.api.fetch_transactions(self.wallet.address, cursor)
        records = [self.transform(raw) for raw in page.txs]
        for record in records:
            self._records[record.id] = record

        logger.debug(
            "Loaded %d transactions", len(records), extra={"context": {"cursor": cursor}}
        )
        return TransactionPage(
            transactions=records, has_more=page.has_more, cursor=page.cursor
        )

    async def load_transaction(self, tx_id: str) -> TransactionRecord | None:
        if tx_id in self._records:
            return self._records[tx_id]

        raw = await self.api.fetch_transaction(tx_id)
        if raw is None:
            logger.info("Transaction %s not found", tx_id)
            return None
        return self.transform(raw)

    def clear(self) -> None:
        self._records.clear()
