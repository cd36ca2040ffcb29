"""Transaction history feature module for Stellar Quick Wallet."""

from stellar_wallet.features.history.service import (
    HistoryService,
    TransactionPage,
    TransactionRecord,
    explorer_url,
)

__all__ = ["HistoryService", "TransactionPage", "TransactionRecord", "explorer_url"]
