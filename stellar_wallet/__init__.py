"""Stellar Quick Wallet - client-side core for a single Stellar account.

This package is organized into feature-based modules:
- features.transfer: Transfer validation and fee/max-amount estimation
- features.importing: Sweeping an external account into the wallet
- features.history: Transaction history and explorer links
- shared: Shared utilities (units, ledger cache, network, config, logging)
"""

from stellar_wallet.transaction import TransactionManager
from stellar_wallet.wallet import Wallet, WalletState
from stellar_wallet.shared import (
    Amount,
    LedgerAPI,
    NetworkClient,
    NetworkError,
    NetworkErrorType,
    RetryConfig,
    TimeoutConfig,
    WalletConfig,
    WalletError,
    WalletErrorKind,
)

__version__ = "0.1.0"
__all__ = [
    "Wallet",
    "WalletState",
    "TransactionManager",
    "Amount",
    "LedgerAPI",
    "NetworkClient",
    "NetworkError",
    "NetworkErrorType",
    "RetryConfig",
    "TimeoutConfig",
    "WalletConfig",
    "WalletError",
    "WalletErrorKind",
]
