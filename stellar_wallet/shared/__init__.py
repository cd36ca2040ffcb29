"""Shared utilities for Stellar Quick Wallet."""

from stellar_wallet.shared.api import LedgerAPI, LedgerServiceProtocol
from stellar_wallet.shared.cache import (
    AccountSnapshot,
    LedgerCache,
    LedgerParameters,
    MemoCache,
)
from stellar_wallet.shared.config import WalletConfig
from stellar_wallet.shared.errors import WalletError, WalletErrorKind
from stellar_wallet.shared.logging import (
    ContextAdapter,
    LoggingConfig,
    LogLevel,
    format_error_for_user,
    get_logger,
    get_user_friendly_error,
    sanitize_dict,
    sanitize_message,
    setup_logging,
)
from stellar_wallet.shared.network import (
    NetworkClient,
    NetworkError,
    NetworkErrorType,
    RetryConfig,
    TimeoutConfig,
)
from stellar_wallet.shared.storage import JsonFileStorage, MemoryStorage
from stellar_wallet.shared.units import Amount, atom_to_unit, unit_to_atom

__all__ = [
    "AccountSnapshot",
    "Amount",
    "JsonFileStorage",
    "LedgerAPI",
    "LedgerCache",
    "LedgerParameters",
    "LedgerServiceProtocol",
    "MemoCache",
    "MemoryStorage",
    "NetworkClient",
    "NetworkError",
    "NetworkErrorType",
    "RetryConfig",
    "TimeoutConfig",
    "WalletConfig",
    "WalletError",
    "WalletErrorKind",
    "atom_to_unit",
    "unit_to_atom",
    "ContextAdapter",
    "LoggingConfig",
    "LogLevel",
    "format_error_for_user",
    "get_logger",
    "get_user_friendly_error",
    "sanitize_dict",
    "sanitize_message",
    "setup_logging",
]
