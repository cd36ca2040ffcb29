"""Logging setup and error wording for Stellar Quick Wallet.

Log output is redacted before it reaches a handler: secret StrKeys, raw
seeds and ``secret=...`` style pairs never hit the log file. Errors raised
by the wallet or the ledger node can be turned into short messages for the
user with :func:`format_error_for_user`.
"""

from __future__ import annotations

import json
import logging
import os
import re
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from stellar_wallet.shared.config import default_storage_dir
from stellar_wallet.shared.errors import WalletError, WalletErrorKind
from stellar_wallet.shared.network import NetworkError, NetworkErrorType

LOG_FILENAME = "wallet.log"
_TRUTHY = {"1", "true", "yes", "on"}


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @property
    def numeric(self) -> int:
        return logging.getLevelName(self.value)


@dataclass
class LoggingConfig:
    log_level: LogLevel = LogLevel.INFO
    log_file: Path | None = field(default=None)
    write_file: bool = True
    log_to_stdout: bool = False
    json_output: bool = False
    redact: bool = True

    @classmethod
    def from_environment(cls) -> "LoggingConfig":
        try:
            level = LogLevel(os.getenv("STELLAR_WALLET_LOG_LEVEL", "INFO").upper())
        except ValueError:
            level = LogLevel.INFO
        return cls(
            log_level=level,
            log_to_stdout=os.getenv("STELLAR_WALLET_LOG_STDOUT", "").lower() in _TRUTHY,
            json_output=os.getenv("STELLAR_WALLET_LOG_FORMAT", "").lower() == "json",
        )

    def resolve_log_file(self) -> Path:
        return self.log_file or default_storage_dir() / LOG_FILENAME


# (pattern, replacement) applied in order
REDACTIONS: list[tuple[re.Pattern[str], str]] = [
    (
        re.compile(r"(secret|seed|password)(['\"]?\s*[:=]\s*['\"]?)([^\s'\",}]+)", re.IGNORECASE),
        r"\1\2[REDACTED]",
    ),
    (re.compile(r"\bS[A-Z2-7]{55}\b"), "[SECRET_REDACTED]"),
    (re.compile(r"\b[A-Fa-f0-9]{128}\b"), "[SEED_REDACTED]"),
]
ADDRESS_PATTERN = re.compile(r"\bG[A-Z2-7]{55}\b")
SECRET_KEY_NAMES = ("secret", "seed", "private", "password")


def sanitize_message(message: str, preserve_addresses: bool = True) -> str:
    if not message:
        return message
    for pattern, replacement in REDACTIONS:
        message = pattern.sub(replacement, message)
    if preserve_addresses:
        return message
    return ADDRESS_PATTERN.sub("[ADDRESS_REDACTED]", message)


def _sanitize_value(value: Any, preserve_addresses: bool) -> Any:
    if isinstance(value, str):
        return sanitize_message(value, preserve_addresses)
    if isinstance(value, dict):
        return sanitize_dict(value, preserve_addresses)
    if isinstance(value, (list, tuple)):
        return [_sanitize_value(item, preserve_addresses) for item in value]
    return value


def sanitize_dict(data: dict[str, Any], preserve_addresses: bool = True) -> dict[str, Any]:
    """Copy of ``data`` with secret-named keys blanked and strings redacted."""
    return {
        key: "[REDACTED]"
        if any(name in key.lower() for name in SECRET_KEY_NAMES)
        else _sanitize_value(value, preserve_addresses)
        for key, value in data.items()
    }


UserMessage = tuple[str, str | None]
UNEXPECTED_ERROR: UserMessage = ("An unexpected error occurred.", None)

WALLET_ERROR_MESSAGES: dict[WalletErrorKind, UserMessage] = {
    WalletErrorKind.INVALID_ADDRESS: (
        "The address provided is not valid.",
        "Stellar addresses start with 'G' and are 56 characters long.",
    ),
    WalletErrorKind.DESTINATION_EQUALS_SOURCE: ("You cannot send to your own address.", None),
    WalletErrorKind.INVALID_MEMO: (
        "The memo is too long.",
        "A text memo can hold at most 28 bytes.",
    ),
    WalletErrorKind.INACTIVE_ACCOUNT: (
        "This account is not activated yet.",
        "Receive at least the minimum reserve to activate it.",
    ),
    WalletErrorKind.SMALL_AMOUNT: ("The amount is too small.", None),
    WalletErrorKind.BIG_AMOUNT: (
        "Insufficient funds for this transaction.",
        "Ensure you keep the minimum reserve plus the fee.",
    ),
    WalletErrorKind.MINIMUM_RESERVE_DESTINATION: (
        "The destination account is not activated.",
        "Send at least the minimum reserve to activate it.",
    ),
    WalletErrorKind.INVALID_SECRET: (
        "The provided key is not valid.",
        "Secret keys start with 'S' and are 56 characters long.",
    ),
    WalletErrorKind.OWN_KEY_IMPORT_REJECTED: ("This key belongs to the current wallet.", None),
}

TRANSPORT_ERROR_MESSAGES: dict[NetworkErrorType, UserMessage] = {
    NetworkErrorType.TIMEOUT: (
        "The ledger node timed out.",
        "Try again later or check your network connection.",
    ),
    NetworkErrorType.CONNECTION_ERROR: (
        "Unable to reach the ledger node.",
        "Check your internet connection and try again.",
    ),
    NetworkErrorType.INVALID_RESPONSE: (
        "The ledger node sent a malformed response.",
        "Try again later.",
    ),
}

HTTP_STATUS_MESSAGES: dict[int, UserMessage] = {
    404: ("The requested resource was not found.", None),
    429: ("Too many requests. Please slow down.", "Wait a moment and try again."),
}

# Result codes the ledger node reports for rejected transactions.
RESULT_CODE_MESSAGES: dict[str, UserMessage] = {
    "tx_bad_seq": (
        "The transaction sequence is out of date.",
        "Reload the wallet and try again.",
    ),
    "tx_too_late": (
        "The transaction expired before it was accepted.",
        "Create a new transaction.",
    ),
    "tx_insufficient_fee": (
        "The network fee was too low.",
        "Reload the wallet to pick up the current fee.",
    ),
    "tx_insufficient_balance": ("Insufficient funds for this transaction.", None),
    "tx_bad_auth": ("The transaction signature was rejected.", None),
    "op_underfunded": ("Insufficient funds for this transaction.", None),
    "op_no_destination": (
        "The destination account is not activated.",
        "Send at least the minimum reserve to activate it.",
    ),
}
RESULT_CODE_PATTERN = re.compile(r"\b(?:tx|op)_[a-z_]+\b")


def _from_result_codes(text: str | None) -> UserMessage | None:
    for code in RESULT_CODE_PATTERN.findall(text or ""):
        if code in RESULT_CODE_MESSAGES:
            return RESULT_CODE_MESSAGES[code]
    return None


def get_user_friendly_error(error: Exception | str) -> UserMessage:
    """Map an error to ``(message, suggested action or None)``."""
    if isinstance(error, WalletError):
        return WALLET_ERROR_MESSAGES[error.kind]

    if isinstance(error, NetworkError):
        if error.error_type in TRANSPORT_ERROR_MESSAGES:
            return TRANSPORT_ERROR_MESSAGES[error.error_type]
        return (
            _from_result_codes(error.response_text or error.message)
            or HTTP_STATUS_MESSAGES.get(error.status_code)
            or UNEXPECTED_ERROR
        )

    return _from_result_codes(str(error)) or UNEXPECTED_ERROR


def format_error_for_user(error: Exception | str) -> str:
    return " ".join(part for part in get_user_friendly_error(error) if part)


class RedactingFormatter(logging.Formatter):
    """Plain text lines with secrets redacted."""

    def __init__(self, redact: bool = True):
        super().__init__(
            fmt="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.redact = redact

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        return sanitize_message(text) if self.redact else text


class JsonFormatter(RedactingFormatter):
    """One JSON object per line; the adapter's ``context`` becomes a field."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
            "message": record.getMessage(),
        }
        context = getattr(record, "context", None)
        if isinstance(context, dict) and context:
            entry["context"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        if self.redact:
            entry = sanitize_dict(entry)
        return json.dumps(entry, default=str)


class ContextAdapter(logging.LoggerAdapter):
    """Adapter that attaches a ``context`` dict to every record it emits."""

    def __init__(self, logger: logging.Logger, context: dict[str, Any] | None = None):
        super().__init__(logger, dict(context or {}))

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["context"] = {**self.extra, **extra.get("context", {})}
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **context: Any) -> "ContextAdapter":
        return ContextAdapter(self.logger, {**self.extra, **context})


_configured = False


def _make_handlers(config: LoggingConfig) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []
    if config.write_file:
        path = config.resolve_log_file()
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))
    if config.log_to_stdout:
        handlers.append(logging.StreamHandler(sys.stdout))
    return handlers


def setup_logging(config: LoggingConfig | None = None, force: bool = False) -> None:
    """Install wallet handlers on the root logger once per process."""
    global _configured
    if _configured and not force:
        return

    config = config or LoggingConfig.from_environment()
    formatter_cls = JsonFormatter if config.json_output else RedactingFormatter
    formatter = formatter_cls(redact=config.redact)

    root = logging.getLogger()
    root.setLevel(config.log_level.numeric)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in _make_handlers(config):
        handler.setFormatter(formatter)
        root.addHandler(handler)

    _configured = True


def get_logger(name: str, context: dict[str, Any] | None = None) -> ContextAdapter:
    if not _configured:
        setup_logging()
    return ContextAdapter(logging.getLogger(name), context)


__all__ = [
    "ContextAdapter",
    "JsonFormatter",
    "LogLevel",
    "LoggingConfig",
    "RedactingFormatter",
    "format_error_for_user",
    "get_logger",
    "get_user_friendly_error",
    "sanitize_dict",
    "sanitize_message",
    "setup_logging",
]
