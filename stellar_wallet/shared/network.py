"""HTTP access to the ledger query service with timeouts and retry/backoff.

Every failure leaves this module as a NetworkError. Transport failures and
the status codes in RetryConfig.retryable_status_codes are retried; a
response that is not JSON, or any other HTTP error, fails at once.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

import requests
from requests.exceptions import ConnectionError, HTTPError, Timeout

logger = logging.getLogger(__name__)


class NetworkErrorType(Enum):
    TIMEOUT = "timeout"
    CONNECTION_ERROR = "connection_error"
    HTTP_ERROR = "http_error"
    INVALID_RESPONSE = "invalid_response"
    UNKNOWN = "unknown"


@dataclass
class NetworkError(Exception):
    error_type: NetworkErrorType
    message: str
    original_error: Exception | None = None
    status_code: int | None = None
    response_text: str | None = None

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_exception(
        cls, error: Exception, node_url: str, context: str = ""
    ) -> "NetworkError":
        prefix = f"{context}: " if context else ""

        if isinstance(error, HTTPError):
            response = error.response
            status_code = getattr(response, "status_code", None)
            body = getattr(response, "text", None)
            return cls(
                error_type=NetworkErrorType.HTTP_ERROR,
                message=f"{prefix}HTTP error {status_code}: {body or 'no response body'}",
                original_error=error,
                status_code=status_code,
                response_text=body,
            )
        if isinstance(error, Timeout):
            error_type = NetworkErrorType.TIMEOUT
            message = f"Ledger node request timeout: {node_url}"
        elif isinstance(error, ConnectionError):
            error_type = NetworkErrorType.CONNECTION_ERROR
            message = f"Cannot connect to ledger node {node_url}. Check your network connection."
        elif isinstance(error, ValueError):
            error_type = NetworkErrorType.INVALID_RESPONSE
            message = f"Ledger node {node_url} returned a non-JSON response"
        else:
            error_type = NetworkErrorType.UNKNOWN
            message = f"Network error: {error}"
        return cls(error_type=error_type, message=prefix + message, original_error=error)


@dataclass
class TimeoutConfig:
    connect_timeout: float = 5.0
    read_timeout: float = 15.0

    @property
    def request_timeout(self) -> tuple[float, float]:
        return (self.connect_timeout, self.read_timeout)


@dataclass
class RetryConfig:
    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    retryable_status_codes: set[int] = field(
        default_factory=lambda: {408, 429, 500, 502, 503, 504}
    )

    def calculate_delay(self, attempt: int) -> float:
        return min(self.base_delay * self.exponential_base**attempt, self.max_delay)

    def is_retryable(self, error: Exception) -> bool:
        if isinstance(error, (Timeout, ConnectionError)):
            return True
        if isinstance(error, HTTPError):
            return getattr(error.response, "status_code", None) in self.retryable_status_codes
        return False


class NetworkClient:
    """Blocking JSON client bound to one ledger node.

    ``on_retry(attempt, error, delay)`` is called before each backoff sleep.
    Without an explicit ``session`` every calling thread gets its own
    ``requests.Session``.
    """

    def __init__(
        self,
        node_url: str,
        timeout_config: TimeoutConfig | None = None,
        retry_config: RetryConfig | None = None,
        on_retry: Callable[[int, Exception, float], None] | None = None,
        session: requests.Session | None = None,
    ):
        self.node_url = node_url.rstrip("/")
        self.timeout_config = timeout_config or TimeoutConfig()
        self.retry_config = retry_config or RetryConfig()
        self.on_retry = on_retry
        self._session = session
        self._local = threading.local()

    @property
    def session(self) -> requests.Session:
        if self._session is not None:
            return self._session
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._local.session = requests.Session()
        return session

    def _send(self, method: str, url: str, allow_missing: bool, **kwargs) -> Any:
        response = self.session.request(method, url, **kwargs)
        if allow_missing and response.status_code == 404:
            return None
        response.raise_for_status()
        return response.json()

    def request(
        self,
        method: str,
        endpoint: str,
        context: str = "",
        allow_missing: bool = False,
        **kwargs,
    ) -> Any:
        url = f"{self.node_url}/{endpoint.lstrip('/')}"
        kwargs.setdefault("timeout", self.timeout_config.request_timeout)
        attempts = self.retry_config.max_retries + 1

        for attempt in range(attempts):
            try:
                return self._send(method, url, allow_missing, **kwargs)
            except (requests.RequestException, ValueError) as e:
                if attempt + 1 >= attempts or not self.retry_config.is_retryable(e):
                    raise NetworkError.from_exception(e, self.node_url, context) from e

                delay = self.retry_config.calculate_delay(attempt)
                logger.warning(
                    "%s %s failed (attempt %d/%d), retrying in %.1fs: %s",
                    method,
                    endpoint,
                    attempt + 1,
                    attempts,
                    delay,
                    e,
                )
                if self.on_retry:
                    self.on_retry(attempt + 1, e, delay)
                time.sleep(delay)

    def get(self, endpoint: str, context: str = "", **kwargs) -> Any:
        return self.request("GET", endpoint, context, **kwargs)

    def get_optional(self, endpoint: str, context: str = "", **kwargs) -> Any | None:
        """GET that maps a 404 to ``None`` instead of raising."""
        return self.request("GET", endpoint, context, allow_missing=True, **kwargs)

    def post(self, endpoint: str, context: str = "", **kwargs) -> Any:
        return self.request("POST", endpoint, context, **kwargs)
