"""Per-wallet memoization of ledger queries.

Concurrent callers asking for the same key share one in-flight task, so a
burst of validations triggers a single round trip. Failures reach every
waiter and are never stored.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Hashable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerParameters:
    fee: int
    min_reserve: int


@dataclass(frozen=True)
class AccountSnapshot:
    balance: int
    sequence: int
    is_active: bool


@dataclass
class _Entry:
    value: Any
    expires_at: float | None


class MemoCache:
    def __init__(self, ttl: float | None = None):
        self.ttl = ttl
        self._entries: dict[Hashable, _Entry] = {}
        self._inflight: dict[Hashable, asyncio.Task] = {}

    def _lookup(self, key: Hashable) -> _Entry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at is not None and entry.expires_at <= time.monotonic():
            del self._entries[key]
            return None
        return entry

    async def get_or_fetch(
        self, key: Hashable, fetch: Callable[[], Awaitable[Any]]
    ) -> Any:
        entry = self._lookup(key)
        if entry is not None:
            return entry.value

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._run(key, fetch))
            self._inflight[key] = task
        return await asyncio.shield(task)

    async def _run(self, key: Hashable, fetch: Callable[[], Awaitable[Any]]) -> Any:
        try:
            value = await fetch()
        except BaseException:
            if self._inflight.get(key) is asyncio.current_task():
                del self._inflight[key]
            raise

        # An invalidation during the fetch unregisters this task; its result
        # is still returned to waiters but not stored.
        if self._inflight.get(key) is asyncio.current_task():
            del self._inflight[key]
            expires_at = time.monotonic() + self.ttl if self.ttl is not None else None
            self._entries[key] = _Entry(value, expires_at)
        return value

    def invalidate(self, key: Hashable) -> None:
        self._entries.pop(key, None)
        self._inflight.pop(key, None)

    def invalidate_all(self) -> None:
        self._entries.clear()
        self._inflight.clear()
        logger.debug("Ledger cache cleared")

    def __contains__(self, key: Hashable) -> bool:
        return self._lookup(key) is not None


class LedgerCache:
    """Read-through cache over the ledger service for one wallet."""

    LEDGER_KEY = ("ledger",)

    def __init__(self, api, ttl: float | None = None):
        self.api = api
        self.memo = MemoCache(ttl)

    async def get_ledger_params(self) -> LedgerParameters:
        return await self.memo.get_or_fetch(self.LEDGER_KEY, self._fetch_ledger_params)

    async def get_account_snapshot(self, address: str) -> AccountSnapshot:
        return await self.memo.get_or_fetch(
            ("account", address), lambda: self.api.fetch_account_info(address)
        )

    async def _fetch_ledger_params(self) -> LedgerParameters:
        params = await self.api.fetch_ledger_parameters()
        logger.info(
            "Ledger parameters: fee=%d min_reserve=%d", params.fee, params.min_reserve
        )
        return params

    def forget_account(self, address: str) -> None:
        self.memo.invalidate(("account", address))

    def invalidate_all(self) -> None:
        self.memo.invalidate_all()
