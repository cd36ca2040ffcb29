"""Unit tests for the coalescing ledger cache."""

import asyncio

import pytest

from stellar_wallet.shared.cache import AccountSnapshot, LedgerCache, MemoCache
from wallet_vectors import RANDOM_ADDRESS, SECOND_ADDRESS, FakeLedgerAPI


class SlowFetcher:
    def __init__(self, results):
        self.results = list(results)
        self.calls = 0
        self.release = asyncio.Event()

    async def __call__(self):
        self.calls += 1
        result = self.results.pop(0)
        await self.release.wait()
        if isinstance(result, Exception):
            raise result
        return result


class FakeClock:
    def __init__(self, now: float):
        self.now = now

    def monotonic(self) -> float:
        return self.now


class TestMemoCache:
    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_fetch(self):
        cache = MemoCache()
        fetch = SlowFetcher(["value"])

        tasks = [asyncio.ensure_future(cache.get_or_fetch("key", fetch)) for _ in range(5)]
        await asyncio.sleep(0)
        fetch.release.set()
        results = await asyncio.gather(*tasks)

        assert results == ["value"] * 5
        assert fetch.calls == 1
        assert "key" in cache

    @pytest.mark.asyncio
    async def test_different_keys_fetch_independently(self):
        cache = MemoCache()
        calls = []

        async def fetch_for(name):
            calls.append(name)
            return name

        a, b = await asyncio.gather(
            cache.get_or_fetch("a", lambda: fetch_for("a")),
            cache.get_or_fetch("b", lambda: fetch_for("b")),
        )
        assert (a, b) == ("a", "b")
        assert sorted(calls) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_failure_reaches_all_waiters_and_is_not_cached(self):
        cache = MemoCache()
        fetch = SlowFetcher([RuntimeError("boom"), "recovered"])

        tasks = [asyncio.ensure_future(cache.get_or_fetch("key", fetch)) for _ in range(3)]
        await asyncio.sleep(0)
        fetch.release.set()
        results = await asyncio.gather(*tasks, return_exceptions=True)

        assert all(isinstance(r, RuntimeError) for r in results)
        assert fetch.calls == 1
        assert "key" not in cache

        assert await cache.get_or_fetch("key", fetch) == "recovered"
        assert fetch.calls == 2

    @pytest.mark.asyncio
    async def test_invalidate_during_fetch_skips_store(self):
        cache = MemoCache()
        fetch = SlowFetcher(["stale"])

        task = asyncio.ensure_future(cache.get_or_fetch("key", fetch))
        await asyncio.sleep(0)
        cache.invalidate_all()
        fetch.release.set()

        assert await task == "stale"
        assert "key" not in cache

    @pytest.mark.asyncio
    async def test_ttl_expiry(self, monkeypatch):
        clock = FakeClock(1000.0)
        monkeypatch.setattr("stellar_wallet.shared.cache.time", clock)
        cache = MemoCache(ttl=60)
        values = iter(["first", "second"])

        async def fetch():
            return next(values)

        assert await cache.get_or_fetch("key", fetch) == "first"
        clock.now += 59
        assert await cache.get_or_fetch("key", fetch) == "first"
        clock.now += 2
        assert await cache.get_or_fetch("key", fetch) == "second"

    @pytest.mark.asyncio
    async def test_no_ttl_keeps_values(self):
        cache = MemoCache(ttl=None)

        async def fetch():
            return 1

        await cache.get_or_fetch("key", fetch)
        assert "key" in cache
        cache.invalidate("key")
        assert "key" not in cache


class TestLedgerCache:
    @pytest.mark.asyncio
    async def test_ledger_params_fetched_once(self):
        api = FakeLedgerAPI()
        cache = LedgerCache(api)

        params = await asyncio.gather(*(cache.get_ledger_params() for _ in range(4)))

        assert params[0].fee == 8025
        assert params[0].min_reserve == 10_000_000
        assert api.count("ledger") == 1

    @pytest.mark.asyncio
    async def test_account_snapshots_keyed_by_address(self):
        api = FakeLedgerAPI()
        api.set_account(RANDOM_ADDRESS, "20")
        cache = LedgerCache(api)

        own = await cache.get_account_snapshot(RANDOM_ADDRESS)
        other = await cache.get_account_snapshot(SECOND_ADDRESS)
        await cache.get_account_snapshot(RANDOM_ADDRESS)

        assert own == AccountSnapshot(balance=200_000_000, sequence=1, is_active=True)
        assert other.is_active is False
        assert api.count("account") == 2

    @pytest.mark.asyncio
    async def test_forget_account_refetches(self):
        api = FakeLedgerAPI()
        api.set_account(SECOND_ADDRESS, "0", is_active=False)
        cache = LedgerCache(api)

        assert (await cache.get_account_snapshot(SECOND_ADDRESS)).is_active is False
        api.set_account(SECOND_ADDRESS, "5")
        cache.forget_account(SECOND_ADDRESS)
        assert (await cache.get_account_snapshot(SECOND_ADDRESS)).is_active is True

    @pytest.mark.asyncio
    async def test_invalidate_all(self):
        api = FakeLedgerAPI()
        cache = LedgerCache(api)

        await cache.get_ledger_params()
        cache.invalidate_all()
        await cache.get_ledger_params()
        assert api.count("ledger") == 2
