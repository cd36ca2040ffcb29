"""Tests for transaction history service."""

from datetime import datetime, timezone

import pytest

from stellar_wallet.features.history.service import (
    HistoryService,
    explorer_url,
    parse_timestamp,
)
from stellar_wallet.shared.api import RawTransactionPage
from stellar_wallet.shared.network import NetworkError, NetworkErrorType
from stellar_wallet.shared.units import Amount
from wallet_vectors import RANDOM_ADDRESS, SECOND_ADDRESS

THIRD_ADDRESS = "GDYSRGTDKQ4WVAASBDZR3IVQUGJMY5HPE5X3ENRLBN5JF6M3RDLS547J"


def incoming_tx(tx_id="in-1", cursor="c1"):
    return {
        "id": tx_id,
        "from": SECOND_ADDRESS,
        "fee": "0.00001",
        "timestamp": "2024-01-02T03:04:05Z",
        "memo": "hello",
        "cursor": cursor,
        "operations": [
            {"destination": RANDOM_ADDRESS, "amount": "5"},
            {"destination": THIRD_ADDRESS, "amount": "7"},
            {"destination": RANDOM_ADDRESS, "amount": "0.5"},
        ],
    }


def outgoing_tx(tx_id="out-1", cursor="c2"):
    return {
        "id": tx_id,
        "from": RANDOM_ADDRESS,
        "fee": "0.0008025",
        "timestamp": 1_700_000_000_000,
        "cursor": cursor,
        "operations": [
            {"destination": SECOND_ADDRESS, "amount": "1"},
            {"destination": THIRD_ADDRESS, "amount": "2"},
        ],
    }


@pytest.fixture
def history(loaded_wallet, fake_api):
    return HistoryService(loaded_wallet, fake_api)


class TestExplorerUrl:
    def test_public_and_testnet(self):
        assert explorer_url("abc", "public") == "https://stellar.expert/explorer/public/tx/abc"
        assert explorer_url("abc", "testnet") == "https://stellar.expert/explorer/testnet/tx/abc"


class TestParseTimestamp:
    def test_iso_with_z(self):
        assert parse_timestamp("2024-01-02T03:04:05Z") == datetime(
            2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc
        )

    def test_epoch_millis(self):
        assert parse_timestamp(1_700_000_000_000) == datetime.fromtimestamp(
            1_700_000_000, tz=timezone.utc
        )

    def test_missing(self):
        assert parse_timestamp(None) is None


class TestTransform:
    def test_incoming_sums_payments_to_wallet(self, history):
        record = history.transform(incoming_tx())
        assert record.incoming is True
        assert record.to == RANDOM_ADDRESS
        assert record.amount == Amount(55_000_000)
        assert record.fee == Amount(100)
        assert record.memo == "hello"
        assert record.url == "https://stellar.expert/explorer/public/tx/in-1"

    def test_outgoing_uses_last_destination(self, history):
        record = history.transform(outgoing_tx())
        assert record.incoming is False
        assert record.from_address == RANDOM_ADDRESS
        assert record.to == THIRD_ADDRESS
        assert record.amount == Amount(30_000_000)
        assert record.fee == Amount(8025)
        assert record.memo is None


class TestLoadTransactions:
    @pytest.mark.asyncio
    async def test_first_page_and_cursor(self, history, fake_api):
        fake_api.pages[None] = RawTransactionPage(
            txs=[incoming_tx(), outgoing_tx()], has_more=True, cursor="c2"
        )
        fake_api.pages["c2"] = RawTransactionPage(
            txs=[incoming_tx("in-2", "c3")], has_more=False, cursor=None
        )

        first = await history.load_transactions()
        assert [r.id for r in first.transactions] == ["in-1", "out-1"]
        assert first.has_more is True
        assert first.cursor == "c2"

        second = await history.load_transactions(first.cursor)
        assert [r.id for r in second.transactions] == ["in-2"]
        assert second.has_more is False

    @pytest.mark.asyncio
    async def test_load_transaction_uses_cache(self, history, fake_api):
        fake_api.pages[None] = RawTransactionPage(
            txs=[incoming_tx()], has_more=False, cursor=None
        )
        await history.load_transactions()

        record = await history.load_transaction("in-1")
        assert record is not None
        assert fake_api.count("tx") == 0

    @pytest.mark.asyncio
    async def test_reload_without_cursor_clears_cache(self, history, fake_api):
        fake_api.pages[None] = RawTransactionPage(
            txs=[incoming_tx()], has_more=False, cursor=None
        )
        await history.load_transactions()
        fake_api.pages[None] = RawTransactionPage(txs=[], has_more=False, cursor=None)
        await history.load_transactions()

        assert await history.load_transaction("in-1") is None
        assert fake_api.count("tx") == 1

    @pytest.mark.asyncio
    async def test_load_transaction_fetches_unknown(self, history, fake_api):
        fake_api.transactions["out-1"] = outgoing_tx()
        record = await history.load_transaction("out-1")
        assert record.amount == Amount(30_000_000)

    @pytest.mark.asyncio
    async def test_load_transaction_propagates_other_errors(self, history, fake_api):
        async def failing(tx_id):
            raise NetworkError(error_type=NetworkErrorType.TIMEOUT, message="timeout")

        fake_api.fetch_transaction = failing
        with pytest.raises(NetworkError):
            await history.load_transaction("x")
