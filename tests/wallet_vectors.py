"""Key vectors and an in-memory ledger service shared by the test modules."""

from typing import Any

from stellar_sdk import Network, TransactionEnvelope

from stellar_wallet.shared.api import RawTransactionPage
from stellar_wallet.shared.cache import AccountSnapshot, LedgerParameters
from stellar_wallet.shared.network import NetworkError, NetworkErrorType
from stellar_wallet.shared.units import unit_to_atom

RANDOM_SEED = bytes.fromhex(
    "2b48a48a752f6c49772bf97205660411cd2163fe6ce2de19537e9c94d3648c85"
    "c0d7f405660c20253115aaf1799b1c41cdd62b4cfbb6845bc9475495fc64b874"
)
RANDOM_ADDRESS = "GBBWU2HVQX52SZBQM2EIE5XGKJV2MXUSSHC4PX6C6MWJQAD6HECG5SKY"
RANDOM_SECRET = "SAVURJEKOUXWYSLXFP4XEBLGAQI42ILD7ZWOFXQZKN7JZFGTMSGILGFH"
SECOND_ADDRESS = "GDRWZSZYP42OBP3J4UMEG64XOIB62K2YE2THTLYSZF4WRNWSRDYNPJUT"
SECOND_SECRET = "SCJXKMOP5V66CV6MT2X2XUDDSMG7VGEEHYPFAEK3RT3ZJVSQ3BI7UUZY"


def decode_envelope(
    envelope_xdr: str, passphrase: str = Network.PUBLIC_NETWORK_PASSPHRASE
) -> TransactionEnvelope:
    return TransactionEnvelope.from_xdr(envelope_xdr, passphrase)


class FakeLedgerAPI:
    """In-memory ledger service; amounts are configured in lumens."""

    def __init__(self, base_fee: str = "0.0008025", base_reserve: str = "0.5"):
        self.base_fee = base_fee
        self.base_reserve = base_reserve
        self.accounts: dict[str, dict[str, Any]] = {}
        self.transactions: dict[str, dict[str, Any]] = {}
        self.pages: dict[str | None, RawTransactionPage] = {}
        self.submitted: list[str] = []
        self.calls: list[tuple[str, Any]] = []
        self.submit_error: Exception | None = None
        self.account_error: Exception | None = None
        self.next_tx_id = "123456"

    def set_account(
        self, address: str, balance: Any, sequence: int = 1, is_active: bool = True
    ) -> None:
        self.accounts[address] = {
            "balance": balance,
            "sequence": sequence,
            "isActive": is_active,
        }

    def count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)

    async def fetch_account_info(self, address: str) -> AccountSnapshot:
        self.calls.append(("account", address))
        if self.account_error is not None:
            raise self.account_error
        data = self.accounts.get(
            address, {"balance": 0, "sequence": 0, "isActive": False}
        )
        return AccountSnapshot(
            balance=unit_to_atom(data["balance"]),
            sequence=data["sequence"],
            is_active=data["isActive"],
        )

    async def fetch_ledger_parameters(self) -> LedgerParameters:
        self.calls.append(("ledger", None))
        return LedgerParameters(
            fee=unit_to_atom(self.base_fee),
            min_reserve=unit_to_atom(self.base_reserve) * 2,
        )

    async def submit_transaction(self, envelope_xdr: str) -> str:
        self.calls.append(("submit", envelope_xdr))
        if self.submit_error is not None:
            raise self.submit_error
        self.submitted.append(envelope_xdr)
        return self.next_tx_id

    async def fetch_transactions(
        self, address: str, cursor: str | None = None
    ) -> RawTransactionPage:
        self.calls.append(("txs", cursor))
        return self.pages.get(
            cursor, RawTransactionPage(txs=[], has_more=False, cursor=None)
        )

    async def fetch_transaction(self, tx_id: str) -> dict[str, Any] | None:
        self.calls.append(("tx", tx_id))
        return self.transactions.get(tx_id)


def server_error(
    message: str = "Submit transaction: HTTP error 400: tx_failed",
) -> NetworkError:
    return NetworkError(
        error_type=NetworkErrorType.HTTP_ERROR, message=message, status_code=400
    )
