"""Feature modules for Stellar Quick Wallet.

- transfer: Address, memo and amount validation; fee and max-amount estimation
- importing: Sweep of an external secret key into the wallet
- history: Transaction records, paging and explorer URLs
"""

from stellar_wallet.features import transfer
from stellar_wallet.features import importing
from stellar_wallet.features import history

__all__ = ["transfer", "importing", "history"]
