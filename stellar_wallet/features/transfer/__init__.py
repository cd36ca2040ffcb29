"""Transfer feature module for Stellar Quick Wallet."""

from stellar_wallet.features.transfer.estimator import FeeEstimator, max_sendable
from stellar_wallet.features.transfer.validators import TransferValidator

__all__ = ["FeeEstimator", "TransferValidator", "max_sendable"]
