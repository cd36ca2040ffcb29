"""Import (sweep) feature module for Stellar Quick Wallet."""

from stellar_wallet.features.importing.service import ImportPlan, ImportService

__all__ = ["ImportPlan", "ImportService"]
