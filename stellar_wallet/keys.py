"""Stellar key material: address checks and Ed25519 key pairs."""

from __future__ import annotations

from stellar_sdk import Keypair, StrKey

from stellar_wallet.shared.errors import WalletError

KEY_LENGTH = 32


def is_valid_public_key(address: str) -> bool:
    return isinstance(address, str) and StrKey.is_valid_ed25519_public_key(address)


def key_pair_from_seed(seed: bytes) -> Keypair:
    """Wallet key from a BIP39 seed: its first 32 bytes are the Ed25519 key."""
    if not isinstance(seed, (bytes, bytearray)):
        raise TypeError(
            f"seed must be an instance of bytes, {type(seed).__name__} provided"
        )
    if len(seed) < KEY_LENGTH:
        raise ValueError(f"seed must be at least {KEY_LENGTH} bytes")
    return Keypair.from_raw_ed25519_seed(bytes(seed[:KEY_LENGTH]))


def key_pair_from_secret(secret: str) -> Keypair:
    if not isinstance(secret, str) or not StrKey.is_valid_ed25519_secret_seed(secret):
        raise WalletError.invalid_secret()
    return Keypair.from_secret(secret)
