"""Ed25519 primitive backed by ``cryptography``.

signify stores a 64-byte secret key: the 32-byte seed followed by the
32-byte public key. ``cryptography`` works with the seed alone, so the
helpers here convert between the two forms.
"""

from __future__ import annotations

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)

from pysignify.constants import PUBLIC_KEY_SIZE, SECRET_KEY_SIZE

SEED_SIZE = SECRET_KEY_SIZE - PUBLIC_KEY_SIZE


def generate_keypair(seckey: bytearray) -> bytes:
    """Generate a key pair from the OS CSPRNG.

    Args:
        seckey: 64-byte output buffer for seed || public key.

    Returns:
        The 32-byte public key.
    """
    private_key = Ed25519PrivateKey.generate()
    seed = private_key.private_bytes(Encoding.Raw, PrivateFormat.Raw, NoEncryption())
    pubkey = private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
    seckey[:SEED_SIZE] = seed
    seckey[SEED_SIZE:] = pubkey
    return pubkey


def sign(seckey: bytearray, message: bytes | bytearray) -> bytes:
    """Sign ``message`` with a 64-byte signify secret key."""
    private_key = Ed25519PrivateKey.from_private_bytes(bytes(seckey[:SEED_SIZE]))
    return private_key.sign(bytes(message))


def verify(pubkey: bytes, message: bytes | bytearray, signature: bytes) -> bool:
    """Check an Ed25519 signature.

    Returns:
        True if the signature is valid. A malformed public key counts as
        an invalid signature.
    """
    try:
        Ed25519PublicKey.from_public_bytes(pubkey).verify(signature, bytes(message))
    except (InvalidSignature, ValueError):
        return False
    return True
