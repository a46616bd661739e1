"""Passphrase-derived masking of secret keys.

The secret key is stored XORed with a mask derived from the passphrase by
bcrypt_pbkdf over a random salt. A key generated without a passphrase has
zero KDF rounds and an all-zero mask, which leaves the key unchanged.
"""

from __future__ import annotations

import hmac

import structlog

from pysignify.errors import (
    EmptyPassphraseError,
    PassphraseMismatchError,
)
from pysignify.ports.kdf import KeyDerivationProtocol
from pysignify.ports.passphrase import PassphraseSourceProtocol
from pysignify.secure_buffer import SecureBuffer

logger = structlog.get_logger(__name__)

PASSPHRASE_PROMPT = "passphrase: "
CONFIRM_PROMPT = "confirm passphrase: "


def xor_mask(data: bytearray, mask: bytes | bytearray) -> None:
    """XOR ``mask`` into ``data`` in place.

    Applying the same mask twice restores the original bytes.

    Raises:
        ValueError: If the lengths differ.
    """
    if len(data) != len(mask):
        raise ValueError(f"mask length {len(mask)} does not match data length {len(data)}")
    for i in range(len(data)):
        data[i] ^= mask[i]


def derive_mask(
    mask: SecureBuffer,
    salt: bytes,
    rounds: int,
    *,
    confirm: bool,
    passphrases: PassphraseSourceProtocol,
    kdf: KeyDerivationProtocol,
) -> None:
    """Fill ``mask`` with bytes derived from a passphrase.

    With ``rounds == 0`` nothing is read and ``mask`` is left all zero.

    Args:
        mask: Output buffer; its length is the number of bytes derived.
        salt: Salt stored in the secret key.
        rounds: bcrypt_pbkdf rounds.
        confirm: Ask for the passphrase twice (key generation).
        passphrases: Where passphrases are read from.
        kdf: The key derivation function.

    Raises:
        EmptyPassphraseError: If the passphrase is empty.
        PassphraseMismatchError: If the confirmation differs.
        PassphraseError: If no passphrase could be read.
    """
    if rounds == 0:
        mask.wipe()
        return

    with SecureBuffer.wrap(passphrases.read(PASSPHRASE_PROMPT)) as passphrase:
        if not passphrase.data:
            raise EmptyPassphraseError()

        if confirm:
            with SecureBuffer.wrap(passphrases.read(CONFIRM_PROMPT)) as confirmation:
                if not hmac.compare_digest(passphrase.data, confirmation.data):
                    raise PassphraseMismatchError()

        logger.debug("kdf_started", rounds=rounds, length=len(mask))
        with SecureBuffer.copy_of(
            kdf.derive(bytes(passphrase.data), salt, rounds, len(mask))
        ) as derived:
            mask.data[:] = derived.data
