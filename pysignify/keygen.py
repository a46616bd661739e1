"""Key pair generation."""

from __future__ import annotations

import hashlib
import os
import secrets

import structlog

from pysignify import ed25519
from pysignify.adapters.kdf import BcryptPbkdf
from pysignify.adapters.passphrase import TerminalPassphraseSource
from pysignify.constants import (
    CHECKSUM_LEN,
    KDFALG,
    KEYNUM_LEN,
    SALT_LEN,
    SECRET_KEY_SIZE,
    STDIO_PATH,
)
from pysignify.envelope import check_comment, write_envelope
from pysignify.errors import SignifyError
from pysignify.masking import derive_mask, xor_mask
from pysignify.ports.kdf import KeyDerivationProtocol
from pysignify.ports.passphrase import PassphraseSourceProtocol
from pysignify.records import PublicKeyRecord, SecretKeyRecord
from pysignify.secure_buffer import SecureBuffer

logger = structlog.get_logger(__name__)

SECKEY_MODE = 0o600
PUBKEY_MODE = 0o666


def generate(
    pubkey_path: str,
    seckey_path: str,
    rounds: int,
    comment: str,
    *,
    passphrases: PassphraseSourceProtocol | None = None,
    kdf: KeyDerivationProtocol | None = None,
) -> None:
    """Generate a key pair and write both envelopes.

    The secret key is written first, owner-only, then the public key. Both
    files are created exclusively; existing files are never overwritten.
    If the public key cannot be written, the secret key file created by
    this call is removed again so no key without its public half is left.

    Args:
        pubkey_path: Where to create the public key.
        seckey_path: Where to create the secret key.
        rounds: bcrypt_pbkdf rounds; 0 stores the key without a passphrase.
        comment: Comment prefix; " secret key" / " public key" is appended.
        passphrases: Passphrase source (terminal by default).
        kdf: Key derivation function (bcrypt_pbkdf by default).

    Raises:
        CommentTooLongError: If either comment exceeds the bound.
        PassphraseError: If the passphrase is empty or not confirmed.
        SignifyIOError: If a key file exists or cannot be written.
    """
    passphrases = passphrases or TerminalPassphraseSource()
    kdf = kdf or BcryptPbkdf()
    log = logger.bind(operation="generate", pubkey=pubkey_path, seckey=seckey_path)

    seckey_comment = f"{comment} secret key"
    pubkey_comment = f"{comment} public key"
    check_comment(seckey_comment)
    check_comment(pubkey_comment)

    keynum = secrets.token_bytes(KEYNUM_LEN)
    salt = secrets.token_bytes(SALT_LEN)

    with (
        SecureBuffer(SECRET_KEY_SIZE) as seckey,
        SecureBuffer(SECRET_KEY_SIZE) as mask,
    ):
        pubkey = ed25519.generate_keypair(seckey.data)
        with SecureBuffer.copy_of(hashlib.sha512(seckey.data).digest()) as digest:
            checksum = bytes(digest.data[:CHECKSUM_LEN])

        derive_mask(mask, salt, rounds, confirm=True, passphrases=passphrases, kdf=kdf)
        xor_mask(seckey.data, mask.data)
        mask.wipe()

        record = SecretKeyRecord(
            kdfalg=KDFALG,
            kdfrounds=rounds,
            salt=salt,
            checksum=checksum,
            keynum=keynum,
            seckey=seckey.data,
        )
        write_envelope(
            seckey_path, seckey_comment, record, exclusive=True, mode=SECKEY_MODE
        )

    try:
        write_envelope(
            pubkey_path,
            pubkey_comment,
            PublicKeyRecord(keynum=keynum, pubkey=pubkey),
            exclusive=True,
            mode=PUBKEY_MODE,
        )
    except SignifyError:
        _remove_orphan(seckey_path, log)
        raise

    log.info("key_pair_generated", keynum=keynum.hex(), rounds=rounds)


def _remove_orphan(seckey_path: str, log: structlog.typing.FilteringBoundLogger) -> None:
    if seckey_path == STDIO_PATH:
        return
    try:
        os.unlink(seckey_path)
    except OSError as e:
        log.warning("orphan_seckey_not_removed", error=e.strerror)
    else:
        log.warning("orphan_seckey_removed")
