"""Signing messages with a masked secret key."""

from __future__ import annotations

import hashlib
import hmac

import structlog

from pysignify import ed25519
from pysignify.adapters.kdf import BcryptPbkdf
from pysignify.adapters.passphrase import TerminalPassphraseSource
from pysignify.constants import (
    CHECKSUM_LEN,
    KDFALG,
    PUBKEY_SUFFIX,
    SECKEY_SUFFIX,
    SECRET_KEY_SIZE,
    VERIFY_WITH,
)
from pysignify.envelope import check_comment, read_envelope, write_envelope
from pysignify.errors import UnsupportedAlgorithmError, WrongPassphraseError
from pysignify.fileio import read_file
from pysignify.masking import derive_mask, xor_mask
from pysignify.ports.kdf import KeyDerivationProtocol
from pysignify.ports.passphrase import PassphraseSourceProtocol
from pysignify.records import SecretKeyRecord, SignatureRecord
from pysignify.secure_buffer import SecureBuffer

logger = structlog.get_logger(__name__)

SIGNATURE_MODE = 0o666


def signature_comment(seckey_path: str, seckey_comment: str) -> str:
    """Comment for a new signature.

    A secret key named ``<prefix>.sec`` points verifiers at
    ``<prefix>.pub``; any other name quotes the secret key's comment.
    """
    if seckey_path.endswith(SECKEY_SUFFIX):
        prefix = seckey_path[: -len(SECKEY_SUFFIX)]
        return f"{VERIFY_WITH}{prefix}{PUBKEY_SUFFIX}"
    return f"signature from {seckey_comment}"


def sign(
    seckey_path: str,
    msg_path: str,
    sig_path: str,
    embed: bool = False,
    *,
    passphrases: PassphraseSourceProtocol | None = None,
    kdf: KeyDerivationProtocol | None = None,
) -> None:
    """Sign the file at ``msg_path`` and write a signature envelope.

    The passphrase is checked against the key's checksum before the
    message is read, so a wrong passphrase never produces a signature.

    Args:
        seckey_path: Secret key envelope.
        msg_path: Message to sign (``"-"`` for stdin).
        sig_path: Signature to write (``"-"`` for stdout); truncated if it
            exists.
        embed: Append the message after the signature.
        passphrases: Passphrase source (terminal by default).
        kdf: Key derivation function (bcrypt_pbkdf by default).

    Raises:
        FormatError: If the secret key envelope is malformed.
        UnsupportedAlgorithmError: If the key uses an unknown KDF.
        PassphraseError: If the passphrase is missing, empty or wrong.
        SignifyIOError: If a file cannot be read or written.
    """
    passphrases = passphrases or TerminalPassphraseSource()
    kdf = kdf or BcryptPbkdf()
    log = logger.bind(operation="sign", seckey=seckey_path, message=msg_path)

    envelope = read_envelope(seckey_path)
    with (
        SecureBuffer.wrap(envelope.blob) as blob,
        SecureBuffer(SECRET_KEY_SIZE) as mask,
    ):
        record = SecretKeyRecord.decode(blob.data)
        with SecureBuffer.wrap(record.seckey) as seckey:
            if record.kdfalg != KDFALG:
                raise UnsupportedAlgorithmError("unsupported KDF")

            derive_mask(
                mask,
                record.salt,
                record.kdfrounds,
                confirm=False,
                passphrases=passphrases,
                kdf=kdf,
            )
            xor_mask(seckey.data, mask.data)
            mask.wipe()

            with (
                SecureBuffer.copy_of(hashlib.sha512(seckey.data).digest()) as digest,
                memoryview(digest.data) as view,
            ):
                if not hmac.compare_digest(record.checksum, view[:CHECKSUM_LEN]):
                    log.warning("passphrase_rejected")
                    raise WrongPassphraseError()

            comment = signature_comment(seckey_path, envelope.comment)
            check_comment(comment)

            message = read_file(msg_path)
            sig = SignatureRecord(keynum=record.keynum, sig=ed25519.sign(seckey.data, message))

    write_envelope(
        sig_path,
        comment,
        sig,
        message if embed else b"",
        mode=SIGNATURE_MODE,
    )
    log.info("message_signed", sigfile=sig_path, embedded=embed, size=len(message))
