"""Signature verification, detached and embedded.

When no public key is given, the key named in a signature's
"verify with <path>" comment is used, but only if it lies below
``SAFE_PUBKEY_DIR`` and contains no "/../" segment. The signature comment
is untrusted input; this confinement is what keeps a forged signature from
choosing its own key.
"""

from __future__ import annotations

import structlog

from pysignify import ed25519
from pysignify.constants import SAFE_PUBKEY_DIR, VERIFY_WITH
from pysignify.envelope import parse_envelope, read_envelope
from pysignify.errors import (
    InvalidSignatureError,
    PathTrustError,
    UsageError,
    WrongKeyError,
)
from pysignify.fileio import read_file, write_file
from pysignify.output import console
from pysignify.records import PublicKeyRecord, SignatureRecord

logger = structlog.get_logger(__name__)

VERIFIED_LINE = "Signature Verified"


def trusted_pubkey_path(sig_comment: str) -> str:
    """Recover the public key path from a signature comment.

    Raises:
        UsageError: If the comment names no public key.
        PathTrustError: If the named path is outside the trusted directory.
    """
    if VERIFY_WITH not in sig_comment:
        raise UsageError("must specify pubkey")
    path = sig_comment.split(VERIFY_WITH, 1)[1]
    if not path.startswith(SAFE_PUBKEY_DIR) or "/../" in path:
        logger.warning("untrusted_pubkey_path", path=path)
        raise PathTrustError(path)
    return path


def read_pubkey(pubkey_path: str, sig_comment: str) -> PublicKeyRecord:
    if not pubkey_path:
        pubkey_path = trusted_pubkey_path(sig_comment)
    return PublicKeyRecord.decode(read_envelope(pubkey_path).blob)


def check_signature(
    pubkey: PublicKeyRecord,
    message: bytes | bytearray,
    sig: SignatureRecord,
    quiet: bool = False,
) -> None:
    """Verify ``sig`` over ``message`` with ``pubkey``.

    Args:
        pubkey: Public key record.
        message: Signed bytes.
        sig: Signature record.
        quiet: Suppress the confirmation line.

    Raises:
        WrongKeyError: If the key ids differ.
        InvalidSignatureError: If the Ed25519 check fails.
    """
    if pubkey.keynum != sig.keynum:
        raise WrongKeyError(expected=pubkey.keynum.hex(), actual=sig.keynum.hex())
    if not ed25519.verify(pubkey.pubkey, message, sig.sig):
        raise InvalidSignatureError()
    logger.info("signature_verified", keynum=sig.keynum.hex())
    if not quiet:
        console.print(VERIFIED_LINE, markup=False, highlight=False)


def verify_detached(
    pubkey_path: str, msg_path: str, sig_path: str, quiet: bool = False
) -> None:
    """Verify a message against a separate signature file.

    Args:
        pubkey_path: Public key; "" to use the one named by the signature.
        msg_path: Message file (``"-"`` for stdin).
        sig_path: Signature envelope.
        quiet: Suppress the confirmation line.

    Raises:
        FormatError: If an envelope is malformed.
        PathTrustError: If a recovered key path is untrusted.
        VerificationError: If the signature does not verify.
        SignifyIOError: If a file cannot be read.
    """
    message = read_file(msg_path)
    envelope = read_envelope(sig_path)
    sig = SignatureRecord.decode(envelope.blob)
    pubkey = read_pubkey(pubkey_path, envelope.comment)
    check_signature(pubkey, message, sig, quiet)


def verify_embedded(pubkey_path: str, sig_path: str, quiet: bool = False) -> bytes:
    """Verify a signature carrying its message, and return the message.

    Raises:
        Same as ``verify_detached``.
    """
    envelope = parse_envelope(read_file(sig_path), sig_path)
    sig = SignatureRecord.decode(envelope.blob)
    pubkey = read_pubkey(pubkey_path, envelope.comment)
    check_signature(pubkey, envelope.message, sig, quiet)
    return envelope.message


def verify(
    pubkey_path: str,
    msg_path: str,
    sig_path: str,
    embed: bool = False,
    quiet: bool = False,
) -> None:
    """Verify a signature; in embed mode also write the message to ``msg_path``."""
    if not embed:
        verify_detached(pubkey_path, msg_path, sig_path, quiet)
        return
    message = verify_embedded(pubkey_path, sig_path, quiet)
    write_file(msg_path, [message])
