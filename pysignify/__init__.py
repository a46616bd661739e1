"""pysignify: sign and verify files in the OpenBSD signify format.

Keys and signatures are Ed25519, stored in small text envelopes; secret
keys are protected with a bcrypt_pbkdf-derived mask.

Example usage:

    from pysignify import generate, sign, verify_detached

    generate("key.pub", "key.sec", rounds=0, comment="release")
    sign("key.sec", "release.tgz", "release.tgz.sig")
    verify_detached("key.pub", "release.tgz", "release.tgz.sig")
"""

__version__ = "0.1.0"

from pysignify.checksum import ManifestReport, check
from pysignify.errors import (
    CommentTooLongError,
    FormatError,
    InvalidSignatureError,
    PassphraseError,
    PathTrustError,
    SignifyError,
    VerificationError,
    WrongKeyError,
    WrongPassphraseError,
)
from pysignify.keygen import generate
from pysignify.signer import sign
from pysignify.verifier import verify, verify_detached, verify_embedded

__all__ = [
    "CommentTooLongError",
    "FormatError",
    "InvalidSignatureError",
    "ManifestReport",
    "PassphraseError",
    "PathTrustError",
    "SignifyError",
    "VerificationError",
    "WrongKeyError",
    "WrongPassphraseError",
    "__version__",
    "check",
    "generate",
    "sign",
    "verify",
    "verify_detached",
    "verify_embedded",
]
