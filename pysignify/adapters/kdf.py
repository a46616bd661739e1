"""bcrypt_pbkdf key derivation backed by the ``bcrypt`` package."""

import bcrypt

from pysignify.ports.kdf import KeyDerivationProtocol


class BcryptPbkdf(KeyDerivationProtocol):
    """bcrypt_pbkdf as used by OpenBSD signify (KDF tag "BK").

    signify's default of 42 rounds is below the threshold at which
    ``bcrypt.kdf`` warns, so the warning is disabled here: the round count
    is fixed by the key file, not chosen by this code.
    """

    def derive(self, passphrase: bytes, salt: bytes, rounds: int, length: int) -> bytes:
        return bcrypt.kdf(
            password=passphrase,
            salt=salt,
            desired_key_bytes=length,
            rounds=rounds,
            ignore_few_rounds=True,
        )
