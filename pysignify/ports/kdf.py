"""Passphrase stretching protocol.

The KDF tag stored in a secret key envelope names the algorithm; the only
tag in use is "BK" (bcrypt_pbkdf).
"""

from abc import ABC, abstractmethod


class KeyDerivationProtocol(ABC):
    """Abstract protocol for a salted, deliberately slow KDF."""

    @abstractmethod
    def derive(self, passphrase: bytes, salt: bytes, rounds: int, length: int) -> bytes:
        """Stretch ``passphrase`` into ``length`` bytes.

        Args:
            passphrase: Non-empty passphrase bytes.
            salt: Random salt stored with the key.
            rounds: Number of KDF rounds (> 0).
            length: Number of output bytes.

        Returns:
            The derived bytes. The caller copies them into a secure buffer.
        """
        ...
