"""Passphrase input protocol."""

from abc import ABC, abstractmethod


class PassphraseSourceProtocol(ABC):
    """Abstract protocol for reading passphrases from the user."""

    @abstractmethod
    def read(self, prompt: str) -> bytearray:
        """Read one passphrase entry.

        Args:
            prompt: Text shown to the user, e.g. "passphrase: ".

        Returns:
            The entry without its line terminator. Ownership passes to the
            caller, which is responsible for zeroing it.

        Raises:
            PassphraseError: If no passphrase could be read.
        """
        ...
