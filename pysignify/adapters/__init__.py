"""Adapters implementing the capability protocols in ``pysignify.ports``."""

from pysignify.adapters.kdf import BcryptPbkdf
from pysignify.adapters.memory import LibcMemoryPinner, NullMemoryPinner, default_pinner
from pysignify.adapters.passphrase import TerminalPassphraseSource

__all__ = [
    "BcryptPbkdf",
    "LibcMemoryPinner",
    "NullMemoryPinner",
    "TerminalPassphraseSource",
    "default_pinner",
]
