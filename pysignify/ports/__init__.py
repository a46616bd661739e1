"""Capability interfaces used by the signify operations.

Adapters implementing these live in ``pysignify.adapters``. Operations take
them as arguments so tests can substitute deterministic implementations.
"""

from pysignify.ports.kdf import KeyDerivationProtocol
from pysignify.ports.memory import MemoryPinnerProtocol
from pysignify.ports.passphrase import PassphraseSourceProtocol

__all__ = [
    "KeyDerivationProtocol",
    "MemoryPinnerProtocol",
    "PassphraseSourceProtocol",
]
