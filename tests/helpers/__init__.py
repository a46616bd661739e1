"""Test helpers for pysignify tests.

This package contains fake implementations of the capability protocols
for dependency injection in unit tests.

Helpers:
    FakePassphraseSource: Returns scripted passphrase entries
    RecordingPinner: Records pin/unpin calls instead of locking memory

Usage:
    from tests.helpers import FakePassphraseSource, RecordingPinner
"""

from tests.helpers.fakes import (
    FAST_ROUNDS,
    PASSPHRASE,
    FakePassphraseSource,
    RecordingPinner,
)

__all__ = ["FAST_ROUNDS", "PASSPHRASE", "FakePassphraseSource", "RecordingPinner"]
