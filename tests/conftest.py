"""
Pytest configuration and shared fixtures for pysignify tests.

Testing Standards:
- Unit tests go in tests/unit/, end-to-end command tests in tests/integration/
- Passphrases come from FakePassphraseSource, never from a terminal
- Protected keys use FAST_ROUNDS so the real bcrypt_pbkdf stays quick
"""

from pathlib import Path

import pytest

from pysignify.config import LoggingConfig
from pysignify.keygen import generate
from pysignify.observability import configure_structlog
from tests.helpers import FAST_ROUNDS, PASSPHRASE, FakePassphraseSource


@pytest.fixture(autouse=True)
def quiet_logging() -> None:
    """Send only warnings and errors to stderr during tests."""
    configure_structlog(LoggingConfig(level="WARNING", fmt="console"))


@pytest.fixture
def keypair(tmp_path: Path) -> tuple[str, str]:
    """An unprotected key pair (rounds = 0) as (pubkey_path, seckey_path)."""
    pub = str(tmp_path / "key.pub")
    sec = str(tmp_path / "key.sec")
    generate(pub, sec, 0, "test")
    return pub, sec


@pytest.fixture
def protected_keypair(tmp_path: Path) -> tuple[str, str]:
    """A passphrase-protected key pair as (pubkey_path, seckey_path)."""
    pub = str(tmp_path / "protected.pub")
    sec = str(tmp_path / "protected.sec")
    generate(
        pub,
        sec,
        FAST_ROUNDS,
        "protected",
        passphrases=FakePassphraseSource(PASSPHRASE, PASSPHRASE),
    )
    return pub, sec


@pytest.fixture
def message_file(tmp_path: Path) -> str:
    path = tmp_path / "message.txt"
    path.write_bytes(b"the quick brown fox\njumps over the lazy dog\n")
    return str(path)
