"""Unit tests for passphrase-derived key masking."""

import pytest

from pysignify.adapters.kdf import BcryptPbkdf
from pysignify.errors import (
    EmptyPassphraseError,
    PassphraseError,
    PassphraseMismatchError,
)
from pysignify.masking import CONFIRM_PROMPT, PASSPHRASE_PROMPT, derive_mask, xor_mask
from pysignify.ports.kdf import KeyDerivationProtocol
from pysignify.secure_buffer import SecureBuffer
from tests.helpers import FakePassphraseSource, RecordingPinner

SALT = bytes(range(16))


class FakeKdf(KeyDerivationProtocol):
    """Deterministic KDF recording the passphrase it was given."""

    def __init__(self) -> None:
        self.calls: list[tuple[bytes, bytes, int, int]] = []

    def derive(self, passphrase: bytes, salt: bytes, rounds: int, length: int) -> bytes:
        self.calls.append((passphrase, salt, rounds, length))
        return bytes((passphrase[i % len(passphrase)] + i) % 256 for i in range(length))


class TestXorMask:
    def test_twice_is_identity(self) -> None:
        data = bytearray(b"secret key material!")
        mask = bytes(range(len(data)))

        xor_mask(data, mask)
        assert data != bytearray(b"secret key material!")
        xor_mask(data, mask)

        assert data == bytearray(b"secret key material!")

    def test_zero_mask_is_identity(self) -> None:
        data = bytearray(b"\x01\x02\x03\xff")

        xor_mask(data, bytes(4))

        assert data == bytearray(b"\x01\x02\x03\xff")

    def test_length_mismatch(self) -> None:
        with pytest.raises(ValueError, match="mask length"):
            xor_mask(bytearray(4), bytes(3))


class TestDeriveMask:
    def test_zero_rounds_reads_nothing(self) -> None:
        source = FakePassphraseSource()
        kdf = FakeKdf()
        mask = SecureBuffer(64, pinner=RecordingPinner())

        with mask:
            derive_mask(mask, SALT, 0, confirm=True, passphrases=source, kdf=kdf)
            assert mask.is_zero()

        assert source.prompts == []
        assert kdf.calls == []

    def test_derives_with_salt_and_rounds(self) -> None:
        source = FakePassphraseSource("hunter2")
        kdf = FakeKdf()

        with SecureBuffer(64, pinner=RecordingPinner()) as mask:
            derive_mask(mask, SALT, 7, confirm=False, passphrases=source, kdf=kdf)
            assert not mask.is_zero()

        assert source.prompts == [PASSPHRASE_PROMPT]
        assert kdf.calls == [(b"hunter2", SALT, 7, 64)]

    def test_confirmation_prompts_twice(self) -> None:
        source = FakePassphraseSource("hunter2", "hunter2")

        with SecureBuffer(64, pinner=RecordingPinner()) as mask:
            derive_mask(mask, SALT, 7, confirm=True, passphrases=source, kdf=FakeKdf())

        assert source.prompts == [PASSPHRASE_PROMPT, CONFIRM_PROMPT]

    def test_passphrase_buffers_are_zeroed(self) -> None:
        source = FakePassphraseSource("hunter2", "hunter2")

        with SecureBuffer(64, pinner=RecordingPinner()) as mask:
            derive_mask(mask, SALT, 7, confirm=True, passphrases=source, kdf=FakeKdf())

        assert all(not any(entry) for entry in source.returned)

    def test_empty_passphrase(self) -> None:
        source = FakePassphraseSource("")

        with pytest.raises(EmptyPassphraseError, match="please provide a password"):
            with SecureBuffer(64, pinner=RecordingPinner()) as mask:
                derive_mask(mask, SALT, 7, confirm=False, passphrases=source, kdf=FakeKdf())

    def test_mismatched_confirmation(self) -> None:
        source = FakePassphraseSource("hunter2", "hunter3")
        kdf = FakeKdf()

        with pytest.raises(PassphraseMismatchError, match="passwords don't match"):
            with SecureBuffer(64, pinner=RecordingPinner()) as mask:
                derive_mask(mask, SALT, 7, confirm=True, passphrases=source, kdf=kdf)

        assert kdf.calls == []
        assert all(not any(entry) for entry in source.returned)

    def test_unreadable_passphrase(self) -> None:
        with pytest.raises(PassphraseError, match="unable to read passphrase"):
            with SecureBuffer(64, pinner=RecordingPinner()) as mask:
                derive_mask(
                    mask,
                    SALT,
                    7,
                    confirm=False,
                    passphrases=FakePassphraseSource(),
                    kdf=FakeKdf(),
                )


class TestBcryptPbkdf:
    def test_deterministic_for_same_inputs(self) -> None:
        kdf = BcryptPbkdf()

        first = kdf.derive(b"passphrase", SALT, 2, 64)
        second = kdf.derive(b"passphrase", SALT, 2, 64)

        assert first == second
        assert len(first) == 64

    def test_salt_changes_output(self) -> None:
        kdf = BcryptPbkdf()

        assert kdf.derive(b"passphrase", SALT, 2, 32) != kdf.derive(
            b"passphrase", bytes(16), 2, 32
        )
