"""Unit tests for signature verification."""

import base64
from pathlib import Path

import pytest

from pysignify.constants import COMMENT_HEADER
from pysignify.envelope import read_envelope
from pysignify.errors import (
    InvalidSignatureError,
    PathTrustError,
    UsageError,
    VerificationError,
    WrongKeyError,
)
from pysignify.records import PublicKeyRecord, SignatureRecord
from pysignify.signer import sign
from pysignify.verifier import (
    VERIFIED_LINE,
    check_signature,
    trusted_pubkey_path,
    verify,
    verify_detached,
    verify_embedded,
)


def flip_bit(data: bytes, index: int, bit: int = 0) -> bytes:
    out = bytearray(data)
    out[index] ^= 1 << bit
    return bytes(out)


def rewrite_record(path: str, record: PublicKeyRecord | SignatureRecord) -> None:
    """Replace the record of an envelope, keeping comment and message."""
    envelope = read_envelope(path)
    Path(path).write_bytes(
        f"{COMMENT_HEADER}{envelope.comment}\n".encode()
        + base64.b64encode(bytes(record.encode()))
        + b"\n"
        + envelope.message
    )


@pytest.fixture
def signed(keypair: tuple[str, str], message_file: str) -> tuple[str, str, str]:
    """(pubkey, message, detached signature) for a fresh key pair."""
    sig_path = message_file + ".sig"
    sign(keypair[1], message_file, sig_path)
    return keypair[0], message_file, sig_path


@pytest.fixture
def embedded(keypair: tuple[str, str], message_file: str, tmp_path: Path) -> tuple[str, str]:
    """(pubkey, embedded signature) for a fresh key pair."""
    sig_path = str(tmp_path / "embedded.sig")
    sign(keypair[1], message_file, sig_path, embed=True)
    return keypair[0], sig_path


class TestVerifyDetached:
    def test_valid_signature(
        self, signed: tuple[str, str, str], capsys: pytest.CaptureFixture[str]
    ) -> None:
        verify_detached(*signed)

        assert capsys.readouterr().out == f"{VERIFIED_LINE}\n"

    def test_quiet_prints_nothing(
        self, signed: tuple[str, str, str], capsys: pytest.CaptureFixture[str]
    ) -> None:
        verify_detached(*signed, quiet=True)

        assert capsys.readouterr().out == ""

    def test_tampered_message(self, signed: tuple[str, str, str]) -> None:
        pub, msg, sig = signed
        Path(msg).write_bytes(flip_bit(Path(msg).read_bytes(), 0))

        with pytest.raises(InvalidSignatureError, match="signature verification failed"):
            verify_detached(pub, msg, sig)

    @pytest.mark.parametrize("index", [0, 31, 63])
    def test_tampered_signature(self, signed: tuple[str, str, str], index: int) -> None:
        pub, msg, sig_path = signed
        sig = SignatureRecord.decode(read_envelope(sig_path).blob)
        rewrite_record(sig_path, SignatureRecord(keynum=sig.keynum, sig=flip_bit(sig.sig, index)))

        with pytest.raises(InvalidSignatureError):
            verify_detached(pub, msg, sig_path)

    @pytest.mark.parametrize("index", [0, 17, 31])
    def test_tampered_public_key(self, signed: tuple[str, str, str], index: int) -> None:
        pub_path, msg, sig = signed
        pub = PublicKeyRecord.decode(read_envelope(pub_path).blob)
        rewrite_record(
            pub_path, PublicKeyRecord(keynum=pub.keynum, pubkey=flip_bit(pub.pubkey, index))
        )

        with pytest.raises(InvalidSignatureError):
            verify_detached(pub_path, msg, sig)

    def test_wrong_key_id_in_signature(self, signed: tuple[str, str, str]) -> None:
        pub, msg, sig_path = signed
        sig = SignatureRecord.decode(read_envelope(sig_path).blob)
        rewrite_record(sig_path, SignatureRecord(keynum=flip_bit(sig.keynum, 3), sig=sig.sig))

        with pytest.raises(WrongKeyError, match="checked against wrong key") as exc_info:
            verify_detached(pub, msg, sig_path)

        assert exc_info.value.actual == flip_bit(sig.keynum, 3).hex()
        assert exc_info.value.expected == sig.keynum.hex()

    def test_wrong_key_id_in_public_key(self, signed: tuple[str, str, str]) -> None:
        pub_path, msg, sig = signed
        pub = PublicKeyRecord.decode(read_envelope(pub_path).blob)
        rewrite_record(pub_path, PublicKeyRecord(keynum=flip_bit(pub.keynum, 0), pubkey=pub.pubkey))

        with pytest.raises(WrongKeyError):
            verify_detached(pub_path, msg, sig)

    def test_other_key_pair(self, signed: tuple[str, str, str], tmp_path: Path) -> None:
        from pysignify.keygen import generate

        other_pub = str(tmp_path / "other.pub")
        generate(other_pub, str(tmp_path / "other.sec"), 0, "other")
        _, msg, sig = signed

        with pytest.raises(WrongKeyError):
            verify_detached(other_pub, msg, sig)

    def test_failures_share_base_class(self) -> None:
        assert issubclass(WrongKeyError, VerificationError)
        assert issubclass(InvalidSignatureError, VerificationError)
        assert not issubclass(WrongKeyError, InvalidSignatureError)


class TestVerifyEmbedded:
    def test_recovers_message(
        self, embedded: tuple[str, str], message_file: str
    ) -> None:
        pub, sig = embedded

        message = verify_embedded(pub, sig, quiet=True)

        assert message == Path(message_file).read_bytes()

    def test_tampered_embedded_message(self, embedded: tuple[str, str]) -> None:
        pub, sig = embedded
        Path(sig).write_bytes(Path(sig).read_bytes() + b"appended")

        with pytest.raises(InvalidSignatureError):
            verify_embedded(pub, sig)

    def test_verify_writes_extracted_message(
        self, embedded: tuple[str, str], message_file: str, tmp_path: Path
    ) -> None:
        pub, sig = embedded
        out = tmp_path / "extracted.txt"

        verify(pub, str(out), sig, embed=True, quiet=True)

        assert out.read_bytes() == Path(message_file).read_bytes()

    def test_failed_verification_writes_nothing(
        self, embedded: tuple[str, str], tmp_path: Path
    ) -> None:
        pub, sig = embedded
        Path(sig).write_bytes(Path(sig).read_bytes() + b"x")
        out = tmp_path / "extracted.txt"

        with pytest.raises(VerificationError):
            verify(pub, str(out), sig, embed=True)

        assert not out.exists()

    def test_detached_signature_has_empty_message(self, signed: tuple[str, str, str]) -> None:
        pub, _, sig = signed

        # An empty message does not match the signed content
        with pytest.raises(InvalidSignatureError):
            verify_embedded(pub, sig)


class TestCheckSignature:
    def test_empty_message(self, keypair: tuple[str, str], tmp_path: Path) -> None:
        empty = tmp_path / "empty"
        empty.write_bytes(b"")
        sign(keypair[1], str(empty), str(empty) + ".sig")
        pub = PublicKeyRecord.decode(read_envelope(keypair[0]).blob)
        sig = SignatureRecord.decode(read_envelope(str(empty) + ".sig").blob)

        check_signature(pub, b"", sig, quiet=True)


class TestTrustedPubkeyPath:
    def test_accepts_trusted_directory(self) -> None:
        assert trusted_pubkey_path("verify with /etc/signify/base.pub") == (
            "/etc/signify/base.pub"
        )

    @pytest.mark.parametrize(
        "path",
        [
            "/tmp/evil.pub",
            "/etc/signify/../shadow",
            "etc/signify/base.pub",
            "/etc/signifyx/base.pub",
        ],
    )
    def test_rejects_untrusted(self, path: str) -> None:
        with pytest.raises(PathTrustError, match="untrusted path") as exc_info:
            trusted_pubkey_path(f"verify with {path}")

        assert exc_info.value.path == path

    def test_comment_without_marker(self) -> None:
        with pytest.raises(UsageError, match="must specify pubkey"):
            trusted_pubkey_path("signature from test secret key")

    def test_verify_without_pubkey_uses_comment(self, signed: tuple[str, str, str]) -> None:
        _, msg, sig = signed

        # The fixture key lives in a temp dir, not /etc/signify/
        with pytest.raises(PathTrustError):
            verify_detached("", msg, sig)
