"""Binary records stored in the base64 line of an envelope.

Each record has a fixed big-endian layout with no padding:

    SecretKeyRecord  pkalg(2) kdfalg(2) kdfrounds(4) salt(16) checksum(8)
                     keynum(8) seckey(64)                          = 104 bytes
    PublicKeyRecord  pkalg(2) keynum(8) pubkey(32)                 =  42 bytes
    SignatureRecord  pkalg(2) keynum(8) sig(64)                    =  74 bytes

The secret key field is kept in a ``bytearray`` so the owner can zero it.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from pysignify.constants import (
    CHECKSUM_LEN,
    KEYNUM_LEN,
    PKALG,
    PUBLIC_KEY_SIZE,
    SALT_LEN,
    SECRET_KEY_SIZE,
    SIGNATURE_SIZE,
)
from pysignify.errors import FormatError

_SECRET_HEADER = struct.Struct(f">2s2sI{SALT_LEN}s{CHECKSUM_LEN}s{KEYNUM_LEN}s")
_PUBLIC = struct.Struct(f">2s{KEYNUM_LEN}s{PUBLIC_KEY_SIZE}s")
_SIGNATURE = struct.Struct(f">2s{KEYNUM_LEN}s{SIGNATURE_SIZE}s")


def _check_size(blob: bytes | bytearray, size: int, kind: str) -> None:
    if len(blob) != size:
        raise FormatError(f"invalid {kind}: expected {size} bytes, got {len(blob)}")


def _check_width(value: bytes | bytearray, width: int, name: str) -> None:
    if len(value) != width:
        raise ValueError(f"{name} must be {width} bytes, got {len(value)}")


@dataclass
class SecretKeyRecord:
    """Secret key as stored on disk; ``seckey`` is masked."""

    kdfalg: bytes
    kdfrounds: int
    salt: bytes
    checksum: bytes
    keynum: bytes
    seckey: bytearray
    pkalg: bytes = PKALG

    SIZE = _SECRET_HEADER.size + SECRET_KEY_SIZE

    def encode(self) -> bytearray:
        """Serialize to the fixed binary layout.

        Returns:
            A new ``bytearray`` holding the masked key; the caller owns it.
        """
        _check_width(self.salt, SALT_LEN, "salt")
        _check_width(self.checksum, CHECKSUM_LEN, "checksum")
        _check_width(self.keynum, KEYNUM_LEN, "keynum")
        _check_width(self.seckey, SECRET_KEY_SIZE, "seckey")
        out = bytearray(self.SIZE)
        _SECRET_HEADER.pack_into(
            out,
            0,
            self.pkalg,
            self.kdfalg,
            self.kdfrounds,
            self.salt,
            self.checksum,
            self.keynum,
        )
        out[_SECRET_HEADER.size :] = self.seckey
        return out

    @classmethod
    def decode(cls, blob: bytes | bytearray) -> SecretKeyRecord:
        _check_size(blob, cls.SIZE, "secret key")
        pkalg, kdfalg, rounds, salt, checksum, keynum = _SECRET_HEADER.unpack_from(blob)
        return cls(
            pkalg=pkalg,
            kdfalg=kdfalg,
            kdfrounds=rounds,
            salt=salt,
            checksum=checksum,
            keynum=keynum,
            seckey=bytearray(blob[_SECRET_HEADER.size :]),
        )

    def wipe(self) -> None:
        """Zero the key material held by this record."""
        self.seckey[:] = bytes(len(self.seckey))


@dataclass(frozen=True)
class PublicKeyRecord:
    keynum: bytes
    pubkey: bytes
    pkalg: bytes = PKALG

    SIZE = _PUBLIC.size

    def encode(self) -> bytearray:
        _check_width(self.keynum, KEYNUM_LEN, "keynum")
        _check_width(self.pubkey, PUBLIC_KEY_SIZE, "pubkey")
        return bytearray(_PUBLIC.pack(self.pkalg, self.keynum, self.pubkey))

    @classmethod
    def decode(cls, blob: bytes | bytearray) -> PublicKeyRecord:
        _check_size(blob, cls.SIZE, "public key")
        pkalg, keynum, pubkey = _PUBLIC.unpack_from(blob)
        return cls(pkalg=pkalg, keynum=keynum, pubkey=pubkey)


@dataclass(frozen=True)
class SignatureRecord:
    keynum: bytes
    sig: bytes
    pkalg: bytes = PKALG

    SIZE = _SIGNATURE.size

    def encode(self) -> bytearray:
        _check_width(self.keynum, KEYNUM_LEN, "keynum")
        _check_width(self.sig, SIGNATURE_SIZE, "sig")
        return bytearray(_SIGNATURE.pack(self.pkalg, self.keynum, self.sig))

    @classmethod
    def decode(cls, blob: bytes | bytearray) -> SignatureRecord:
        _check_size(blob, cls.SIZE, "signature")
        pkalg, keynum, sig = _SIGNATURE.unpack_from(blob)
        return cls(pkalg=pkalg, keynum=keynum, sig=sig)
