"""Text envelope codec shared by secret keys, public keys and signatures.

Format:

    untrusted comment: <comment>\\n
    <standard base64 of a binary record>\\n
    <optional trailing message bytes>

The header line (header + comment, newline excluded) must be shorter than
``COMMENT_MAX_LEN`` bytes. Parsing and writing apply the same bound, so any
envelope this module writes can be read back. The decoded record starts
with the algorithm tag ``Ed``. Trailing bytes are only present in signatures
made with an embedded message.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Protocol

from pysignify.constants import COMMENT_HEADER, COMMENT_MAX_LEN, PKALG
from pysignify.errors import CommentTooLongError, FormatError
from pysignify.fileio import read_file, write_file
from pysignify.secure_buffer import SecureBuffer

_HEADER_BYTES = COMMENT_HEADER.encode("ascii")


class EncodableRecord(Protocol):
    def encode(self) -> bytearray: ...


@dataclass
class Envelope:
    """A parsed envelope.

    Attributes:
        comment: Comment text without the header.
        blob: Decoded binary record; owned by the caller.
        message: Trailing bytes after the base64 line (may be empty).
    """

    comment: str
    blob: bytearray
    message: bytes = b""


def _header_line(comment: str) -> bytes:
    line = _HEADER_BYTES + comment.encode("utf-8", errors="surrogateescape")
    check_comment_length(line)
    return line


def check_comment_length(line: bytes) -> None:
    """Reject a header line (header + comment) at or above the bound.

    Raises:
        CommentTooLongError: If ``len(line) >= COMMENT_MAX_LEN``.
    """
    if len(line) >= COMMENT_MAX_LEN:
        raise CommentTooLongError()


def check_comment(comment: str) -> None:
    """Validate that ``comment`` fits in an envelope header."""
    _header_line(comment)


def parse_envelope(data: bytes | bytearray, label: str) -> Envelope:
    """Split envelope bytes into comment, record blob and trailing message.

    A single carriage return before the newline ending the base64 line is
    ignored.

    Args:
        data: Raw file content.
        label: Name used in error messages, usually the file path.

    Returns:
        The parsed Envelope.

    Raises:
        FormatError: Missing header, missing newline after the base64 line,
            invalid base64, or an unsupported record.
        CommentTooLongError: If the header line reaches the length bound.
    """
    first_nl = data.find(b"\n")
    if first_nl < 0 or not data.startswith(_HEADER_BYTES):
        raise FormatError(
            f"invalid comment in {label}; must start with '{COMMENT_HEADER}'"
        )
    comment_line = bytes(data[:first_nl])
    check_comment_length(comment_line)

    second_nl = data.find(b"\n", first_nl + 1)
    if second_nl < 0:
        raise FormatError(f"missing new line after base64 in {label}")

    b64_line = bytes(data[first_nl + 1 : second_nl])
    if b64_line.endswith(b"\r"):
        b64_line = b64_line[:-1]
    try:
        blob = bytearray(base64.b64decode(b64_line, validate=True))
    except (binascii.Error, ValueError) as e:
        raise FormatError(f"invalid base64 encoding in {label}") from e

    if len(blob) < 2 or bytes(blob[:2]) != PKALG:
        raise FormatError(f"unsupported file {label}")

    comment = comment_line[len(_HEADER_BYTES) :].decode("utf-8", errors="surrogateescape")
    return Envelope(comment=comment, blob=blob, message=bytes(data[second_nl + 1 :]))


def read_envelope(path: str) -> Envelope:
    """Read and parse the envelope stored at ``path``.

    The raw file text is zeroed once parsing is done, since for secret keys
    it contains the base64 of the masked key.
    """
    with SecureBuffer.wrap(read_file(path)) as raw:
        return parse_envelope(raw.data, path)


def encode_envelope(
    comment: str, record: EncodableRecord, message: bytes | bytearray = b""
) -> list[bytes]:
    """Build the byte chunks of an envelope.

    Raises:
        CommentTooLongError: If header + comment reaches the length bound.
    """
    header = _header_line(comment) + b"\n"
    with SecureBuffer.wrap(record.encode()) as blob:
        body = base64.b64encode(bytes(blob.data)) + b"\n"
    chunks = [header, body]
    if message:
        chunks.append(bytes(message))
    return chunks


def write_envelope(
    path: str,
    comment: str,
    record: EncodableRecord,
    message: bytes | bytearray = b"",
    *,
    exclusive: bool = False,
    mode: int = 0o666,
) -> None:
    """Serialize ``record`` and write the envelope to ``path``.

    Args:
        path: Target path, ``"-"`` for stdout.
        comment: Comment text without the header.
        record: Record providing ``encode()``.
        message: Trailing message for embedded signatures.
        exclusive: Refuse to overwrite an existing file.
        mode: Permission bits for a new file.

    Raises:
        CommentTooLongError: If header + comment reaches the length bound.
        SignifyIOError: If the file cannot be written.
    """
    write_file(
        path,
        encode_envelope(comment, record, message),
        exclusive=exclusive,
        mode=mode,
    )
