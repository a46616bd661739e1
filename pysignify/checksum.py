"""Verification of signed checksum manifests.

A manifest is the embedded message of a signature. Each line is one of:

    SHA256 (file) = <digest>        labeled form (sha256 -b, BSD style)
    file  <digest>                  column form, algorithm from digest length

Digests are lowercase hex or standard base64. Every line is matched against
the two shapes before any file is hashed: one unparsable line fails the
command without checking anything. Algorithm names and digests are only
validated for the entries that are actually checked.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import re
from collections.abc import Sequence
from dataclasses import dataclass, field

import structlog

from pysignify.errors import ManifestParseError, UnsupportedAlgorithmError
from pysignify.output import console, err_console
from pysignify.verifier import verify_embedded

logger = structlog.get_logger(__name__)

_CHUNK_SIZE = 64 * 1024

# algorithm name -> digest size in bytes
DIGEST_SIZES: dict[str, int] = {
    "SHA256": hashlib.sha256().digest_size,
    "SHA512": hashlib.sha512().digest_size,
}

_LABELED = re.compile(r"(?P<algo>\S+) \((?P<file>\S+)\) = (?P<digest>\S+)")
_COLUMN = re.compile(r"(?P<file>\S+)\s+(?P<digest>\S+)")
_HEX = re.compile(r"[0-9a-fA-F]+")


@dataclass(frozen=True)
class ChecksumRecord:
    """One manifest entry, as written.

    Attributes:
        file: Path of the file, as written in the manifest.
        digest: Digest as written (hex or base64).
        algo: Algorithm name; only "SHA256" and "SHA512" can be checked.
        line: The manifest line, for error messages.
    """

    file: str
    digest: str
    algo: str
    line: str = field(default="", compare=False)


@dataclass
class ManifestReport:
    """Outcome of checking a manifest.

    Attributes:
        passed: Files whose digest matched, in manifest order.
        failed: Files that failed or were requested but never matched.
    """

    passed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.failed


def _encoded_length(size: int) -> int:
    return 4 * ((size + 2) // 3)


def algorithm_for_digest(digest: str) -> str | None:
    """Infer the algorithm of a column-form digest from its length."""
    for algo, size in DIGEST_SIZES.items():
        if len(digest) in (2 * size, _encoded_length(size)):
            return algo
    return None


def recode_digest(digest: str, algo: str, line: str) -> str | None:
    """Return ``digest`` as hex, decoding base64 when it is not hex already.

    Returns:
        The hex digest, or None when the value decodes to the wrong size
        for ``algo`` and so can never match.

    Raises:
        UnsupportedAlgorithmError: If ``algo`` is unknown.
        ManifestParseError: If the digest is neither hex nor base64.
    """
    size = DIGEST_SIZES.get(algo)
    if size is None:
        raise UnsupportedAlgorithmError(f"can't handle algorithm {algo}")
    if len(digest) == 2 * size and _HEX.fullmatch(digest):
        return digest
    try:
        raw = base64.b64decode(digest, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ManifestParseError(f"invalid digest in checksum line {line}") from e
    if len(raw) != size:
        return None
    return raw.hex()


def parse_line(line: str) -> ChecksumRecord:
    """Match one manifest line against the labeled, then the column shape.

    A shape either matches the whole line or is rejected. A column-form
    digest must have the length of a known digest.

    Raises:
        ManifestParseError: If neither shape matches.
    """
    match = _LABELED.fullmatch(line)
    if match:
        algo = match["algo"]
    else:
        match = _COLUMN.fullmatch(line)
        algo = algorithm_for_digest(match["digest"]) if match else None
        if match is None or algo is None:
            raise ManifestParseError(f"unable to parse checksum line {line}")
    return ChecksumRecord(
        file=match["file"], digest=match["digest"], algo=algo, line=line
    )


def parse_manifest(body: bytes | bytearray) -> list[ChecksumRecord]:
    """Parse every line of a manifest body."""
    text = bytes(body).decode("utf-8", errors="surrogateescape")
    return [parse_line(line) for line in text.splitlines()]


def file_digest(path: str, algo: str) -> str:
    """Hex digest of the file at ``path``.

    Raises:
        OSError: If the file cannot be read.
    """
    h = hashlib.new(algo.lower())
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            h.update(chunk)
    return h.hexdigest()


def verify_record(
    record: ChecksumRecord, expected: str | None, quiet: bool = False
) -> bool:
    """Recompute a file's digest and compare it with ``expected``.

    An unreadable file, or an ``expected`` of None, counts as a mismatch.
    """
    if expected is None:
        logger.info("checksum_digest_size_mismatch", file=record.file, algo=record.algo)
        return False
    try:
        actual = file_digest(record.file, record.algo)
    except OSError as e:
        logger.warning("checksum_file_unreadable", file=record.file, error=e.strerror)
        return False
    if actual != expected:
        logger.info("checksum_mismatch", file=record.file, algo=record.algo)
        return False
    if not quiet:
        console.print(f"{record.file}: OK", markup=False)
    return True


def verify_checksums(
    body: bytes | bytearray, files: Sequence[str] = (), quiet: bool = False
) -> ManifestReport:
    """Check manifest entries against files on disk.

    Args:
        body: Authenticated manifest text.
        files: Only check these names; each must match an entry. Empty
            means check every entry.
        quiet: Suppress "OK" lines.

    Returns:
        The report. "<file>: FAIL" is printed to stderr for each failure.

    Raises:
        ManifestParseError: If any line cannot be parsed, or a checked
            entry has an undecodable digest.
        UnsupportedAlgorithmError: If a checked entry names an unknown
            algorithm.
    """
    records = parse_manifest(body)
    if files:
        records = [record for record in records if record.file in files]
    expected = [recode_digest(r.digest, r.algo, r.line) for r in records]
    report = ManifestReport()

    if files:
        pending = dict.fromkeys(files)
        for record, digest in zip(records, expected):
            if record.file in pending and verify_record(record, digest, quiet):
                del pending[record.file]
                report.passed.append(record.file)
        report.failed.extend(pending)
    else:
        for record, digest in zip(records, expected):
            if verify_record(record, digest, quiet):
                report.passed.append(record.file)
            elif record.file not in report.failed:
                report.failed.append(record.file)

    for name in report.failed:
        err_console.print(f"{name}: FAIL", markup=False)
    logger.info(
        "manifest_checked", passed=len(report.passed), failed=len(report.failed)
    )
    return report


def check(
    pubkey_path: str,
    sig_path: str,
    files: Sequence[str] = (),
    quiet: bool = False,
) -> ManifestReport:
    """Verify a signed manifest, then the files it lists.

    Raises:
        VerificationError: If the manifest signature does not verify.
        ManifestParseError: If the manifest cannot be parsed.
    """
    body = verify_embedded(pubkey_path, sig_path, quiet)
    return verify_checksums(body, files, quiet)
