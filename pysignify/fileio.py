"""File access for envelopes and messages.

The path ``"-"`` addresses stdin when reading and stdout when writing.
Every ``OSError`` is wrapped in ``SignifyIOError`` so the CLI can report
it like any other failure.
"""

from __future__ import annotations

import os
import stat
import sys
from collections.abc import Iterable

from pysignify.constants import STDIO_PATH
from pysignify.errors import SignifyIOError


def _describe(path: str, e: OSError) -> str:
    return f"{path}: {e.strerror or e}"


def _ensure_not_directory(fd: int, path: str) -> None:
    if stat.S_ISDIR(os.fstat(fd).st_mode):
        raise SignifyIOError(f"not a valid file: {path}")


def read_file(path: str) -> bytearray:
    """Read a whole file, or stdin for ``"-"``.

    Returns:
        The content as a ``bytearray`` owned by the caller.

    Raises:
        SignifyIOError: If the file cannot be opened or read, or is a
            directory.
    """
    if path == STDIO_PATH:
        try:
            return bytearray(sys.stdin.buffer.read())
        except OSError as e:
            raise SignifyIOError(_describe("stdin", e)) from e

    try:
        fd = os.open(path, os.O_RDONLY)
    except OSError as e:
        raise SignifyIOError(_describe(path, e)) from e
    try:
        _ensure_not_directory(fd, path)
        with os.fdopen(fd, "rb", closefd=False) as f:
            return bytearray(f.read())
    except OSError as e:
        raise SignifyIOError(_describe(path, e)) from e
    finally:
        os.close(fd)


def write_file(
    path: str,
    chunks: Iterable[bytes | bytearray],
    *,
    exclusive: bool = False,
    mode: int = 0o666,
) -> None:
    """Write ``chunks`` to ``path``, or stdout for ``"-"``.

    Args:
        path: Target path.
        chunks: Byte strings written in order.
        exclusive: Fail if the file exists (``O_EXCL``); otherwise an
            existing file is truncated.
        mode: Permission bits for a newly created file (before umask).

    Raises:
        SignifyIOError: If the file cannot be created or written.
    """
    if path == STDIO_PATH:
        out = sys.stdout.buffer
        try:
            for chunk in chunks:
                out.write(chunk)
            out.flush()
        except OSError as e:
            raise SignifyIOError(_describe("stdout", e)) from e
        return

    flags = os.O_WRONLY | os.O_CREAT | (os.O_EXCL if exclusive else os.O_TRUNC)
    try:
        fd = os.open(path, flags, mode)
    except OSError as e:
        raise SignifyIOError(_describe(path, e)) from e
    try:
        _ensure_not_directory(fd, path)
        with os.fdopen(fd, "wb", closefd=False) as f:
            for chunk in chunks:
                f.write(chunk)
    except OSError as e:
        raise SignifyIOError(_describe(path, e)) from e
    finally:
        os.close(fd)
