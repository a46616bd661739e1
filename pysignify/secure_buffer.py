"""Scoped buffers for secret material.

A ``SecureBuffer`` owns a ``bytearray``. Entering the context pins the
buffer (best effort); leaving it, on success or on an exception, zeroes
the buffer and unpins it. Secret values therefore never outlive the
``with`` block of the operation that created them.

Example:
    with SecureBuffer(SECRET_KEY_SIZE) as mask:
        derive_mask(mask, salt, rounds, ...)
        xor_mask(seckey.data, mask.data)

Python may keep transient immutable copies (``bytes`` handed to C
libraries, decoded base64, ``str`` passphrases from getpass). Those cannot
be zeroed; only buffers owned by a ``SecureBuffer`` can.
"""

from __future__ import annotations

from types import TracebackType

from pysignify.adapters.memory import default_pinner
from pysignify.ports.memory import MemoryPinnerProtocol


class SecureBuffer:
    """Mutable byte buffer that is zeroed and unpinned on scope exit.

    Attributes:
        data: The backing ``bytearray``. Modify in place only; resizing a
            pinned buffer is not allowed.
    """

    def __init__(
        self, size: int = 0, *, pinner: MemoryPinnerProtocol | None = None
    ) -> None:
        self.data = bytearray(size)
        self._pinner = pinner or default_pinner()
        self._pinned = False

    @classmethod
    def wrap(
        cls, data: bytearray, *, pinner: MemoryPinnerProtocol | None = None
    ) -> SecureBuffer:
        """Take ownership of an existing ``bytearray`` without copying it."""
        buf = cls(pinner=pinner)
        buf.data = data
        return buf

    @classmethod
    def copy_of(
        cls, data: bytes | bytearray | memoryview, *, pinner: MemoryPinnerProtocol | None = None
    ) -> SecureBuffer:
        """Copy ``data`` into a new buffer."""
        buf = cls(len(data), pinner=pinner)
        buf.data[:] = data
        return buf

    def __len__(self) -> int:
        return len(self.data)

    def __enter__(self) -> SecureBuffer:
        self._pinned = self._pinner.pin(self.data)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.wipe()
        if self._pinned:
            self._pinner.unpin(self.data)
            self._pinned = False

    @property
    def pinned(self) -> bool:
        return self._pinned

    def wipe(self) -> None:
        """Overwrite the buffer with zeros in place."""
        self.data[:] = bytes(len(self.data))

    def is_zero(self) -> bool:
        return not any(self.data)
