"""Memory pinning protocol.

Pinning keeps pages holding secret material out of swap. It is best
effort: a pinner that cannot lock memory reports failure and the caller
carries on. Zeroing is not the pinner's job; ``SecureBuffer`` always
zeroes its buffer whether pinning succeeded or not.
"""

from abc import ABC, abstractmethod


class MemoryPinnerProtocol(ABC):
    """Abstract protocol for pinning buffers in physical memory."""

    @abstractmethod
    def pin(self, buf: bytearray) -> bool:
        """Lock the pages backing ``buf``.

        Args:
            buf: Buffer to pin. Must not be resized while pinned.

        Returns:
            True if the pages were locked, False otherwise.
        """
        ...

    @abstractmethod
    def unpin(self, buf: bytearray) -> None:
        """Unlock the pages backing ``buf``.

        Only called for buffers whose ``pin`` returned True.
        """
        ...
