"""Memory pinning via the C library's mlock(2) / munlock(2)."""

from __future__ import annotations

import ctypes
import ctypes.util
import functools
import os

import structlog

from pysignify.ports.memory import MemoryPinnerProtocol

logger = structlog.get_logger(__name__)


class LibcMemoryPinner(MemoryPinnerProtocol):
    """Pins buffers with mlock(2).

    Locking can fail under a low RLIMIT_MEMLOCK or without privileges;
    that is logged at debug level and reported as ``False``.
    """

    def __init__(self, libc: ctypes.CDLL) -> None:
        self._mlock = libc.mlock
        self._mlock.argtypes = [ctypes.c_void_p, ctypes.c_size_t]
        self._mlock.restype = ctypes.c_int
        self._munlock = libc.munlock
        self._munlock.argtypes = [ctypes.c_void_p, ctypes.c_size_t]
        self._munlock.restype = ctypes.c_int

    @staticmethod
    def _address(buf: bytearray) -> int:
        view = (ctypes.c_char * len(buf)).from_buffer(buf)
        try:
            return ctypes.addressof(view)
        finally:
            del view

    def pin(self, buf: bytearray) -> bool:
        if not buf:
            return False
        if self._mlock(self._address(buf), len(buf)) != 0:
            errno = ctypes.get_errno()
            logger.debug("mlock_failed", size=len(buf), error=os.strerror(errno))
            return False
        return True

    def unpin(self, buf: bytearray) -> None:
        if not buf:
            return
        if self._munlock(self._address(buf), len(buf)) != 0:
            errno = ctypes.get_errno()
            logger.debug("munlock_failed", size=len(buf), error=os.strerror(errno))


class NullMemoryPinner(MemoryPinnerProtocol):
    """Pinner for platforms without mlock; never pins anything."""

    def pin(self, buf: bytearray) -> bool:
        return False

    def unpin(self, buf: bytearray) -> None:
        return None


@functools.lru_cache(maxsize=1)
def default_pinner() -> MemoryPinnerProtocol:
    """Return the process-wide pinner for this platform."""
    name = ctypes.util.find_library("c")
    if name is None:
        return NullMemoryPinner()
    try:
        libc = ctypes.CDLL(name, use_errno=True)
        return LibcMemoryPinner(libc)
    except (OSError, AttributeError):
        logger.debug("mlock_unavailable", library=name)
        return NullMemoryPinner()
