"""Configuration for pysignify.

Two kinds of configuration exist:

- ``LoggingConfig``: process settings read from environment variables.
- ``CommandConfig``: the options of one CLI invocation, built once after
  argument parsing and passed to the command. Nothing is kept in
  module-level mutable state.

Environment Variables:
- SIGNIFY_LOG_LEVEL: structlog filtering level (default: WARNING)
- SIGNIFY_LOG_FORMAT: "console" or "json" (default: console)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from pysignify.constants import (
    DEFAULT_COMMENT,
    DEFAULT_KDF_ROUNDS,
    SIG_SUFFIX,
    STDIO_PATH,
)
from pysignify.errors import UsageError

LOG_LEVEL_ENV = "SIGNIFY_LOG_LEVEL"
LOG_FORMAT_ENV = "SIGNIFY_LOG_FORMAT"

_LOG_FORMATS = ("console", "json")


def _get_str_env(key: str, default: str) -> str:
    """Get string environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or empty.

    Returns:
        The stripped value or default.
    """
    value = os.environ.get(key, "").strip()
    return value or default


@dataclass(frozen=True)
class LoggingConfig:
    """Logging settings.

    Attributes:
        level: Log level name understood by ``logging`` (e.g. "INFO").
        fmt: "console" for human output, "json" for machine parsing.
    """

    level: str = "WARNING"
    fmt: str = "console"

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.fmt not in _LOG_FORMATS:
            raise ValueError(f"fmt must be one of {_LOG_FORMATS}, got {self.fmt!r}")

    @classmethod
    def from_environment(cls) -> LoggingConfig:
        """Create config from environment variables with defaults.

        Unknown formats fall back to "console".

        Returns:
            LoggingConfig with values from environment or defaults.
        """
        fmt = _get_str_env(LOG_FORMAT_ENV, "console").lower()
        if fmt not in _LOG_FORMATS:
            fmt = "console"
        return cls(level=_get_str_env(LOG_LEVEL_ENV, "WARNING").upper(), fmt=fmt)


@dataclass(frozen=True)
class CommandConfig:
    """Options of a single pysignify invocation.

    Attributes:
        pubkey: Public key path ("" when not given).
        seckey: Secret key path ("" when not given).
        message: Message path ("" when not given).
        sigfile: Signature path; see ``resolved_sigfile``.
        comment: Comment for generated keys.
        embed: Embed the message in / extract it from the signature.
        quiet: Suppress informational output.
        rounds: KDF rounds for key generation; 0 disables the passphrase.
        files: File name filter for checksum manifest checks.
    """

    pubkey: str = ""
    seckey: str = ""
    message: str = ""
    sigfile: str = ""
    comment: str = DEFAULT_COMMENT
    embed: bool = False
    quiet: bool = False
    rounds: int = DEFAULT_KDF_ROUNDS
    files: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not 0 <= self.rounds <= 0xFFFFFFFF:
            raise ValueError(f"rounds must fit in 32 bits, got {self.rounds}")

    @property
    def resolved_sigfile(self) -> str:
        """Signature path, defaulting to ``<message>.sig``.

        Raises:
            UsageError: If the message is read from stdin and no signature
                path was given.
        """
        if self.sigfile:
            return self.sigfile
        if self.message == STDIO_PATH:
            raise UsageError("must specify sigfile with - message")
        if not self.message:
            raise UsageError("must specify sigfile")
        return f"{self.message}{SIG_SUFFIX}"
