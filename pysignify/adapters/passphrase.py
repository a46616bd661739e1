"""Interactive passphrase input."""

from __future__ import annotations

import getpass
import sys

from pysignify.errors import PassphraseError
from pysignify.ports.passphrase import PassphraseSourceProtocol


class TerminalPassphraseSource(PassphraseSourceProtocol):
    """Reads passphrases from the terminal, or from stdin when piped.

    With a terminal the entry is not echoed. Without one a single line is
    read from stdin, which lets scripts feed the passphrase through a pipe.
    """

    def read(self, prompt: str) -> bytearray:
        if sys.stdin is not None and sys.stdin.isatty():
            try:
                entry = getpass.getpass(prompt)
            except EOFError as e:
                raise PassphraseError("unable to read passphrase") from e
            return bytearray(entry.encode("utf-8"))

        sys.stderr.write(prompt)
        sys.stderr.flush()
        line = bytearray(sys.stdin.buffer.readline())
        if not line:
            raise PassphraseError("unable to read passphrase")
        if line.endswith(b"\n"):
            del line[-1:]
        if line.endswith(b"\r"):
            del line[-1:]
        return line
