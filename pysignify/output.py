"""Rich consoles for user-facing output.

Informational lines ("Signature Verified", "<file>: OK") go to ``console``;
failures go to ``err_console``. Both resolve ``sys.stdout`` / ``sys.stderr``
at write time and never wrap lines, so output stays byte-for-byte
predictable for scripts.
"""

from rich.console import Console

console = Console(soft_wrap=True, highlight=False, emoji=False)
err_console = Console(stderr=True, soft_wrap=True, highlight=False, emoji=False)
