"""Fixed constants of the signify file formats.

These values are part of the on-disk format and MUST NOT change: keys and
signatures written by one version have to stay readable by every other.
"""

# Algorithm tags
PKALG = b"Ed"
KDFALG = b"BK"

# Field widths (bytes)
KEYNUM_LEN = 8
SALT_LEN = 16
CHECKSUM_LEN = 8
SECRET_KEY_SIZE = 64  # Ed25519 seed || public key
PUBLIC_KEY_SIZE = 32
SIGNATURE_SIZE = 64

# Text envelope
COMMENT_HEADER = "untrusted comment: "
COMMENT_MAX_LEN = 1024  # header + comment, in bytes
VERIFY_WITH = "verify with "

DEFAULT_KDF_ROUNDS = 42
DEFAULT_COMMENT = "signify"

# Public keys named in a signature comment are only trusted below this path
SAFE_PUBKEY_DIR = "/etc/signify/"

SIG_SUFFIX = ".sig"
SECKEY_SUFFIX = ".sec"
PUBKEY_SUFFIX = ".pub"

# Path token addressing stdin (reads) or stdout (writes)
STDIO_PATH = "-"
