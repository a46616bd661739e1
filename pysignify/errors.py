"""Exception hierarchy for pysignify.

Every failure is terminal for the command that raised it: nothing is
retried, and the CLI reports ``str(error)`` to the user.

Hierarchy:
    SignifyError
    ├── FormatError
    │   └── CommentTooLongError
    ├── UnsupportedAlgorithmError
    ├── PassphraseError
    │   ├── EmptyPassphraseError
    │   ├── PassphraseMismatchError
    │   └── WrongPassphraseError
    ├── VerificationError
    │   ├── WrongKeyError
    │   └── InvalidSignatureError
    ├── PathTrustError
    ├── SignifyIOError
    ├── ManifestParseError
    └── UsageError
"""


class SignifyError(Exception):
    """Base exception for all pysignify errors.

    All library exceptions MUST inherit from this class so callers can
    handle every expected failure with a single ``except`` clause.
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)


class FormatError(SignifyError):
    """Raised when an envelope or binary record is malformed."""

    pass


class CommentTooLongError(FormatError):
    """Raised when header + comment reaches the comment length bound.

    The same check is applied when writing and when parsing an envelope.
    """

    def __init__(self, message: str = "comment too long") -> None:
        super().__init__(message)


class UnsupportedAlgorithmError(SignifyError):
    """Raised for an unknown KDF tag or checksum algorithm."""

    pass


class PassphraseError(SignifyError):
    """Base class for passphrase failures.

    All of these abort before any cryptographic operation uses the key.
    """

    pass


class EmptyPassphraseError(PassphraseError):
    """Raised when the user enters an empty passphrase."""

    def __init__(self, message: str = "please provide a password") -> None:
        super().__init__(message)


class PassphraseMismatchError(PassphraseError):
    """Raised when the confirmation entry differs from the passphrase."""

    def __init__(self, message: str = "passwords don't match") -> None:
        super().__init__(message)


class WrongPassphraseError(PassphraseError):
    """Raised when the unmasked secret key does not match its checksum."""

    def __init__(self, message: str = "incorrect passphrase") -> None:
        super().__init__(message)


class VerificationError(SignifyError):
    """Base class for signature verification failures."""

    pass


class WrongKeyError(VerificationError):
    """Raised when the public key id differs from the signature's key id.

    Attributes:
        expected: Key id of the public key (hex).
        actual: Key id carried by the signature (hex).
    """

    def __init__(
        self,
        message: str = "verification failed: checked against wrong key",
        expected: str = "",
        actual: str = "",
    ) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class InvalidSignatureError(VerificationError):
    """Raised when the Ed25519 check over the message fails."""

    def __init__(self, message: str = "signature verification failed") -> None:
        super().__init__(message)


class PathTrustError(SignifyError):
    """Raised when a public key path recovered from a comment is untrusted.

    Attributes:
        path: The rejected path.
    """

    def __init__(self, path: str) -> None:
        super().__init__(f"untrusted path {path}")
        self.path = path


class SignifyIOError(SignifyError):
    """Raised when a file cannot be opened, read or written."""

    pass


class ManifestParseError(SignifyError):
    """Raised when a checksum manifest line cannot be parsed."""

    pass


class UsageError(SignifyError):
    """Raised when a required input is missing and cannot be derived."""

    pass
