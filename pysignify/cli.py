"""CLI for pysignify.

Commands:
    generate    Generate a new key pair
    sign        Sign a message
    verify      Verify a message and signature
    check       Verify a signed checksum manifest and the files it lists

Every command parses its options into one ``CommandConfig`` and hands it to
the matching operation. Errors are printed as ``pysignify: <message>`` on
stderr with exit code 1.
"""

from typing import NoReturn, Optional

import typer

from pysignify import __version__
from pysignify.checksum import check as check_manifest
from pysignify.config import CommandConfig, LoggingConfig
from pysignify.constants import DEFAULT_COMMENT, DEFAULT_KDF_ROUNDS
from pysignify.errors import SignifyError, UsageError
from pysignify.keygen import generate as generate_keys
from pysignify.observability import configure_structlog, new_invocation_id
from pysignify.output import console, err_console
from pysignify.signer import sign as sign_message
from pysignify.verifier import verify as verify_message

app = typer.Typer(
    name="pysignify",
    help="Cryptographically sign and verify files (signify compatible).",
    add_completion=False,
    no_args_is_help=True,
)


def _fail(error: SignifyError) -> NoReturn:
    err_console.print(f"pysignify: {error}", markup=False)
    raise typer.Exit(code=1)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"pysignify version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """pysignify: Ed25519 signatures in the OpenBSD signify format."""
    configure_structlog(LoggingConfig.from_environment())
    new_invocation_id()


def run_generate(config: CommandConfig) -> None:
    if not config.pubkey or not config.seckey:
        raise UsageError("must specify pubkey and seckey")
    generate_keys(config.pubkey, config.seckey, config.rounds, config.comment)


def run_sign(config: CommandConfig) -> None:
    if not config.message or not config.seckey:
        raise UsageError("must specify message and seckey")
    sign_message(config.seckey, config.message, config.resolved_sigfile, config.embed)


def run_verify(config: CommandConfig) -> None:
    if not config.message:
        raise UsageError("must specify message")
    verify_message(
        config.pubkey,
        config.message,
        config.resolved_sigfile,
        config.embed,
        config.quiet,
    )


def run_check(config: CommandConfig) -> bool:
    if not config.sigfile:
        raise UsageError("must specify sigfile")
    report = check_manifest(config.pubkey, config.sigfile, config.files, config.quiet)
    return report.is_valid


@app.command()
def generate(
    pubkey: Optional[str] = typer.Option(
        None, "--pubkey", "-p", help="Public key file to create."
    ),
    seckey: Optional[str] = typer.Option(
        None, "--seckey", "-s", help="Secret key file to create."
    ),
    comment: str = typer.Option(
        DEFAULT_COMMENT, "--comment", "-c", help="Comment added to both keys."
    ),
    no_passphrase: bool = typer.Option(
        False,
        "--no-passphrase",
        "-n",
        help="Do not ask for a passphrase to protect the secret key.",
    ),
) -> None:
    """Generate a new key pair.

    Example:
        pysignify generate -p key.pub -s key.sec
    """
    try:
        run_generate(
            CommandConfig(
                pubkey=pubkey or "",
                seckey=seckey or "",
                comment=comment,
                rounds=0 if no_passphrase else DEFAULT_KDF_ROUNDS,
            )
        )
    except SignifyError as e:
        _fail(e)


@app.command()
def sign(
    seckey: Optional[str] = typer.Option(
        None, "--seckey", "-s", help="Secret key used to sign."
    ),
    message: Optional[str] = typer.Option(
        None, "--message", "-m", help="File to sign ('-' for stdin)."
    ),
    sigfile: Optional[str] = typer.Option(
        None, "--sigfile", "-x", help="Signature to create (default: MESSAGE.sig)."
    ),
    embed: bool = typer.Option(
        False, "--embed", "-e", help="Embed the message after the signature."
    ),
) -> None:
    """Sign a message and write a signature.

    Example:
        pysignify sign -s key.sec -m release.tgz
    """
    try:
        run_sign(
            CommandConfig(
                seckey=seckey or "",
                message=message or "",
                sigfile=sigfile or "",
                embed=embed,
            )
        )
    except SignifyError as e:
        _fail(e)


@app.command()
def verify(
    pubkey: Optional[str] = typer.Option(
        None,
        "--pubkey",
        "-p",
        help="Public key (default: the key named by the signature, if trusted).",
    ),
    message: Optional[str] = typer.Option(
        None,
        "--message",
        "-m",
        help="Message to verify; with --embed, the file to create.",
    ),
    sigfile: Optional[str] = typer.Option(
        None, "--sigfile", "-x", help="Signature to verify (default: MESSAGE.sig)."
    ),
    embed: bool = typer.Option(
        False, "--embed", "-e", help="Extract the message embedded in the signature."
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress informational output."),
) -> None:
    """Verify that a message and signature match.

    Example:
        pysignify verify -p key.pub -m release.tgz
    """
    try:
        run_verify(
            CommandConfig(
                pubkey=pubkey or "",
                message=message or "",
                sigfile=sigfile or "",
                embed=embed,
                quiet=quiet,
            )
        )
    except SignifyError as e:
        _fail(e)


@app.command()
def check(
    files: Optional[list[str]] = typer.Argument(
        None, help="Only check these files (default: every listed file)."
    ),
    pubkey: Optional[str] = typer.Option(
        None,
        "--pubkey",
        "-p",
        help="Public key (default: the key named by the signature, if trusted).",
    ),
    sigfile: Optional[str] = typer.Option(
        None, "--sigfile", "-x", help="Signed checksum manifest."
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress informational output."),
) -> None:
    """Verify a signed checksum list, then each file's checksum.

    The manifest is the embedded output of ``sha256 -b`` / ``sha512 -b``
    or "file  digest" lines (file name first, unlike ``sha256sum``).

    Example:
        pysignify check -p key.pub -x SHA256.sig base.tgz
    """
    try:
        valid = run_check(
            CommandConfig(
                pubkey=pubkey or "",
                sigfile=sigfile or "",
                quiet=quiet,
                files=tuple(files or ()),
            )
        )
    except SignifyError as e:
        _fail(e)
    if not valid:
        raise typer.Exit(code=1)
