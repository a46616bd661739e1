"""Tests for package structure.

These tests verify:
- Package imports correctly
- CLI entry point exists
- Version is defined
"""


def test_package_imports_correctly() -> None:
    """Verify pysignify package can be imported."""
    import pysignify

    assert pysignify is not None


def test_version_defined() -> None:
    """Verify __version__ is defined in package."""
    from pysignify import __version__

    assert isinstance(__version__, str)
    # Should be semver format (at least X.Y.Z)
    assert len(__version__.split(".")) >= 3


def test_cli_entry_point_exists() -> None:
    """Verify CLI app can be imported."""
    from pysignify.cli import app

    # Should be a Typer app
    assert hasattr(app, "info")


def test_package_exports_operations() -> None:
    """Verify the operations are exported from package."""
    from pysignify import check, generate, sign, verify, verify_detached, verify_embedded

    assert all(
        callable(op)
        for op in (check, generate, sign, verify, verify_detached, verify_embedded)
    )
