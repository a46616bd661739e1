"""Entry point for ``python -m pysignify``."""

from pysignify.cli import app

app(prog_name="pysignify")
