"""Command line interface for platepack."""

from platepack.cli.main import cli

__all__ = ["cli"]
