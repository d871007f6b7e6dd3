"""CLI module."""

from covannot.cli.main import cli, main

__all__ = ["cli", "main"]
