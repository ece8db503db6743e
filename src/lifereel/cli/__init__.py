"""Command-line interface for lifereel."""

from lifereel.cli.main import cli, main

__all__ = ["cli", "main"]
