"""Command line interface for Chronology."""

from chronology.cli.main import cli, main

__all__ = ["cli", "main"]
