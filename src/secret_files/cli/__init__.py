"""Command-line interface for secret-files."""

from secret_files.cli.main import cli

__all__ = ["cli"]
