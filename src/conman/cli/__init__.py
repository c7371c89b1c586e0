"""Command-line interface for conman."""

from conman.cli.runner import CLIRunner

__all__ = ["CLIRunner"]
