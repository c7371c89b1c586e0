"""Command handlers for the conman CLI."""

from conman.cli.commands.base import BaseCommandHandler
from conman.cli.commands.catalog import CatalogHandler
from conman.cli.commands.install import InstallHandler
from conman.cli.commands.serve import ServeHandler

__all__ = [
    "BaseCommandHandler",
    "CatalogHandler",
    "InstallHandler",
    "ServeHandler",
]
