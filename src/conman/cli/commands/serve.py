"""Catalog server command handler."""

from argparse import Namespace

from conman.cli.commands.base import BaseCommandHandler
from conman.infrastructure.catalog_server import run_server


class ServeHandler(BaseCommandHandler):
    """Serves the catalog over HTTP until interrupted."""

    async def execute(self, args: Namespace) -> None:
        """Start the catalog server on ``args.host:args.port``."""
        await run_server(self.container.repository, args.host, args.port)
