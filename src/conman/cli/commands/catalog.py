"""Catalog listing command handler."""

from argparse import Namespace

import orjson

from conman.cli.commands.base import BaseCommandHandler
from conman.core.catalog import list_catalog
from conman.logger import get_logger

logger = get_logger(__name__)


class CatalogHandler(BaseCommandHandler):
    """Lists the applications available in the trust repository."""

    async def execute(self, args: Namespace) -> None:
        """Print the catalog as a table or as JSON."""
        entries = await list_catalog(self.container.repository)
        logger.info("Listing %d available apps", len(entries))

        if getattr(args, "json", False):
            print(orjson.dumps(entries, option=orjson.OPT_INDENT_2).decode())
            return

        print(f"📋 Available applications ({len(entries)} apps):\n")
        if not entries:
            print("  None found")
            return
        for entry in entries:
            print(f"  {entry['Name']:<24} {entry['URL']}")
