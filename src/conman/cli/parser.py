"""CLI argument parser for conman.

``conman <name>`` and ``conman conman://<name>`` are shorthand for
``conman install <name>``, which is how a browser URL handler calls it.
"""

import argparse
import sys
from argparse import Namespace
from collections.abc import Sequence

from conman.domain.types import Platform

COMMANDS = ("install", "list", "serve")

DEFAULT_SERVER_HOST = "127.0.0.1"
DEFAULT_SERVER_PORT = 8080


class CLIParser:
    """Command-line argument parser for conman."""

    def parse_args(self, argv: Sequence[str] | None = None) -> Namespace:
        """Parse command-line arguments.

        Args:
            argv: Arguments without the program name, ``sys.argv`` if None

        Returns:
            Parsed arguments namespace

        """
        args = list(sys.argv[1:] if argv is None else argv)
        positional = next((a for a in args if not a.startswith("-")), None)
        if positional is not None and positional not in COMMANDS:
            args.insert(0, "install")

        parser = self._create_main_parser()
        self._add_global_options(parser)
        self._add_subcommands(parser)
        return parser.parse_args(args)

    def _create_main_parser(self) -> argparse.ArgumentParser:
        return argparse.ArgumentParser(
            prog="conman",
            description="conman trusted container application installer",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  %(prog)s spotify                  # Same as: install spotify
  %(prog)s conman://spotify         # As invoked by a URL handler
  %(prog)s install --no-pull gimp
  %(prog)s list
  %(prog)s serve --port 8080
            """,
        )

    def _add_global_options(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--version",
            action="store_true",
            help="Show conman version and exit",
        )

    def _add_subcommands(self, parser: argparse.ArgumentParser) -> None:
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands"
        )

        install = subparsers.add_parser(
            "install", help="Install an application from the trust service"
        )
        install.add_argument(
            "app", help="Application name, optionally as conman://<name>"
        )
        install.add_argument(
            "--no-pull",
            dest="pull",
            action="store_false",
            default=None,
            help="Skip the trusted docker image pull",
        )
        install.add_argument(
            "--platform",
            choices=[platform.value for platform in Platform],
            help="Installer platform (default: detected)",
        )
        install.add_argument(
            "--verbose", action="store_true", help="Show debug output"
        )

        list_parser = subparsers.add_parser(
            "list", help="List applications available in the catalog"
        )
        list_parser.add_argument(
            "--json", action="store_true", help="Print the raw JSON listing"
        )

        serve = subparsers.add_parser(
            "serve", help="Serve the application catalog over HTTP"
        )
        serve.add_argument("--host", default=DEFAULT_SERVER_HOST)
        serve.add_argument("--port", type=int, default=DEFAULT_SERVER_PORT)
