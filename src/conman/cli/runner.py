"""CLI runner for conman.

Routes parsed arguments to the command handlers and turns every failure
into a printed message and a non-zero exit status.
"""

import sys
from argparse import Namespace
from collections.abc import Sequence

from conman import __version__
from conman.cli.commands import (
    BaseCommandHandler,
    CatalogHandler,
    InstallHandler,
    ServeHandler,
)
from conman.cli.container import ServiceContainer
from conman.cli.parser import CLIParser
from conman.config import ConfigManager
from conman.domain.types import Platform
from conman.exceptions import ConmanError
from conman.logger import get_logger, update_logger_from_config

logger = get_logger(__name__)

COMMAND_HANDLERS: dict[str, type[BaseCommandHandler]] = {
    "install": InstallHandler,
    "list": CatalogHandler,
    "serve": ServeHandler,
}


class CLIRunner:
    """CLI command runner and orchestrator."""

    def __init__(self, config_manager: ConfigManager | None = None) -> None:
        """Initialize CLI runner.

        Args:
            config_manager: Configuration manager, default if not provided

        """
        self.config_manager = config_manager or ConfigManager()

    async def run(self, argv: Sequence[str] | None = None) -> None:
        """Run the CLI application.

        Args:
            argv: Arguments without the program name, ``sys.argv`` if None

        Raises:
            SystemExit: With status 1 on any failure

        """
        args = CLIParser().parse_args(argv)

        if args.version:
            print(__version__)
            return

        if not args.command:
            print("❌ No command specified. Use --help.")
            sys.exit(1)

        try:
            update_logger_from_config(self.config_manager)
            await self._execute_command(args)
        except KeyboardInterrupt:
            print("\n⏹️  Operation cancelled by user")
            sys.exit(1)
        except ConmanError as e:
            logger.error("%s failed: %s", args.command, e)
            print(f"❌ {e}")
            sys.exit(1)
        except Exception as e:
            logger.exception("Unexpected error")
            print(f"❌ Unexpected error: {e}")
            sys.exit(1)

    async def _execute_command(self, args: Namespace) -> None:
        platform = getattr(args, "platform", None)
        container = ServiceContainer(
            self.config_manager,
            platform=Platform(platform) if platform else None,
        )
        handler = COMMAND_HANDLERS[args.command](container)
        try:
            await handler.execute(args)
        finally:
            await container.cleanup()
