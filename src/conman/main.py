"""Main CLI entry point for conman.

Also used as the ``conman://`` URL handler: the browser passes the full
URL as the only argument.
"""

import sys

import uvloop

from conman.cli import CLIRunner
from conman.logger import get_logger

logger = get_logger(__name__)


async def async_main() -> None:
    """Run the CLI asynchronously."""
    logger.debug("CLI started")
    runner = CLIRunner()
    await runner.run()
    logger.debug("CLI completed successfully")


def main() -> None:
    """Run the CLI application on uvloop."""
    try:
        uvloop.run(async_main())
    except KeyboardInterrupt:
        logger.info("CLI cancelled by user")
        sys.exit(1)


if __name__ == "__main__":
    main()
