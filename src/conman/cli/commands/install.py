"""Install command handler."""

from argparse import Namespace

from conman.cli.commands.base import BaseCommandHandler
from conman.logger import get_logger, set_console_level

logger = get_logger(__name__)


class InstallHandler(BaseCommandHandler):
    """Installs one application from the trust service."""

    async def execute(self, args: Namespace) -> None:
        """Run the install pipeline for ``args.app``."""
        if getattr(args, "verbose", False):
            set_console_level("DEBUG")

        pipeline = self.container.create_install_pipeline(
            pull_image=getattr(args, "pull", None)
        )
        descriptor = await pipeline.run(args.app)
        print(f"✅ Installed {descriptor.app_name}")
