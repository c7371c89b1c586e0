"""Base command handler for conman CLI commands."""

from abc import ABC, abstractmethod
from argparse import Namespace

from conman.cli.container import ServiceContainer


class BaseCommandHandler(ABC):
    """Abstract base class for all command handlers.

    CLIRunner acts as the composition root and injects a fresh
    ServiceContainer per command.
    """

    def __init__(self, container: ServiceContainer) -> None:
        """Initialize the command handler.

        Args:
            container: Services for this invocation

        """
        self.container = container

    @abstractmethod
    async def execute(self, args: Namespace) -> None:
        """Execute the command with parsed arguments."""
