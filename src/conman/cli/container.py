"""Dependency injection container for service wiring.

The container is the composition root: it reads the global configuration
once and lazily builds the trust repository, HTTP session, downloader and
platform installer that the commands need.

Usage:
    >>> container = ServiceContainer(ConfigManager())
    >>> try:
    ...     pipeline = container.create_install_pipeline()
    ...     await pipeline.run("spotify")
    ... finally:
    ...     await container.cleanup()
"""

from pathlib import Path

import aiohttp

from conman.config import ConfigManager
from conman.core.download import ArtifactDownloader
from conman.core.http_session import create_http_session, create_timeout
from conman.core.pipeline import InstallPipeline
from conman.core.protocols import Installer
from conman.domain.types import GlobalConfig, Platform
from conman.infrastructure.bundle import AppBundleInstaller
from conman.infrastructure.container import ContainerImagePuller
from conman.infrastructure.desktop_entry import DesktopEntryInstaller
from conman.infrastructure.image_tools import (
    IconutilPackager,
    SipsIconConverter,
)
from conman.infrastructure.trust import TufTargetRepository
from conman.logger import get_logger

logger = get_logger(__name__)


class ServiceContainer:
    """Lazily created services for one CLI invocation.

    Not thread-safe; each command uses its own container and calls
    ``cleanup()`` when done.
    """

    def __init__(
        self,
        config_manager: ConfigManager | None = None,
        home: Path | None = None,
        platform: Platform | None = None,
    ) -> None:
        """Initialize container.

        Args:
            config_manager: Configuration manager, default if not provided
            home: Home directory to install into, the user's by default
            platform: Installer platform, detected if not provided

        """
        self.config = config_manager or ConfigManager()
        self.home = home or Path.home()
        self.platform = platform or Platform.current()

        self._global_config: GlobalConfig | None = None
        self._session: aiohttp.ClientSession | None = None
        self._repository: TufTargetRepository | None = None

    @property
    def global_config(self) -> GlobalConfig:
        """Global configuration (loaded once, cached)."""
        if self._global_config is None:
            self._global_config = self.config.load_global_config()
        return self._global_config

    @property
    def session(self) -> aiohttp.ClientSession:
        """HTTP session (singleton, lazy-loaded)."""
        if self._session is None:
            self._session = create_http_session(self.global_config)
            logger.debug("Created new HTTP session")
        return self._session

    @property
    def repository(self) -> TufTargetRepository:
        """Trust repository client (singleton, lazy-loaded)."""
        if self._repository is None:
            trust = self.global_config["trust"]
            self._repository = TufTargetRepository(
                server=trust["server"],
                image=trust["image"],
                trust_dir=Path(trust["directory"]),
                timeout_seconds=self.global_config["network"][
                    "timeout_seconds"
                ],
            )
        return self._repository

    def create_downloader(self) -> ArtifactDownloader:
        """Create the icon downloader."""
        return ArtifactDownloader(
            self.session,
            timeout=create_timeout(
                self.global_config["network"]["timeout_seconds"]
            ),
            enforce_size_limit=self.global_config["install"][
                "enforce_icon_size"
            ],
        )

    def create_installer(self) -> Installer:
        """Create the installer for the configured platform."""
        if self.platform is Platform.MACOS:
            return AppBundleInstaller(
                self.home,
                SipsIconConverter(),
                IconutilPackager(),
                max_concurrent=self.global_config["network"][
                    "max_concurrent_conversions"
                ],
            )
        return DesktopEntryInstaller(self.home)

    def create_install_pipeline(
        self,
        pull_image: bool | None = None,  # noqa: FBT001
    ) -> InstallPipeline:
        """Create a fully wired install pipeline.

        Args:
            pull_image: Override of the ``[install] pull_image`` setting

        """
        if pull_image is None:
            pull_image = self.global_config["install"]["pull_image"]
        puller = (
            ContainerImagePuller(self.global_config["trust"]["image"])
            if pull_image
            else None
        )
        return InstallPipeline(
            repository=self.repository,
            installer=self.create_installer(),
            downloader=self.create_downloader(),
            puller=puller,
        )

    async def cleanup(self) -> None:
        """Close the HTTP session, if one was opened."""
        if self._session is not None:
            await self._session.close()
            self._session = None
            logger.debug("HTTP session closed")
