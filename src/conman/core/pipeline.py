"""Descriptor resolution and installation pipeline.

    name -> (image pull) -> trust lookup -> unwrap -> parse/validate
         -> installer check -> icon download + verify -> installer writes

Stages run strictly in sequence and every failure is terminal: nothing
is written to disk before the icon passed checksum verification.
"""

from conman.constants import URI_SCHEME_PREFIX
from conman.core.descriptor import parse_descriptor
from conman.core.download import ArtifactDownloader
from conman.core.protocols import (
    ImagePuller,
    Installer,
    TargetRepository,
    install_descriptor,
)
from conman.core.unwrap import unwrap_custom_payload
from conman.domain.types import AppDescriptor, is_safe_file_stem
from conman.exceptions import DescriptorValidationError
from conman.logger import get_logger

logger = get_logger(__name__)


def normalize_app_name(argument: str) -> str:
    """Turn a CLI argument or ``conman://`` URL into an app name.

    Raises:
        DescriptorValidationError: If no usable name remains

    """
    name = argument.strip()
    name = name.removeprefix(URI_SCHEME_PREFIX).strip("/")
    if not is_safe_file_stem(name):
        msg = f"invalid application name {argument!r}"
        raise DescriptorValidationError(msg)
    return name


class InstallPipeline:
    """Resolves, verifies and installs one application."""

    def __init__(
        self,
        repository: TargetRepository,
        installer: Installer,
        downloader: ArtifactDownloader,
        puller: ImagePuller | None = None,
    ) -> None:
        """Initialize pipeline with its collaborators.

        Args:
            repository: Verified trust repository lookups
            installer: Platform installer
            downloader: Icon downloader with checksum verification
            puller: Image puller, used when the installer asks for a pull

        """
        self.repository = repository
        self.installer = installer
        self.downloader = downloader
        self.puller = puller

    async def resolve(self, app_name: str) -> AppDescriptor:
        """Look up, unwrap and validate the descriptor of an app.

        Args:
            app_name: Normalized application name

        Returns:
            Descriptor the configured installer accepts

        """
        record = await self.repository.get_target_by_name(app_name)
        logger.debug("Resolved target %s", record.name)
        return self.load(unwrap_custom_payload(record.custom), app_name)

    def load(self, raw: bytes, app_name: str) -> AppDescriptor:
        """Parse raw descriptor JSON and check it against the installer."""
        descriptor = parse_descriptor(raw, app_name)
        self.installer.check(descriptor)
        return descriptor

    async def install(self, descriptor: AppDescriptor) -> None:
        """Download and verify the icon, then run the installer."""
        icon_bytes = await self.downloader.fetch(descriptor.icon)
        await install_descriptor(self.installer, descriptor, icon_bytes)
        logger.info(
            "Installed %s (%s)", descriptor.app_name, self.installer.name
        )

    async def run(self, argument: str) -> AppDescriptor:
        """Run the whole pipeline for a CLI argument.

        Args:
            argument: App name, optionally prefixed with ``conman://``

        Returns:
            The installed descriptor

        Raises:
            ConmanError: From whichever stage failed

        """
        app_name = normalize_app_name(argument)

        if self.puller is not None and self.installer.pulls_image:
            await self.puller.pull(app_name)

        descriptor = await self.resolve(app_name)
        await self.install(descriptor)
        return descriptor
