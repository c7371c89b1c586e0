"""Desktop entry installer for freedesktop.org desktops.

Writes the descriptor's Desktop Entry block to
``~/.local/share/applications/<app>.desktop`` and the verified icon to
``~/.local/share/icons/<icon>.<type>``. The block is written as parsed;
conman does not generate entries of its own.
"""

import io
import shutil
from pathlib import Path

from conman.config.paths import Paths
from conman.constants import (
    DESKTOP_FILE_SUFFIX,
    DESKTOP_KEY_MIME_TYPE,
    DESKTOP_SECTION,
    DIRECTORY_MODE,
)
from conman.core.descriptor import new_desktop_parser
from conman.domain.types import AppDescriptor
from conman.exceptions import DescriptorValidationError, InstallError
from conman.infrastructure.process import run_tool
from conman.logger import get_logger

logger = get_logger(__name__)


def render_desktop_entry(descriptor: AppDescriptor) -> str:
    """Serialize the descriptor's Desktop Entry block.

    MIME types listed by the descriptor are added as ``MimeType`` when the
    block does not declare them itself.

    Args:
        descriptor: Validated descriptor with a desktop block

    Returns:
        Desktop file content

    """
    if descriptor.desktop is None:
        msg = "descriptor has no desktop entry"
        raise DescriptorValidationError(msg, target=descriptor.app_name)

    entry = new_desktop_parser()
    entry.read_dict(descriptor.desktop)
    section = entry[DESKTOP_SECTION]
    if descriptor.mime_types and DESKTOP_KEY_MIME_TYPE not in section:
        section[DESKTOP_KEY_MIME_TYPE] = ";".join(descriptor.mime_types) + ";"

    buffer = io.StringIO()
    entry.write(buffer, space_around_delimiters=False)
    return buffer.getvalue()


class DesktopEntryInstaller:
    """Installs ``.desktop`` files and icons into the user's home."""

    name = "desktop-entry"
    pulls_image = True

    def __init__(self, home: Path) -> None:
        """Initialize installer.

        Args:
            home: Home directory to install into

        """
        self.applications_dir = Paths.applications_dir(home)
        self.icons_dir = Paths.icons_dir(home)

    def desktop_file(self, app_name: str) -> Path:
        """Path of the desktop file for an app."""
        return self.applications_dir / f"{app_name}{DESKTOP_FILE_SUFFIX}"

    def icon_file(self, descriptor: AppDescriptor) -> Path:
        """Path of the installed icon for a descriptor."""
        return self.icons_dir / descriptor.icon.installed_name

    def check(self, descriptor: AppDescriptor) -> None:
        """Require a Desktop Entry block."""
        if descriptor.desktop is None:
            msg = "descriptor has no desktop entry"
            raise DescriptorValidationError(msg, target=descriptor.app_name)

    async def write_config(self, descriptor: AppDescriptor) -> None:
        """Write ``<app>.desktop``."""
        content = render_desktop_entry(descriptor)
        path = self.desktop_file(descriptor.app_name)
        try:
            self.applications_dir.mkdir(
                mode=DIRECTORY_MODE, parents=True, exist_ok=True
            )
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            msg = f"failed to write desktop file {path}: {e}"
            raise InstallError(msg, target=descriptor.app_name) from e
        logger.info("Created desktop entry: %s", path.name)

    async def write_icon(
        self, descriptor: AppDescriptor, icon_bytes: bytes
    ) -> None:
        """Write the verified icon bytes."""
        path = self.icon_file(descriptor)
        try:
            self.icons_dir.mkdir(
                mode=DIRECTORY_MODE, parents=True, exist_ok=True
            )
            path.write_bytes(icon_bytes)
        except OSError as e:
            msg = f"failed to write icon {path}: {e}"
            raise InstallError(msg, target=descriptor.app_name) from e
        logger.info("Installed icon: %s", path.name)

    async def finalize(self, descriptor: AppDescriptor) -> None:
        """Refresh the desktop database when the tool is available.

        The entry is usable without the refresh, so a failure here is
        only logged.
        """
        if shutil.which("update-desktop-database") is None:
            return
        try:
            result = await run_tool(
                "update-desktop-database", str(self.applications_dir)
            )
        except InstallError as e:
            logger.debug("Could not refresh desktop database: %s", e)
            return
        if result.returncode != 0:
            logger.debug(
                "update-desktop-database exited with %s: %s",
                result.returncode,
                result.output.strip(),
            )
        else:
            logger.debug("Desktop database refreshed")
