"""Application bundle installer for macOS.

Builds ``~/Applications/<Bundle>.app``::

    <Bundle>.app/Contents/
        Info.plist
        MacOS/<app>          launch script, mode 0755
        Resources/Icon.icns  packaged from a generated .iconset

Steps run in a fixed order: directories, Info.plist, icon conversion,
launch script. There is no rollback; a failing image tool leaves a
partially populated bundle behind.
"""

import asyncio
import plistlib
import tempfile
from pathlib import Path
from typing import Any

from conman.config.paths import Paths
from conman.constants import (
    BUNDLE_ICON_FILE,
    BUNDLE_INFO_DICTIONARY_VERSION,
    BUNDLE_MIN_OS_VERSION,
    BUNDLE_PACKAGE_TYPE,
    BUNDLE_SIGNATURE,
    DEFAULT_MAX_CONCURRENT_CONVERSIONS,
    DIRECTORY_MODE,
    EXECUTABLE_MODE,
    ICONSET_DENSITIES,
    ICONSET_SIZES,
)
from conman.core.protocols import IconConverter, IconPackager
from conman.domain.types import AppDescriptor
from conman.exceptions import DescriptorValidationError, InstallError
from conman.logger import get_logger

logger = get_logger(__name__)

LAUNCH_WRAPPER_TEMPLATE = """#!/bin/bash
# Generated by conman for {app_name}
export DISPLAY="${{CONMAN_DISPLAY_HOST:-$(ipconfig getifaddr en0)}}:0"
export DOCKER_CONTENT_TRUST=1
exec {command}
"""


def bundle_name(app_name: str) -> str:
    """Display name of the bundle: every word capitalized.

    Example:
        >>> bundle_name("visual studio code")
        'Visual Studio Code'

    """
    return " ".join(word[:1].upper() + word[1:] for word in app_name.split())


def bundle_plist(executable: str, name: str) -> dict[str, Any]:
    """Info.plist content for a conman bundle."""
    return {
        "CFBundleExecutable": executable,
        "CFBundleIconFile": BUNDLE_ICON_FILE,
        "CFBundleName": name,
        "LSMinimumSystemVersion": BUNDLE_MIN_OS_VERSION,
        "CFBundleSignature": BUNDLE_SIGNATURE,
        "CFBundleTypeIconFile": BUNDLE_ICON_FILE,
        "CFBundlePackageType": BUNDLE_PACKAGE_TYPE,
        "CFBundleInfoDictionaryVersion": BUNDLE_INFO_DICTIONARY_VERSION,
    }


def iconset_entries(icon_type: str) -> list[tuple[str, int]]:
    """File names and pixel sizes that make up an icon-set.

    Returns:
        ``(filename, pixels)`` for every size at every density

    """
    entries = []
    for size in ICONSET_SIZES:
        for density in ICONSET_DENSITIES:
            suffix = "" if density == 1 else f"@{density}x"
            entries.append(
                (f"icon_{size}x{size}{suffix}.{icon_type}", size * density)
            )
    return entries


def launch_script(descriptor: AppDescriptor) -> str:
    """Launch script for a descriptor.

    A literal ``script`` is used as-is; otherwise ``command`` is wrapped in
    a script exporting ``DISPLAY`` for the X server and enabling content
    trust.
    """
    if descriptor.script is not None:
        return descriptor.script
    if descriptor.command is None:
        msg = "descriptor has no launch script or command"
        raise DescriptorValidationError(msg, target=descriptor.app_name)
    return LAUNCH_WRAPPER_TEMPLATE.format(
        app_name=descriptor.app_name, command=descriptor.command
    )


class AppBundleInstaller:
    """Installs ``.app`` bundles into ``~/Applications``."""

    name = "app-bundle"
    pulls_image = False

    def __init__(
        self,
        home: Path,
        converter: IconConverter,
        packager: IconPackager,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT_CONVERSIONS,
    ) -> None:
        """Initialize installer.

        Args:
            home: Home directory to install into
            converter: Image resizer used to build the icon-set
            packager: Icon-set to container packager
            max_concurrent: Upper bound on parallel resize runs

        """
        self.applications_dir = Paths.bundles_dir(home)
        self.converter = converter
        self.packager = packager
        self.max_concurrent = max(1, max_concurrent)

    def contents_dir(self, app_name: str) -> Path:
        """``Contents`` directory of the bundle for an app."""
        bundle = f"{bundle_name(app_name)}.app"
        return self.applications_dir / bundle / "Contents"

    def check(self, descriptor: AppDescriptor) -> None:
        """Require a launch script or command."""
        if descriptor.script is None and descriptor.command is None:
            msg = "descriptor has no launch script or command"
            raise DescriptorValidationError(msg, target=descriptor.app_name)

    async def write_config(self, descriptor: AppDescriptor) -> None:
        """Create the bundle tree and write ``Info.plist``."""
        contents = self.contents_dir(descriptor.app_name)
        plist = bundle_plist(
            descriptor.app_name, bundle_name(descriptor.app_name)
        )
        try:
            for directory in (contents / "MacOS", contents / "Resources"):
                directory.mkdir(
                    mode=DIRECTORY_MODE, parents=True, exist_ok=True
                )
            with (contents / "Info.plist").open("wb") as f:
                plistlib.dump(plist, f)
        except OSError as e:
            msg = f"failed to create bundle {contents.parent}: {e}"
            raise InstallError(msg, target=descriptor.app_name) from e
        logger.info("Created bundle: %s", contents.parent.name)

    async def write_icon(
        self, descriptor: AppDescriptor, icon_bytes: bytes
    ) -> None:
        """Convert the icon into an icon-set and package it as ``.icns``."""
        icon = descriptor.icon
        contents = self.contents_dir(descriptor.app_name)
        dest = contents / "Resources" / BUNDLE_ICON_FILE

        with tempfile.TemporaryDirectory(prefix="conman-icons-") as temp_dir:
            temp_path = Path(temp_dir)
            source = temp_path / icon.installed_name
            iconset = temp_path / f"{icon.filename}.iconset"
            try:
                source.write_bytes(icon_bytes)
                iconset.mkdir()
            except OSError as e:
                msg = f"failed to stage icon: {e}"
                raise InstallError(msg, target=descriptor.app_name) from e

            await self._build_iconset(source, iconset, icon.type)
            await self.packager.package(iconset, dest)

        logger.info("Installed icon: %s", dest.name)

    async def _build_iconset(
        self, source: Path, iconset: Path, icon_type: str
    ) -> None:
        """Resize ``source`` into every icon-set entry.

        Resizes run concurrently and write distinct files; this returns
        only once all of them finished.
        """
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def resize(filename: str, pixels: int) -> Path:
            async with semaphore:
                return await self.converter.resize(
                    source, pixels, iconset / filename
                )

        try:
            async with asyncio.TaskGroup() as group:
                for filename, pixels in iconset_entries(icon_type):
                    group.create_task(resize(filename, pixels))
        except ExceptionGroup as errors:
            raise errors.exceptions[0] from None

    async def finalize(self, descriptor: AppDescriptor) -> None:
        """Write the launch script and make it executable."""
        contents = self.contents_dir(descriptor.app_name)
        path = contents / "MacOS" / descriptor.app_name
        script = launch_script(descriptor)
        try:
            path.write_text(script, encoding="utf-8")
            path.chmod(EXECUTABLE_MODE)
        except OSError as e:
            msg = f"failed to write launch script {path}: {e}"
            raise InstallError(msg, target=descriptor.app_name) from e
        logger.info("Installed launch script: %s", path.name)
