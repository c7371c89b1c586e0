"""Tests for the macOS application bundle installer."""

import asyncio
import plistlib
import stat
from collections.abc import Callable
from pathlib import Path
from typing import Any

import orjson
import pytest

from conman.core.descriptor import parse_descriptor
from conman.domain.types import AppDescriptor
from conman.exceptions import DescriptorValidationError, ToolError
from conman.infrastructure.bundle import (
    AppBundleInstaller,
    bundle_name,
    iconset_entries,
    launch_script,
)


class FakeConverter:
    """Converter writing placeholder files and tracking concurrency."""

    def __init__(self, fail_on: int | None = None) -> None:
        self.calls: list[tuple[int, str]] = []
        self.active = 0
        self.max_active = 0
        self.fail_on = fail_on

    async def resize(self, source: Path, size: int, dest: Path) -> Path:
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(0)
            assert source.exists()
            if size == self.fail_on:
                msg = f"cannot resize to {size}"
                raise ToolError(msg)
            dest.write_bytes(b"png")
            self.calls.append((size, dest.name))
            return dest
        finally:
            self.active -= 1


class FakePackager:
    """Packager recording the icon-set it was given."""

    def __init__(self) -> None:
        self.iconset_files: list[str] = []

    async def package(self, iconset: Path, dest: Path) -> Path:
        self.iconset_files = sorted(p.name for p in iconset.iterdir())
        dest.write_bytes(b"icns")
        return dest


@pytest.fixture
def command_descriptor(
    make_descriptor: Callable[..., dict[str, Any]],
) -> AppDescriptor:
    """Descriptor with a launch command."""
    data = make_descriptor(
        desktop=None, cmd="docker run --rm conman/apps:gimp"
    )
    return parse_descriptor(orjson.dumps(data), "gimp")


class TestHelpers:
    """Tests for the bundle helper functions."""

    @pytest.mark.parametrize(
        ("app_name", "expected"),
        [
            ("gimp", "Gimp"),
            ("visual studio code", "Visual Studio Code"),
            ("libreOffice", "LibreOffice"),
        ],
    )
    def test_bundle_name(self, app_name: str, expected: str) -> None:
        """Every word is capitalized, the rest is kept."""
        assert bundle_name(app_name) == expected

    def test_iconset_entries(self) -> None:
        """Six sizes at two densities each."""
        entries = iconset_entries("png")

        assert len(entries) == 12
        assert ("icon_16x16.png", 16) in entries
        assert ("icon_16x16@2x.png", 32) in entries
        assert ("icon_512x512@2x.png", 1024) in entries

    def test_launch_script_wraps_command(
        self, command_descriptor: AppDescriptor
    ) -> None:
        """Commands run under a wrapper exporting DISPLAY."""
        script = launch_script(command_descriptor)

        assert script.startswith("#!/bin/bash\n")
        assert "export DISPLAY=" in script
        assert "export DOCKER_CONTENT_TRUST=1" in script
        assert script.rstrip().endswith(
            "exec docker run --rm conman/apps:gimp"
        )

    def test_literal_script_is_kept(
        self, make_descriptor: Callable[..., dict[str, Any]]
    ) -> None:
        """A literal script is installed as-is."""
        data = make_descriptor(desktop=None, script="#!/bin/sh\necho hi\n")
        descriptor = parse_descriptor(orjson.dumps(data), "gimp")

        assert launch_script(descriptor) == "#!/bin/sh\necho hi\n"


class TestAppBundleInstaller:
    """Tests for AppBundleInstaller."""

    def test_check_requires_launch_command(
        self,
        tmp_path: Path,
        make_descriptor: Callable[..., dict[str, Any]],
    ) -> None:
        """Desktop-only descriptors cannot become bundles."""
        descriptor = parse_descriptor(
            orjson.dumps(make_descriptor()), "spotify"
        )
        installer = AppBundleInstaller(
            tmp_path, FakeConverter(), FakePackager()
        )

        with pytest.raises(DescriptorValidationError, match="launch"):
            installer.check(descriptor)

    @pytest.mark.asyncio
    async def test_full_install(
        self,
        tmp_path: Path,
        command_descriptor: AppDescriptor,
        icon_bytes: bytes,
    ) -> None:
        """Plist, icon container and executable script are created."""
        converter = FakeConverter()
        packager = FakePackager()
        installer = AppBundleInstaller(tmp_path, converter, packager)

        await installer.write_config(command_descriptor)
        await installer.write_icon(command_descriptor, icon_bytes)
        await installer.finalize(command_descriptor)

        contents = tmp_path / "Applications" / "Gimp.app" / "Contents"
        with (contents / "Info.plist").open("rb") as f:
            plist = plistlib.load(f)
        assert plist["CFBundleExecutable"] == "gimp"
        assert plist["CFBundleName"] == "Gimp"
        assert plist["CFBundleIconFile"] == "Icon.icns"
        assert plist["CFBundlePackageType"] == "APPL"

        assert (contents / "Resources" / "Icon.icns").read_bytes() == b"icns"
        assert len(converter.calls) == 12
        assert packager.iconset_files == sorted(
            name for name, _ in iconset_entries("png")
        )

        script = contents / "MacOS" / "gimp"
        assert stat.S_IMODE(script.stat().st_mode) == 0o755
        assert "exec docker run" in script.read_text(encoding="utf-8")

    @pytest.mark.asyncio
    async def test_resize_concurrency_is_bounded(
        self,
        tmp_path: Path,
        command_descriptor: AppDescriptor,
        icon_bytes: bytes,
    ) -> None:
        """No more resizes run at once than configured."""
        converter = FakeConverter()
        installer = AppBundleInstaller(
            tmp_path, converter, FakePackager(), max_concurrent=2
        )

        await installer.write_config(command_descriptor)
        await installer.write_icon(command_descriptor, icon_bytes)

        assert 1 <= converter.max_active <= 2

    @pytest.mark.asyncio
    async def test_tool_failure_propagates(
        self,
        tmp_path: Path,
        command_descriptor: AppDescriptor,
        icon_bytes: bytes,
    ) -> None:
        """A failed resize surfaces as the tool's own error."""
        packager = FakePackager()
        installer = AppBundleInstaller(
            tmp_path, FakeConverter(fail_on=64), packager
        )
        await installer.write_config(command_descriptor)

        with pytest.raises(ToolError, match="64"):
            await installer.write_icon(command_descriptor, icon_bytes)

        assert packager.iconset_files == []
