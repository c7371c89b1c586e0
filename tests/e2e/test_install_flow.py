"""End-to-end install flow against a local icon server.

Everything is real except the trust service, which is replaced by an
in-memory repository holding wrapped descriptors.
"""

from collections.abc import AsyncIterator, Callable
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer as LocalServer

from conman.cli.container import ServiceContainer
from conman.config import ConfigManager
from conman.domain.types import Platform, TargetRecord
from conman.exceptions import (
    ChecksumMismatchError,
    IconTypeError,
    TargetNotFoundError,
)
from conman.infrastructure.bundle import AppBundleInstaller
from conman.infrastructure.desktop_entry import DesktopEntryInstaller


class MemoryRepository:
    """Trust repository double serving pre-wrapped payloads."""

    def __init__(self, records: dict[str, bytes]) -> None:
        self.records = records

    async def get_target_by_name(self, name: str) -> TargetRecord:
        if name not in self.records:
            msg = f"no such repository {name}"
            raise TargetNotFoundError(msg, target=name)
        return TargetRecord(name, self.records[name])

    async def list_targets(self) -> list[TargetRecord]:
        return [TargetRecord(n, c) for n, c in sorted(self.records.items())]


@pytest.fixture
def requests_seen() -> list[str]:
    """Paths requested from the icon server."""
    return []


@pytest_asyncio.fixture
async def icon_server(
    icon_bytes: bytes, requests_seen: list[str]
) -> AsyncIterator[LocalServer]:
    """Serve the icon at any path and record every request."""

    async def serve(request: web.Request) -> web.Response:
        requests_seen.append(request.path)
        return web.Response(body=icon_bytes, content_type="image/png")

    app = web.Application()
    app.router.add_get("/{name}", serve)
    async with LocalServer(app) as server:
        yield server


@pytest.fixture
def build_container(
    tmp_path: Path,
) -> Callable[[dict[str, bytes]], ServiceContainer]:
    """Linux service container installing into a temporary home."""

    def factory(records: dict[str, bytes]) -> ServiceContainer:
        container = ServiceContainer(
            ConfigManager(tmp_path / "config"),
            home=tmp_path / "home",
            platform=Platform.LINUX,
        )
        container._repository = MemoryRepository(  # type: ignore[assignment]
            records
        )
        return container

    return factory


@pytest_asyncio.fixture
async def run_install(
    build_container: Callable[[dict[str, bytes]], ServiceContainer],
) -> AsyncIterator[Callable[..., Any]]:
    """Run the full pipeline for one app and close the session after."""
    opened: list[ServiceContainer] = []

    async def run(records: dict[str, bytes], argument: str) -> Any:
        container = build_container(records)
        opened.append(container)
        pipeline = container.create_install_pipeline(pull_image=False)
        return await pipeline.run(argument)

    yield run

    for container in opened:
        await container.cleanup()


def _installed_files(home: Path) -> list[Path]:
    share = home / ".local" / "share"
    if not share.exists():
        return []
    return [path for path in share.rglob("*") if path.is_file()]


class TestInstallFlow:
    """Full pipeline scenarios."""

    @pytest.mark.asyncio
    async def test_spotify_installs_desktop_entry_and_icon(
        self,
        tmp_path: Path,
        icon_server: LocalServer,
        icon_bytes: bytes,
        run_install: Callable[..., Any],
        make_descriptor: Callable[..., dict[str, Any]],
        wrap: Callable[[dict[str, Any]], bytes],
    ) -> None:
        """A verified descriptor yields both files, non-empty."""
        url = str(icon_server.make_url("/spotify.png"))
        records = {"spotify": wrap(make_descriptor(url=url))}

        await run_install(records, "conman://spotify")

        share = tmp_path / "home" / ".local" / "share"
        desktop_file = share / "applications" / "spotify.desktop"
        icon_file = share / "icons" / "spotify.png"
        assert desktop_file.stat().st_size > 0
        assert "Name=Spotify" in desktop_file.read_text(encoding="utf-8")
        assert icon_file.read_bytes() == icon_bytes

    @pytest.mark.asyncio
    async def test_corrupted_digest_leaves_no_files(
        self,
        tmp_path: Path,
        icon_server: LocalServer,
        run_install: Callable[..., Any],
        make_descriptor: Callable[..., dict[str, Any]],
        wrap: Callable[[dict[str, Any]], bytes],
        b64sum: Callable[..., str],
        icon_bytes: bytes,
    ) -> None:
        """A checksum mismatch aborts before anything is written."""
        url = str(icon_server.make_url("/spotify.png"))
        data = make_descriptor(
            url=url, checksum={"sha256": b64sum(icon_bytes + b"!")}
        )

        with pytest.raises(ChecksumMismatchError):
            await run_install({"spotify": wrap(data)}, "spotify")

        assert _installed_files(tmp_path / "home") == []

    @pytest.mark.asyncio
    async def test_disallowed_icon_type_makes_no_request(
        self,
        tmp_path: Path,
        icon_server: LocalServer,
        requests_seen: list[str],
        run_install: Callable[..., Any],
        make_descriptor: Callable[..., dict[str, Any]],
        wrap: Callable[[dict[str, Any]], bytes],
    ) -> None:
        """A .jpg icon fails validation with zero network calls."""
        url = str(icon_server.make_url("/spotify.jpg"))

        with pytest.raises(IconTypeError):
            await run_install(
                {"spotify": wrap(make_descriptor(url=url))}, "spotify"
            )

        assert requests_seen == []
        assert _installed_files(tmp_path / "home") == []

    @pytest.mark.asyncio
    async def test_unknown_app(
        self,
        run_install: Callable[..., Any],
    ) -> None:
        """An app missing from the trust repository is a lookup failure."""
        with pytest.raises(TargetNotFoundError):
            await run_install({}, "spotify")


class TestServiceContainer:
    """Wiring checks for the composition root."""

    def test_linux_installer(self, tmp_path: Path) -> None:
        """Linux gets the desktop entry installer."""
        container = ServiceContainer(
            ConfigManager(tmp_path), home=tmp_path, platform=Platform.LINUX
        )

        installer = container.create_installer()

        assert isinstance(installer, DesktopEntryInstaller)
        assert installer.pulls_image is True

    def test_macos_installer(self, tmp_path: Path) -> None:
        """macOS gets the bundle installer with the configured bound."""
        (tmp_path / "settings.conf").write_text(
            "[network]\nmax_concurrent_conversions = 2\n", encoding="utf-8"
        )
        container = ServiceContainer(
            ConfigManager(tmp_path), home=tmp_path, platform=Platform.MACOS
        )

        installer = container.create_installer()

        assert isinstance(installer, AppBundleInstaller)
        assert installer.pulls_image is False
        assert installer.max_concurrent == 2

    def test_repository_uses_trust_settings(self, tmp_path: Path) -> None:
        """The trust client is built from the [trust] section."""
        (tmp_path / "settings.conf").write_text(
            "[trust]\nserver = https://notary.internal\n"
            f"directory = {tmp_path / 'trust'}\n",
            encoding="utf-8",
        )
        container = ServiceContainer(ConfigManager(tmp_path), home=tmp_path)

        repository = container.repository

        assert repository.base_url.startswith("https://notary.internal/v2/")
        assert repository.metadata_dir.is_relative_to(
            (tmp_path / "trust").resolve()
        )
        assert container.repository is repository

    @pytest.mark.asyncio
    async def test_pull_setting(self, tmp_path: Path) -> None:
        """[install] pull_image decides whether a puller is wired."""
        container = ServiceContainer(
            ConfigManager(tmp_path), home=tmp_path, platform=Platform.LINUX
        )
        try:
            assert container.create_install_pipeline().puller is not None
            pipeline = container.create_install_pipeline(pull_image=False)
            assert pipeline.puller is None
        finally:
            await container.cleanup()

    @pytest.mark.asyncio
    async def test_downloader_timeout_from_settings(
        self, tmp_path: Path
    ) -> None:
        """The icon downloader is bounded by [network] timeout_seconds."""
        (tmp_path / "settings.conf").write_text(
            "[network]\ntimeout_seconds = 3\n", encoding="utf-8"
        )
        container = ServiceContainer(ConfigManager(tmp_path), home=tmp_path)
        try:
            downloader = container.create_downloader()
        finally:
            await container.cleanup()

        assert downloader.timeout is not None
        assert downloader.timeout.sock_connect == 3
        assert downloader.timeout.total == 18
