"""Tests for the CLI runner."""

from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock, patch

import orjson
import pytest

from conman import __version__
from conman.cli.runner import CLIRunner
from conman.domain.types import Platform
from conman.exceptions import TargetNotFoundError


@pytest.fixture
def container() -> Iterator[MagicMock]:
    """Patch the service container the runner builds."""
    instance = MagicMock()
    instance.cleanup = AsyncMock()
    pipeline = MagicMock()
    pipeline.run = AsyncMock(return_value=MagicMock(app_name="spotify"))
    instance.create_install_pipeline.return_value = pipeline

    with patch(
        "conman.cli.runner.ServiceContainer", return_value=instance
    ) as container_cls:
        instance.container_cls = container_cls
        yield instance


class TestCLIRunner:
    """Tests for CLIRunner.run."""

    @pytest.mark.asyncio
    async def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        """--version prints the package version."""
        await CLIRunner().run(["--version"])

        assert capsys.readouterr().out.strip() == __version__

    @pytest.mark.asyncio
    async def test_no_command(self) -> None:
        """Running without a command exits with status 1."""
        with pytest.raises(SystemExit) as exc_info:
            await CLIRunner().run([])

        assert exc_info.value.code == 1

    @pytest.mark.asyncio
    async def test_install_success(
        self, container: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """A successful install prints a confirmation."""
        await CLIRunner().run(["conman://spotify"])

        pipeline = container.create_install_pipeline.return_value
        pipeline.run.assert_awaited_once_with("conman://spotify")
        container.create_install_pipeline.assert_called_once_with(
            pull_image=None
        )
        container.cleanup.assert_awaited_once()
        assert "Installed spotify" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_install_options_reach_container(
        self, container: MagicMock
    ) -> None:
        """--platform and --no-pull configure the services."""
        await CLIRunner().run(
            ["install", "--no-pull", "--platform", "macos", "gimp"]
        )

        _, kwargs = container.container_cls.call_args
        assert kwargs["platform"] is Platform.MACOS
        container.create_install_pipeline.assert_called_once_with(
            pull_image=False
        )

    @pytest.mark.asyncio
    async def test_pipeline_failure_exits_1(
        self, container: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Pipeline errors print one message and exit with status 1."""
        pipeline = container.create_install_pipeline.return_value
        pipeline.run.side_effect = TargetNotFoundError(
            "no such repository gimp", target="gimp"
        )

        with pytest.raises(SystemExit) as exc_info:
            await CLIRunner().run(["gimp"])

        assert exc_info.value.code == 1
        assert "Lookup failed for 'gimp'" in capsys.readouterr().out
        container.cleanup.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_list_json(
        self, container: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """list --json prints the catalog as JSON."""
        entries = [{"Name": "spotify", "URL": "https://x.example/s.png"}]
        with patch(
            "conman.cli.commands.catalog.list_catalog",
            new=AsyncMock(return_value=entries),
        ):
            await CLIRunner().run(["list", "--json"])

        assert orjson.loads(capsys.readouterr().out) == entries

    @pytest.mark.asyncio
    async def test_logger_levels_use_injected_config(
        self, container: MagicMock
    ) -> None:
        """Log levels are read through the runner's config manager."""
        config_manager = MagicMock()

        with patch(
            "conman.cli.runner.update_logger_from_config"
        ) as update_logger:
            await CLIRunner(config_manager).run(["spotify"])

        update_logger.assert_called_once_with(config_manager)
        args, _ = container.container_cls.call_args
        assert args[0] is config_manager
