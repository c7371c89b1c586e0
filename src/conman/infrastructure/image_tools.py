"""Image conversion through macOS command line tools.

``sips`` resizes the downloaded icon, ``iconutil`` packages an
``.iconset`` directory into an ``.icns`` container.
"""

from pathlib import Path

from conman.exceptions import ToolError
from conman.infrastructure.process import run_tool
from conman.logger import get_logger

logger = get_logger(__name__)


class SipsIconConverter:
    """Resizes images with ``sips -z``."""

    tool = "sips"

    async def resize(self, source: Path, size: int, dest: Path) -> Path:
        """Write ``source`` scaled to ``size`` x ``size`` at ``dest``.

        Raises:
            MissingToolError: If sips is not installed
            ToolError: If sips fails

        """
        pixels = str(size)
        result = await run_tool(
            self.tool, "-z", pixels, pixels, "--out", str(dest), str(source)
        )
        if result.returncode != 0:
            msg = (
                f"sips could not resize {source.name} to {size}px: "
                f"{result.output.strip()}"
            )
            raise ToolError(msg)
        return dest


class IconutilPackager:
    """Builds ``.icns`` containers with ``iconutil -c icns``."""

    tool = "iconutil"

    async def package(self, iconset: Path, dest: Path) -> Path:
        """Package ``iconset`` into ``dest``.

        Raises:
            MissingToolError: If iconutil is not installed
            ToolError: If iconutil fails

        """
        result = await run_tool(
            self.tool, "-c", "icns", "-o", str(dest), str(iconset)
        )
        if result.returncode != 0:
            logger.debug("iconutil output: %s", result.output)
            msg = f"iconutil failed on {iconset.name}: {result.output.strip()}"
            raise ToolError(msg)
        return dest
