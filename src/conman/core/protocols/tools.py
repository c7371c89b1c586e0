"""External image tool protocols.

Resizing and icon packaging are delegated to platform tools. Both are
modelled as async capabilities so tests can substitute them, and both
distinguish a missing tool (``MissingToolError``) from a failed run
(``ToolError``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path


@runtime_checkable
class IconConverter(Protocol):
    """Resizes a raster image to an exact square pixel size."""

    async def resize(self, source: Path, size: int, dest: Path) -> Path:
        """Write ``source`` scaled to ``size`` x ``size`` at ``dest``."""
        ...


@runtime_checkable
class IconPackager(Protocol):
    """Packages an icon-set directory into a single icon container."""

    async def package(self, iconset: Path, dest: Path) -> Path:
        """Write the container built from ``iconset`` at ``dest``."""
        ...
