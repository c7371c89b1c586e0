"""Protocols the core pipeline depends on.

Concrete implementations live in ``conman.infrastructure``; tests use
fakes that satisfy the same protocols.
"""

from conman.core.protocols.image import ImagePuller
from conman.core.protocols.installer import Installer, install_descriptor
from conman.core.protocols.repository import TargetRepository
from conman.core.protocols.tools import IconConverter, IconPackager

__all__ = [
    "IconConverter",
    "IconPackager",
    "ImagePuller",
    "Installer",
    "TargetRepository",
    "install_descriptor",
]
