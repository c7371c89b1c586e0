"""Platform installer protocol.

Both installer variants consume the same validated ``AppDescriptor``
and run the same strictly ordered, non-retryable sequence:

    check -> write_config -> write_icon -> finalize

``check`` runs before any download so a descriptor the platform cannot
install is rejected without network traffic. There is no rollback; a
failure partway through leaves whatever was already written.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from conman.domain.types import AppDescriptor


@runtime_checkable
class Installer(Protocol):
    """Capability set of a platform installer."""

    name: str
    pulls_image: bool

    def check(self, descriptor: AppDescriptor) -> None:
        """Reject descriptors this platform cannot install.

        Raises:
            DescriptorValidationError: If required fields are missing

        """
        ...

    async def write_icon(
        self, descriptor: AppDescriptor, icon_bytes: bytes
    ) -> None:
        """Install the verified icon."""
        ...

    async def write_config(self, descriptor: AppDescriptor) -> None:
        """Write launcher metadata (desktop file or bundle plist)."""
        ...

    async def finalize(self, descriptor: AppDescriptor) -> None:
        """Run the closing step (launch script, desktop database)."""
        ...


async def install_descriptor(
    installer: Installer, descriptor: AppDescriptor, icon_bytes: bytes
) -> None:
    """Run an installer's write steps in their fixed order.

    Args:
        installer: Platform installer
        descriptor: Validated descriptor that passed ``installer.check``
        icon_bytes: Checksum-verified icon content

    """
    await installer.write_config(descriptor)
    await installer.write_icon(descriptor, icon_bytes)
    await installer.finalize(descriptor)
