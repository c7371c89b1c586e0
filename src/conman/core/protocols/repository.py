"""Trust repository protocol.

The trust service owns signature verification, key rotation and
delegation. conman only consumes verified lookups through this interface.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from conman.domain.types import TargetRecord


@runtime_checkable
class TargetRepository(Protocol):
    """Read-only, verified view of a trust repository."""

    async def get_target_by_name(self, name: str) -> TargetRecord:
        """Look up one verified target.

        Raises:
            TargetNotFoundError: If no such target exists
            TrustServiceError: If the trust service cannot be used

        """
        ...

    async def list_targets(self) -> list[TargetRecord]:
        """List every verified target of the repository.

        Raises:
            TrustServiceError: If the trust service cannot be used

        """
        ...
