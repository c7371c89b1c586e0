"""Trust repository client backed by python-tuf.

Targets are looked up through ``tuf.ngclient.Updater``, which performs
all signature and expiry checks against the local trust metadata cache.
The repository is read-only and used anonymously.

The updater is synchronous, so every call runs in a worker thread and is
bounded by an explicit timeout.

The server must publish TUF 1.0 metadata (versioned ``<n>.root.json``
files) and a trusted ``root.json`` must already sit in the local cache.
Notary v1 servers, ``notary.docker.io`` among them, serve an older
metadata format that the updater rejects with ``TrustServiceError``;
point ``[trust] server`` at a TUF 1.0 mirror of the repository instead.
"""

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import Any

import orjson
from tuf.api import exceptions as tuf_exceptions
from tuf.api.metadata import Metadata, TargetFile
from tuf.ngclient import Updater

from conman.domain.types import TargetRecord
from conman.exceptions import TargetNotFoundError, TrustServiceError
from conman.logger import get_logger

logger = get_logger(__name__)

UpdaterFactory = Callable[[str, str], Updater]

_TUF_ERRORS = (
    tuf_exceptions.RepositoryError,
    tuf_exceptions.DownloadError,
    OSError,
    ValueError,
)


def metadata_base_url(server: str, image: str) -> str:
    """Build the TUF metadata URL the trust server exposes for an image."""
    return f"{server.rstrip('/')}/v2/{image}/_trust/tuf/"


def metadata_dir(trust_dir: Path, image: str) -> Path:
    """Get the local metadata cache directory for an image."""
    return trust_dir / "tuf" / image / "metadata"


def _default_updater_factory(meta_dir: str, base_url: str) -> Updater:
    return Updater(metadata_dir=meta_dir, metadata_base_url=base_url)


def target_to_record(name: str, target: TargetFile) -> TargetRecord:
    """Convert a verified TUF target into a TargetRecord.

    The custom value is re-serialized as raw JSON, so a string value keeps
    its enclosing quotes for the unwrapper to strip.
    """
    custom: Any = target.unrecognized_fields.get("custom")
    payload = b"" if custom is None else orjson.dumps(custom)
    return TargetRecord(name=name, custom=payload)


class TufTargetRepository:
    """Verified lookups against a trust server's TUF repository."""

    def __init__(
        self,
        server: str,
        image: str,
        trust_dir: Path,
        timeout_seconds: float,
        updater_factory: UpdaterFactory | None = None,
    ) -> None:
        """Initialize the repository client.

        Args:
            server: Trust server base URL
            image: Image repository (GUN) the targets belong to
            trust_dir: Local trust metadata directory
            timeout_seconds: Upper bound for every lookup
            updater_factory: Builds the TUF updater; injectable for tests

        """
        self.image = image
        self.base_url = metadata_base_url(server, image)
        self.metadata_dir = metadata_dir(trust_dir, image)
        self.timeout_seconds = timeout_seconds
        self._updater_factory = updater_factory or _default_updater_factory

    def _refreshed_updater(self) -> Updater:
        updater = self._updater_factory(str(self.metadata_dir), self.base_url)
        updater.refresh()
        return updater

    def _lookup(self, name: str) -> TargetRecord:
        updater = self._refreshed_updater()
        target = updater.get_targetinfo(name)
        if target is None:
            msg = f"no such repository {name}"
            raise TargetNotFoundError(msg, target=name)
        return target_to_record(name, target)

    def _list(self) -> list[TargetRecord]:
        self._refreshed_updater()
        targets_file = self.metadata_dir / "targets.json"
        metadata = Metadata.from_file(str(targets_file))
        return [
            target_to_record(name, target)
            for name, target in sorted(metadata.signed.targets.items())
        ]

    async def _run(self, func: Callable[..., Any], *args: Any) -> Any:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(func, *args), timeout=self.timeout_seconds
            )
        except TimeoutError as e:
            msg = (
                f"trust service {self.base_url} did not answer within "
                f"{self.timeout_seconds}s"
            )
            raise TrustServiceError(msg) from e
        except _TUF_ERRORS as e:
            logger.debug("Trust lookup failed: %s", e, exc_info=True)
            msg = f"unable to use trust repository {self.image}: {e}"
            raise TrustServiceError(msg) from e

    async def get_target_by_name(self, name: str) -> TargetRecord:
        """Look up one verified target by name."""
        logger.debug("Looking up %s in %s", name, self.base_url)
        return await self._run(self._lookup, name)

    async def list_targets(self) -> list[TargetRecord]:
        """List every target of the top-level targets role."""
        return await self._run(self._list)
