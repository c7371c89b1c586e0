"""Artifact download with size bound and checksum verification.

The downloader keeps fetched bytes in memory and only returns them once
they passed ``verify_checksums``; callers never see unverified content.
"""

import aiohttp

from conman.core.checksum import verify_checksums
from conman.domain.types import IconDescriptor
from conman.exceptions import (
    DescriptorValidationError,
    DownloadError,
    HTTPStatusError,
    OversizeError,
)
from conman.logger import get_logger

logger = get_logger(__name__)

CHUNK_SIZE = 8192


class ArtifactDownloader:
    """Fetches declared artifacts and verifies them before handing them out."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        timeout: aiohttp.ClientTimeout | None = None,
        enforce_size_limit: bool = True,  # noqa: FBT001, FBT002
    ) -> None:
        """Initialize downloader with HTTP session.

        Args:
            session: aiohttp session for downloads
            timeout: Per-request timeout; when None the session's
                timeout applies
            enforce_size_limit: Reject content larger than the declared size

        """
        self.session = session
        self.timeout = timeout
        self.enforce_size_limit = enforce_size_limit

    async def fetch(self, icon: IconDescriptor) -> bytes:
        """Download an icon and verify it against its checksums.

        Args:
            icon: Validated icon descriptor

        Returns:
            Verified icon bytes

        Raises:
            DescriptorValidationError: If the size limit is enforced and the
                icon declares no size
            HTTPStatusError: If the server answers with a non-2xx status
            OversizeError: If Content-Length exceeds the declared size
            DownloadError: If the transport fails or times out
            ChecksumError: If the content fails verification

        """
        if self.enforce_size_limit and icon.size == 0:
            msg = (
                "icon declares size 0; a positive size is required while "
                "the download size limit is enforced"
            )
            raise DescriptorValidationError(msg)

        logger.debug("Downloading icon: %s", icon.url)
        request_kwargs: dict[str, aiohttp.ClientTimeout] = {}
        if self.timeout is not None:
            request_kwargs["timeout"] = self.timeout
        try:
            async with self.session.get(
                icon.url, **request_kwargs
            ) as response:
                if not 200 <= response.status < 300:  # noqa: PLR2004
                    msg = (
                        f"could not download icon at {icon.url} "
                        f"(HTTP {response.status})"
                    )
                    raise HTTPStatusError(msg)
                body = await self._read_body(response, icon)
        except (aiohttp.ClientError, TimeoutError) as e:
            msg = f"could not download icon at {icon.url}: {e}"
            raise DownloadError(msg) from e

        logger.debug("   Received: %s bytes", f"{len(body):,}")
        verify_checksums(body, icon.checksums)
        return body

    async def _read_body(
        self, response: aiohttp.ClientResponse, icon: IconDescriptor
    ) -> bytes:
        if not self.enforce_size_limit:
            return await response.read()

        declared = response.content_length
        if declared is not None and declared > icon.size:
            msg = (
                f"icon size too big: server declares {declared} bytes, "
                f"descriptor allows {icon.size}"
            )
            raise OversizeError(msg)

        chunks: list[bytes] = []
        remaining = icon.size
        while remaining > 0:
            chunk = await response.content.read(min(CHUNK_SIZE, remaining))
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)
