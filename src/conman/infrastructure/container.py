"""Trusted container image pull.

The image is pulled with Docker Content Trust enforced, so Docker itself
refuses unsigned or tampered images before any descriptor is resolved.
"""

from conman.exceptions import ImagePullError
from conman.infrastructure.process import run_tool
from conman.logger import get_logger

logger = get_logger(__name__)

CONTENT_TRUST_ENV = {"DOCKER_CONTENT_TRUST": "1"}


class ContainerImagePuller:
    """Pulls ``<image>:<app>`` through the docker CLI."""

    def __init__(self, image: str, tool: str = "docker") -> None:
        self.image = image
        self.tool = tool

    def reference(self, app_name: str) -> str:
        """Image reference for an application."""
        return f"{self.image}:{app_name}"

    async def pull(self, app_name: str) -> None:
        """Pull the application's image with content trust enabled.

        Raises:
            MissingToolError: If docker is not installed
            ImagePullError: If the pull fails

        """
        reference = self.reference(app_name)
        logger.info("Attempting to pull Docker image %s", reference)
        result = await run_tool(
            self.tool, "pull", reference, env=CONTENT_TRUST_ENV, capture=False
        )
        if result.returncode != 0:
            msg = f"docker pull {reference} exited with {result.returncode}"
            raise ImagePullError(msg, target=app_name)
