"""Container image pull protocol."""

from typing import Protocol


class ImagePuller(Protocol):
    """Fetches the application's container image."""

    async def pull(self, app_name: str) -> None:
        """Pull the image of an application with content trust enforced.

        Raises:
            ImagePullError: If the image could not be pulled
            MissingToolError: If the container tool is not installed

        """
        ...
