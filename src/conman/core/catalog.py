"""Catalog listing of every application in the trust repository."""

from typing import Any

from conman.core.descriptor import load_descriptor_json
from conman.core.protocols import TargetRepository
from conman.core.unwrap import unwrap_custom_payload
from conman.domain.types import TargetRecord
from conman.logger import get_logger

logger = get_logger(__name__)


def catalog_entry(record: TargetRecord) -> dict[str, str]:
    """Summarize one target as ``{"Name": ..., "URL": <icon url>}``.

    Only the icon URL is read, so entries for platforms other than the
    local one still list fine.

    Raises:
        DescriptorDecodeError: If the payload cannot be unwrapped
        DescriptorValidationError: If it is not a JSON object

    """
    data: dict[str, Any] = load_descriptor_json(
        unwrap_custom_payload(record.custom)
    )
    icon = data.get("icon")
    url = icon.get("url", "") if isinstance(icon, dict) else ""
    return {"Name": record.name, "URL": str(url)}


async def list_catalog(repository: TargetRepository) -> list[dict[str, str]]:
    """List every target of the repository with its icon URL."""
    records = await repository.list_targets()
    logger.debug("Retrieved %d targets", len(records))
    return [catalog_entry(record) for record in records]
