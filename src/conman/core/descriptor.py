"""Descriptor parsing and validation.

Turns raw descriptor JSON into an ``AppDescriptor``. Two shapes exist:

* desktop shape: ``desktop`` holds a Desktop Entry block whose ``Name``
  must match the requested app and whose ``Icon`` names the icon file;
* script shape: ``script`` or ``cmd`` holds the launch command. There is
  no embedded name, and the icon is stored under the app name.

Parsing is pure; nothing here touches the network or the filesystem.
"""

import configparser
from typing import Any

import orjson

from conman.constants import (
    DESKTOP_KEY_ICON,
    DESKTOP_KEY_NAME,
    DESKTOP_SECTION,
)
from conman.domain.types import AppDescriptor, IconDescriptor
from conman.exceptions import DescriptorValidationError, NameMismatchError
from conman.logger import get_logger

logger = get_logger(__name__)


def new_desktop_parser() -> configparser.ConfigParser:
    """Create a parser for Desktop Entry syntax.

    Keys keep their case, values are taken literally (``$HOME`` and ``%U``
    are common in Exec lines) and repeated keys do not abort parsing.
    """
    parser = configparser.ConfigParser(
        interpolation=None,
        strict=False,
        delimiters=("=",),
        comment_prefixes=("#",),
        empty_lines_in_values=False,
    )
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    return parser


def parse_desktop_block(text: str) -> configparser.ConfigParser:
    """Parse a Desktop Entry block.

    Raises:
        DescriptorValidationError: If the block has a syntax error or no
            ``[Desktop Entry]`` section

    """
    parser = new_desktop_parser()
    try:
        parser.read_string(text)
    except configparser.Error as e:
        msg = f"malformed desktop entry: {e}"
        raise DescriptorValidationError(msg) from e

    if not parser.has_section(DESKTOP_SECTION):
        msg = f"desktop entry has no [{DESKTOP_SECTION}] section"
        raise DescriptorValidationError(msg)
    return parser


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        msg = f"{key} must be a string"
        raise DescriptorValidationError(msg)
    return value or None


def _mime_types(data: dict[str, Any]) -> tuple[str, ...]:
    value = data.get("mimetypes") or []
    if not isinstance(value, list) or not all(
        isinstance(item, str) for item in value
    ):
        raise DescriptorValidationError("mimetypes must be a list of strings")
    return tuple(value)


def load_descriptor_json(raw: bytes) -> dict[str, Any]:
    """Deserialize raw descriptor JSON into its top-level object.

    Raises:
        DescriptorValidationError: If the JSON is invalid or not an object

    """
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        msg = f"descriptor is not valid JSON: {e}"
        raise DescriptorValidationError(msg) from e

    if not isinstance(data, dict):
        raise DescriptorValidationError("descriptor must be a JSON object")
    return data


def parse_descriptor(raw: bytes, app_name: str) -> AppDescriptor:
    """Parse and validate a raw descriptor for ``app_name``.

    Args:
        raw: Unwrapped descriptor JSON
        app_name: Name the descriptor was requested with

    Returns:
        Validated AppDescriptor

    Raises:
        NameMismatchError: If the embedded name differs from ``app_name``
        IconTypeError: If the icon type is not allowed
        DescriptorValidationError: For any other invariant violation

    """
    data = load_descriptor_json(raw)

    desktop_text = _optional_str(data, "desktop")
    script = _optional_str(data, "script")
    command = _optional_str(data, "cmd")
    mime_types = _mime_types(data)
    icon = IconDescriptor.from_dict(data.get("icon"))

    desktop = None
    if desktop_text is not None:
        desktop = parse_desktop_block(desktop_text)
        section = desktop[DESKTOP_SECTION]

        embedded_name = section.get(DESKTOP_KEY_NAME)
        if (
            embedded_name is not None
            and embedded_name.strip().casefold() != app_name.casefold()
        ):
            msg = f"invalid application name {embedded_name}"
            raise NameMismatchError(msg, target=app_name)

        icon = icon.with_filename(section.get(DESKTOP_KEY_ICON, ""))
    elif script is not None or command is not None:
        icon = icon.with_filename(app_name)
    else:
        raise DescriptorValidationError(
            "descriptor carries neither a desktop entry nor a launch script",
            target=app_name,
        )

    logger.debug(
        "Parsed descriptor for %s (icon %s)", app_name, icon.installed_name
    )
    return AppDescriptor(
        app_name=app_name,
        icon=icon,
        mime_types=mime_types,
        desktop=desktop,
        script=script,
        command=command,
    )
