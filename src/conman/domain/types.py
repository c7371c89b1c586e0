"""Domain types for business logic.

Pure domain types used by the resolution pipeline, without any IO or
infrastructure dependencies. Construction validates: an instance that
exists is an instance that passed its structural checks.
"""

import base64
import binascii
import configparser
import platform
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import PurePosixPath
from typing import Any, TypedDict
from urllib.parse import urlsplit, urlunsplit

from conman.constants import ALLOWED_ICON_TYPES, ALLOWED_URL_SCHEMES
from conman.exceptions import DescriptorValidationError, IconTypeError


class Platform(Enum):
    """Installer platforms."""

    LINUX = "linux"
    MACOS = "macos"

    @classmethod
    def current(cls) -> "Platform":
        """Detect current platform.

        Anything that is not macOS gets desktop entries.
        """
        if platform.system().lower() == "darwin":
            return cls.MACOS
        return cls.LINUX


@dataclass(frozen=True)
class TargetRecord:
    """Trust-service target as returned by a verified lookup.

    Attributes:
        name: Target name (the application name)
        custom: Raw JSON bytes of the target's opaque custom field

    """

    name: str
    custom: bytes


def _decode_digest(algorithm: str, value: Any) -> bytes:
    """Decode one base64 digest from the wire format."""
    if not isinstance(value, str) or not value:
        msg = f"checksum for {algorithm} must be a non-empty base64 string"
        raise DescriptorValidationError(msg)
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        msg = f"checksum for {algorithm} is not valid base64"
        raise DescriptorValidationError(msg) from e


def _normalize_url(raw_url: Any) -> str:
    """Normalize an icon URL via parse and re-serialize."""
    if not isinstance(raw_url, str) or not raw_url.strip():
        raise DescriptorValidationError("icon url must be a non-empty string")

    parts = urlsplit(raw_url.strip())
    if parts.scheme.lower() not in ALLOWED_URL_SCHEMES or not parts.netloc:
        msg = f"invalid icon url: {raw_url}"
        raise DescriptorValidationError(msg)
    return urlunsplit(parts)


def is_safe_file_stem(name: str) -> bool:
    """Check that a name can be used as a file name inside a directory."""
    return (
        bool(name)
        and name not in {".", ".."}
        and "/" not in name
        and "\\" not in name
        and "\x00" not in name
    )


def icon_type_from_url(url: str) -> str:
    """Derive the icon type from the URL path extension.

    Args:
        url: Icon URL

    Returns:
        Lower-cased extension without the dot

    Raises:
        IconTypeError: If the extension is not in the allow-list

    """
    extension = PurePosixPath(urlsplit(url).path).suffix.lower().lstrip(".")
    if extension not in ALLOWED_ICON_TYPES:
        msg = f"invalid icon type: {extension or '(none)'}"
        raise IconTypeError(msg)
    return extension


@dataclass(frozen=True)
class IconDescriptor:
    """Validated reference to a remote icon artifact.

    Attributes:
        url: Normalized icon URL
        checksums: Mapping of digest algorithm to expected digest bytes
        size: Declared size in bytes
        type: Icon type derived from the URL extension
        filename: Installed file stem, assigned by the descriptor parser

    """

    url: str
    checksums: Mapping[str, bytes]
    size: int
    type: str
    filename: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "IconDescriptor":
        """Build an icon descriptor from its JSON object.

        Args:
            data: Decoded ``icon`` object with ``url``, ``checksum``, ``size``

        Returns:
            Validated IconDescriptor without a filename

        Raises:
            DescriptorValidationError: On any structural violation
            IconTypeError: If the URL extension is not allowed

        """
        if not isinstance(data, dict):
            raise DescriptorValidationError("icon must be an object")

        raw_checksums = data.get("checksum")
        if not isinstance(raw_checksums, dict) or not raw_checksums:
            raise DescriptorValidationError(
                "invalid icon checksum information"
            )
        checksums = {
            str(algorithm).lower(): _decode_digest(algorithm, value)
            for algorithm, value in raw_checksums.items()
        }

        size = data.get("size", 0)
        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            msg = f"invalid icon size: {size!r}"
            raise DescriptorValidationError(msg)

        url = _normalize_url(data.get("url"))
        return cls(
            url=url,
            checksums=checksums,
            size=size,
            type=icon_type_from_url(url),
        )

    def with_filename(self, filename: str) -> "IconDescriptor":
        """Return a copy carrying the installed file stem.

        Raises:
            DescriptorValidationError: If the filename is empty

        """
        filename = filename.strip()
        if not filename:
            raise DescriptorValidationError("invalid icon name: (empty)")
        if not is_safe_file_stem(filename):
            msg = f"invalid icon name {filename}"
            raise DescriptorValidationError(msg)
        return replace(self, filename=filename)

    @property
    def installed_name(self) -> str:
        """File name the icon is written under."""
        return f"{self.filename}.{self.type}"


@dataclass(frozen=True)
class AppDescriptor:
    """Verified, typed application metadata.

    Attributes:
        app_name: Name the descriptor was requested with
        icon: Validated icon descriptor with its filename set
        mime_types: MIME types the application handles
        desktop: Parsed Desktop Entry block, when the descriptor has one
        script: Literal launch script, when the descriptor has one
        command: Declared launch command, when the descriptor has one

    """

    app_name: str
    icon: IconDescriptor
    mime_types: tuple[str, ...] = ()
    desktop: configparser.ConfigParser | None = field(
        default=None, compare=False
    )
    script: str | None = None
    command: str | None = None


# =============================================================================
# Configuration Types
# =============================================================================


class NetworkConfig(TypedDict):
    """Network configuration options."""

    timeout_seconds: int
    max_concurrent_conversions: int


class TrustConfig(TypedDict):
    """Trust service configuration options."""

    server: str
    directory: str
    image: str


class InstallConfig(TypedDict):
    """Install behaviour options."""

    enforce_icon_size: bool
    pull_image: bool


class GlobalConfig(TypedDict):
    """Complete global configuration."""

    config_version: str
    log_level: str
    console_log_level: str
    network: NetworkConfig
    trust: TrustConfig
    install: InstallConfig
