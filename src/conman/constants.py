"""Centralized constants module for conman.

This module serves as the single source of truth for shared constants
across the conman codebase. Constants are organized by logical categories
and use typing.Final annotations to ensure immutability.

Usage:
    from conman.constants import CONFIG_VERSION
"""

from typing import Final

# =============================================================================
# Configuration Constants
# =============================================================================

CONFIG_VERSION: Final[str] = "1.0.0"

CONFIG_FILE_NAME: Final[str] = "settings.conf"
CONFIG_DIR_NAME: Final[str] = "conman"
DEFAULT_CONFIG_SUBDIR: Final[str] = ".config"

# Environment overrides (used by the test suite to isolate user dirs)
ENV_CONFIG_DIR: Final[str] = "CONMAN_CONFIG_DIR"
ENV_LOG_DIR: Final[str] = "CONMAN_LOG_DIR"

DEFAULT_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_CONSOLE_LOG_LEVEL: Final[str] = "WARNING"
DEFAULT_TIMEOUT_SECONDS: Final[int] = 10
DEFAULT_MAX_CONCURRENT_CONVERSIONS: Final[int] = 4

SECTION_DEFAULT: Final[str] = "DEFAULT"
SECTION_NETWORK: Final[str] = "network"
SECTION_TRUST: Final[str] = "trust"
SECTION_INSTALL: Final[str] = "install"

KEY_CONFIG_VERSION: Final[str] = "config_version"
KEY_LOG_LEVEL: Final[str] = "log_level"
KEY_CONSOLE_LOG_LEVEL: Final[str] = "console_log_level"

# =============================================================================
# Trust Service Constants
# =============================================================================

# Image repository (GUN) holding every conman application as a tag
CONMAN_IMAGE: Final[str] = "docker.io/conman/apps"
TRUST_SERVER: Final[str] = "https://notary.docker.io"
TRUST_DIR_REL_HOME: Final[str] = ".docker/trust"

# URI scheme used when conman is registered as a URL handler
URI_SCHEME_PREFIX: Final[str] = "conman://"

# The trust service stores the descriptor as a quoted base64 string of a
# quoted base64 string. Fixed protocol detail, not a tunable.
CUSTOM_PAYLOAD_LAYERS: Final[int] = 2

# =============================================================================
# Descriptor Constants
# =============================================================================

DESKTOP_SECTION: Final[str] = "Desktop Entry"
DESKTOP_KEY_NAME: Final[str] = "Name"
DESKTOP_KEY_ICON: Final[str] = "Icon"
DESKTOP_KEY_MIME_TYPE: Final[str] = "MimeType"

ALLOWED_ICON_TYPES: Final[tuple[str, ...]] = ("png",)
ALLOWED_URL_SCHEMES: Final[tuple[str, ...]] = ("http", "https")

SUPPORTED_HASH_ALGORITHMS: Final[tuple[str, ...]] = ("sha256", "sha512")

# =============================================================================
# Install Location Constants
# =============================================================================

DESKTOP_APPLICATIONS_SUBPATH: Final[tuple[str, ...]] = (
    ".local",
    "share",
    "applications",
)
DESKTOP_ICONS_SUBPATH: Final[tuple[str, ...]] = (".local", "share", "icons")
DESKTOP_FILE_SUFFIX: Final[str] = ".desktop"

BUNDLE_APPLICATIONS_DIR: Final[str] = "Applications"
BUNDLE_ICON_FILE: Final[str] = "Icon.icns"
BUNDLE_MIN_OS_VERSION: Final[str] = "10.11.0"
BUNDLE_SIGNATURE: Final[str] = "????"
BUNDLE_PACKAGE_TYPE: Final[str] = "APPL"
BUNDLE_INFO_DICTIONARY_VERSION: Final[str] = "6.0"

ICONSET_SIZES: Final[tuple[int, ...]] = (16, 32, 64, 128, 256, 512)
ICONSET_DENSITIES: Final[tuple[int, ...]] = (1, 2)

EXECUTABLE_MODE: Final[int] = 0o755
DIRECTORY_MODE: Final[int] = 0o755

# =============================================================================
# Logging Constants
# =============================================================================

LOG_ROTATION_THRESHOLD_BYTES: Final[int] = 10 * 1024 * 1024
LOG_BACKUP_COUNT: Final[int] = 5
LOG_FILE_NAME: Final[str] = "conman.log"

LOG_CONSOLE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
LOG_CONSOLE_DATE_FORMAT: Final[str] = "%H:%M:%S"
LOG_FILE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "[%(funcName)s:%(lineno)d] - %(message)s"
)
LOG_FILE_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

LOG_COLORS: Final[dict[str, str]] = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
    "RESET": "\033[0m",
}
