"""Pytest configuration and fixtures for conman tests."""

import base64
import hashlib
import logging
import os
import tempfile
from collections.abc import Callable
from typing import Any

import orjson
import pytest

# Must run before any conman import creates the root logger
os.environ.setdefault(
    "CONMAN_LOG_DIR", tempfile.mkdtemp(prefix="conman-test-logs-")
)
os.environ.setdefault(
    "CONMAN_CONFIG_DIR", tempfile.mkdtemp(prefix="conman-test-config-")
)

ICON_BYTES = b"\x89PNG\r\n\x1a\n" + b"conman-test-icon" * 8

SPOTIFY_DESKTOP = """[Desktop Entry]
Name=Spotify
Comment=Music for everyone
Exec=docker run --rm -e DISPLAY=$DISPLAY conman/apps:spotify %U
Icon=spotify
Type=Application
Categories=Audio;Music;
"""


def b64_digest(data: bytes, algorithm: str = "sha256") -> str:
    """Base64 digest the way descriptors carry it."""
    return base64.b64encode(hashlib.new(algorithm, data).digest()).decode()


def wrap_custom(raw: bytes) -> bytes:
    """Encode descriptor JSON the way the trust service stores it."""
    inner = b'"' + base64.b64encode(raw) + b'"'
    return b'"' + base64.b64encode(inner) + b'"'


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Enable log propagation so caplog sees conman records."""
    original_propagation = {}
    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith("conman"):
            logger = logging.getLogger(name)
            original_propagation[name] = logger.propagate
            logger.propagate = True

    yield

    for name, propagate_value in original_propagation.items():
        logging.getLogger(name).propagate = propagate_value


@pytest.fixture
def icon_bytes() -> bytes:
    """Raw icon content served by test servers."""
    return ICON_BYTES


@pytest.fixture
def make_descriptor() -> Callable[..., dict[str, Any]]:
    """Factory for descriptor dictionaries in the wire format.

    Returns:
        Callable taking overrides for ``url``, ``desktop``, ``checksum``,
        ``size`` and extra top-level keys.

    """

    def factory(
        url: str = "https://icons.example.com/spotify.png",
        desktop: str | None = SPOTIFY_DESKTOP,
        checksum: dict[str, str] | None = None,
        size: int | None = None,
        content: bytes = ICON_BYTES,
        **extra: Any,
    ) -> dict[str, Any]:
        data: dict[str, Any] = {
            "icon": {
                "url": url,
                "checksum": (
                    checksum
                    if checksum is not None
                    else {"sha256": b64_digest(content)}
                ),
                "size": len(content) if size is None else size,
            },
        }
        if desktop is not None:
            data["desktop"] = desktop
        data.update(extra)
        return data

    return factory


@pytest.fixture
def wrap() -> Callable[[dict[str, Any]], bytes]:
    """Serialize a descriptor dict and wrap it as a custom payload."""

    def encode(data: dict[str, Any]) -> bytes:
        return wrap_custom(orjson.dumps(data))

    return encode


@pytest.fixture
def b64sum() -> Callable[..., str]:
    """Base64 digest helper for building checksum maps."""
    return b64_digest
