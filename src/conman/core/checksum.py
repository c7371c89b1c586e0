"""Checksum verification for downloaded artifacts.

This is the only gate between bytes fetched from the network and bytes
written to disk: nothing is installed unless ``verify_checksums`` passes.
"""

import hashlib
import hmac
from collections.abc import Mapping

from conman.constants import SUPPORTED_HASH_ALGORITHMS
from conman.exceptions import (
    ChecksumError,
    ChecksumMismatchError,
    UnsupportedAlgorithmError,
)
from conman.logger import get_logger

logger = get_logger(__name__)


def compute_digest(data: bytes, algorithm: str) -> bytes:
    """Compute the raw digest of ``data``.

    Args:
        data: Content to hash
        algorithm: Digest algorithm name (e.g. "sha256")

    Returns:
        Raw digest bytes

    Raises:
        UnsupportedAlgorithmError: If the algorithm is not supported

    """
    name = algorithm.lower()
    if name not in SUPPORTED_HASH_ALGORITHMS:
        msg = f"unsupported digest algorithm: {algorithm}"
        raise UnsupportedAlgorithmError(msg)
    return hashlib.new(name, data).digest()


def verify_checksums(data: bytes, checksums: Mapping[str, bytes]) -> None:
    """Verify ``data`` against every expected digest.

    Args:
        data: Content to verify
        checksums: Mapping of algorithm name to expected digest bytes

    Raises:
        ChecksumError: If no checksums are given
        UnsupportedAlgorithmError: If any algorithm is not supported
        ChecksumMismatchError: If any digest differs

    """
    if not checksums:
        raise ChecksumError("no checksums to verify against")

    for algorithm, expected in checksums.items():
        actual = compute_digest(data, algorithm)
        if not hmac.compare_digest(actual, expected):
            logger.error("%s verification FAILED", algorithm.upper())
            logger.debug("   Expected: %s", expected.hex())
            logger.debug("   Actual:   %s", actual.hex())
            msg = f"{algorithm} mismatch"
            raise ChecksumMismatchError(msg)
        logger.debug("%s verification passed", algorithm.upper())
