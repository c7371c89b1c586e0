"""Unwrapping of the trust service's custom payload.

The trust metadata store keeps a descriptor as a JSON string holding the
base64 of another quoted base64 string. Reversing that takes exactly
``CUSTOM_PAYLOAD_LAYERS`` rounds of trim-then-decode.
"""

import base64
import binascii

import orjson

from conman.constants import CUSTOM_PAYLOAD_LAYERS
from conman.exceptions import DescriptorDecodeError
from conman.logger import get_logger

logger = get_logger(__name__)

_NUL = b"\x00"
_QUOTE = b'"'


def _trim(data: bytes) -> bytes:
    """Strip NUL padding, then one level of enclosing quotes."""
    data = data.strip(_NUL)
    if data.startswith(_QUOTE):
        data = data[1:]
    if data.endswith(_QUOTE):
        data = data[:-1]
    return data


def _is_wrapped_layer(document: object) -> bool:
    """Check whether a decoded JSON string is itself one more layer.

    A string whose content is strict base64 of a JSON document means the
    payload was nested deeper than expected.
    """
    if not isinstance(document, str) or not document:
        return False
    try:
        orjson.loads(base64.b64decode(document, validate=True))
    except (binascii.Error, ValueError):
        return False
    return True


def unwrap_custom_payload(payload: bytes) -> bytes:
    """Recover the raw descriptor JSON from a target's custom field.

    Args:
        payload: Custom field bytes as returned by the trust lookup

    Returns:
        Raw descriptor JSON bytes, any JSON value

    Raises:
        DescriptorDecodeError: If any layer is not valid base64, or the
            result is not JSON or still holds another layer

    """
    if not payload.strip(_NUL + _QUOTE):
        raise DescriptorDecodeError("custom payload is empty")

    result = payload
    for layer in range(1, CUSTOM_PAYLOAD_LAYERS + 1):
        try:
            result = base64.b64decode(_trim(result), validate=True)
        except (binascii.Error, ValueError) as e:
            msg = f"custom payload layer {layer} is not valid base64"
            raise DescriptorDecodeError(msg) from e
        logger.debug("Decoded custom payload layer %d", layer)

    try:
        document = orjson.loads(result)
    except orjson.JSONDecodeError as e:
        raise DescriptorDecodeError("unexpected payload layering") from e
    if _is_wrapped_layer(document):
        raise DescriptorDecodeError("unexpected payload layering")
    return result
