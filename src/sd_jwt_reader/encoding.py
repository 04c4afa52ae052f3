"""Base64url and JSON utilities module.

This module provides the single interface for the encodings used by SD-JWT:
unpadded base64url (RFC 7515 section 2) and JSON objects carried inside it.
"""

import base64
import binascii
import json
import re
from typing import Any

from .errors import DecodeError

_B64URL_ALPHABET = re.compile(r"^[A-Za-z0-9_-]*$")


def b64url_decode(data: str) -> bytes:
    """Decode unpadded base64url text.

    Args:
        data: Base64url string without padding

    Returns:
        The decoded bytes

    Raises:
        ValueError: If the text contains characters outside the base64url
            alphabet, carries padding, or has an impossible length
    """
    if not _B64URL_ALPHABET.match(data):
        raise ValueError("Invalid base64url characters")
    if len(data) % 4 == 1:
        raise ValueError("Invalid base64url length")
    try:
        return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))
    except binascii.Error as e:
        raise ValueError(f"Invalid base64url data: {e}") from e


def b64url_encode(data: bytes) -> str:
    """Encode bytes as unpadded base64url text."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def decode_json_object(segment: str, name: str = "segment") -> dict[str, Any]:
    """Decode a base64url segment holding a JSON object.

    Args:
        segment: Base64url-encoded JSON text
        name: Segment name used in error messages (e.g. "header")

    Returns:
        The decoded JSON object

    Raises:
        DecodeError: If the segment is not base64url, not UTF-8 JSON, or not
            a JSON object
    """
    try:
        value = json.loads(b64url_decode(segment).decode("utf-8"))
    except ValueError as e:
        # json.JSONDecodeError and UnicodeDecodeError are both ValueErrors
        raise DecodeError(f"Failed to decode {name}: {e}") from e

    if not isinstance(value, dict):
        raise DecodeError(f"Decoded {name} is not a JSON object")
    return value


def dumps(value: Any) -> str:
    """Serialize a value to compact JSON text."""
    return json.dumps(value, separators=(",", ":"))
