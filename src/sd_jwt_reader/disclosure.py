"""SD-JWT disclosure decoding.

A disclosure is a base64url-encoded JSON array:

- ``[salt, claim_name, claim_value]`` for an object property
- ``[salt, claim_value]`` for an array element

The encoded string is kept exactly as received because the digest embedded in
the token body is computed over it.
"""

import json
from dataclasses import dataclass
from typing import Any, Optional

from . import encoding
from .digests import hash_disclosure
from .errors import InvalidDisclosureEncodingError, InvalidDisclosureStructureError

# Disclosed integers are limited to the signed 64-bit range
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


@dataclass(frozen=True)
class Disclosure:
    """A single decoded disclosure."""

    salt: str
    claim_name: Optional[str]
    claim_value: str
    raw_value: str
    encoded_value: str

    @property
    def is_array_element(self) -> bool:
        """True for two element disclosures that reveal an array element."""
        return self.claim_name is None

    def digest(self, hash_alg: str = "sha-256") -> str:
        """Compute the base64url digest of the encoded disclosure.

        Args:
            hash_alg: Hash algorithm name as used in the _sd_alg claim

        Returns:
            Digest as it appears in _sd arrays and "..." markers
        """
        return hash_disclosure(self.encoded_value, hash_alg)


def _clean_part(part: str) -> str:
    part = part.strip()
    part = part.removeprefix('"').removesuffix('"')
    return part.strip()


def decode_disclosure(encoded: str) -> Disclosure:
    """Decode one base64url disclosure string.

    The array is split on commas rather than parsed as JSON. Everything after
    the second comma is re-joined into the claim value so that object and
    array values survive as text.

    Args:
        encoded: Disclosure exactly as it appears in the token

    Returns:
        The decoded disclosure

    Raises:
        InvalidDisclosureEncodingError: If the string is not base64url UTF-8
        InvalidDisclosureStructureError: If the decoded text is not a two or
            three element array, or the salt is empty
    """
    try:
        decoded = encoding.b64url_decode(encoded).decode("utf-8")
    except ValueError as e:
        raise InvalidDisclosureEncodingError(f"Invalid disclosure encoding: {e}") from e

    if not decoded.startswith("[") or not decoded.endswith("]"):
        raise InvalidDisclosureStructureError("Provided decoded disclosure is not a valid array")

    parts = decoded[1:-1].split(",")
    if len(parts) > 3:
        parts = parts[:2] + [",".join(parts[2:])]
    parts = [_clean_part(p) for p in parts]

    if len(parts) == 2:
        salt, claim_name, claim_value = parts[0], None, parts[1]
    elif len(parts) == 3:
        salt, claim_name, claim_value = parts
    else:
        raise InvalidDisclosureStructureError(
            "Provided decoded disclosure does not have all required parts"
        )

    if not salt:
        raise InvalidDisclosureStructureError("Disclosure salt must not be empty")

    return Disclosure(
        salt=salt,
        claim_name=claim_name,
        claim_value=claim_value,
        raw_value=decoded,
        encoded_value=encoded,
    )


def parse_claim_value(claim_value: str) -> Any:
    """Reinterpret disclosed claim text as its native JSON type.

    Object, array, boolean and integer are tried in that order; JSON null
    is accepted as a missing object and returned as None. Anything else (floats,
    integers outside the signed 64-bit range, plain text) is returned
    unchanged.

    Args:
        claim_value: Literal claim value text from a disclosure

    Returns:
        The parsed value or the original text
    """
    try:
        value = json.loads(claim_value)
    except ValueError:
        return claim_value

    if value is None or isinstance(value, (dict, list, bool)):
        return value
    if isinstance(value, int) and INT64_MIN <= value <= INT64_MAX:
        return value
    return claim_value
