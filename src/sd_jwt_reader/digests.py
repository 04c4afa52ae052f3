"""Digest collection, hashing and uniqueness checks for SD-JWT bodies."""

import hashlib
from collections import Counter
from collections.abc import Iterable
from typing import Any

from . import encoding
from .errors import (
    DuplicateDigestError,
    DuplicateDisclosureError,
    InvalidSDClaimError,
    UnsupportedAlgorithmError,
)

SD_CLAIM = "_sd"
SD_ALG_CLAIM = "_sd_alg"
ARRAY_DIGEST_KEY = "..."

# Only sha-256 is accepted; "none" is rejected like any unknown name
HASH_ALGORITHMS = {
    "sha-256": hashlib.sha256,
}


def hash_disclosure(encoded_disclosure: str, hash_alg: str = "sha-256") -> str:
    """Hash an encoded disclosure.

    Args:
        encoded_disclosure: Base64url disclosure string as found in the token
        hash_alg: Hash algorithm name from the _sd_alg claim

    Returns:
        Base64url-encoded digest

    Raises:
        UnsupportedAlgorithmError: If the algorithm is not supported
    """
    try:
        hash_func = HASH_ALGORITHMS[hash_alg]
    except (KeyError, TypeError):
        raise UnsupportedAlgorithmError(f"Unsupported hash algorithm: {hash_alg!r}") from None
    return encoding.b64url_encode(hash_func(encoded_disclosure.encode("ascii")).digest())


def array_element_digest(element: Any) -> Any:
    """Return the digest of a {"...": digest} array element marker, else None.

    Raises:
        InvalidSDClaimError: If the marker digest is not a string
    """
    if isinstance(element, dict) and len(element) == 1 and ARRAY_DIGEST_KEY in element:
        digest = element[ARRAY_DIGEST_KEY]
        if not isinstance(digest, str):
            raise InvalidSDClaimError("Array element digest must be a string")
        return digest
    return None


def sd_digests(claims: dict[str, Any]) -> list[str]:
    """Return the digests listed in the _sd member of a claims object.

    Raises:
        InvalidSDClaimError: If _sd is not an array of strings
    """
    if SD_CLAIM not in claims:
        return []
    digests = claims[SD_CLAIM]
    if not isinstance(digests, list) or not all(isinstance(d, str) for d in digests):
        raise InvalidSDClaimError("_sd claim must be an array of digest strings")
    return digests


def collect_digests(body: Any) -> list[str]:
    """Recursively find every digest referenced by a decoded body.

    Digests come from _sd arrays in objects and from {"...": digest} elements
    in arrays, at any depth.

    Args:
        body: Decoded JSON value

    Returns:
        Digests in traversal order, one entry per occurrence
    """
    digests: list[str] = []

    def _traverse(obj: Any) -> None:
        if isinstance(obj, dict):
            digests.extend(sd_digests(obj))
            for key, value in obj.items():
                if key != SD_CLAIM:
                    _traverse(value)
        elif isinstance(obj, list):
            for item in obj:
                digest = array_element_digest(item)
                if digest is not None:
                    digests.append(digest)
                else:
                    _traverse(item)

    _traverse(body)
    return digests


def validate_unique_digests(digests: Iterable[str]) -> None:
    """Reject a body that references the same digest more than once.

    Raises:
        DuplicateDigestError: If any digest repeats
    """
    for digest, count in Counter(digests).items():
        if count > 1:
            raise DuplicateDigestError(f"Duplicate digest found: {digest}")


def validate_unique_disclosures(disclosures: Iterable[str]) -> None:
    """Reject repeated disclosure strings, ignoring empty segments.

    Raises:
        DuplicateDisclosureError: If any disclosure repeats
    """
    for disclosure, count in Counter(d for d in disclosures if d).items():
        if count > 1:
            raise DuplicateDisclosureError(f"Duplicate disclosure found: {disclosure}")
