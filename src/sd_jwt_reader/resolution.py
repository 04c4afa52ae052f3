"""Disclosure resolution: splice disclosed values back into an SD-JWT body."""

import logging
from typing import TYPE_CHECKING, Any

from .digests import (
    HASH_ALGORITHMS,
    SD_ALG_CLAIM,
    SD_CLAIM,
    array_element_digest,
    sd_digests,
)
from .disclosure import Disclosure, parse_claim_value
from .errors import (
    DigestNotFoundError,
    InvalidDisclosureForArrayError,
    InvalidDisclosureForObjectError,
    UnsupportedAlgorithmError,
)

if TYPE_CHECKING:
    from .sd_jwt import SDJWT

logger = logging.getLogger(__name__)

RESERVED_CLAIMS = (SD_CLAIM, SD_ALG_CLAIM)


def _resolve_in_object(claims: dict[str, Any], disclosure: Disclosure, digest: str) -> bool:
    if digest in sd_digests(claims):
        if disclosure.claim_name is None:
            raise InvalidDisclosureForObjectError("Invalid disclosure format for _sd claim")
        claims[disclosure.claim_name] = parse_claim_value(disclosure.claim_value)
        return True

    for key, value in claims.items():
        if key in RESERVED_CLAIMS:
            continue
        if isinstance(value, dict) and _resolve_in_object(value, disclosure, digest):
            return True
        if isinstance(value, list) and _resolve_in_array(value, disclosure, digest):
            return True
    return False


def _resolve_in_array(items: list[Any], disclosure: Disclosure, digest: str) -> bool:
    for i, item in enumerate(items):
        if array_element_digest(item) == digest:
            if disclosure.claim_name is not None:
                raise InvalidDisclosureForArrayError(
                    disclosure.raw_value,
                    digest,
                    "Invalid disclosure format for array element: claim name present",
                )
            # Array elements are spliced in as the literal disclosed text
            items[i] = disclosure.claim_value
            return True
        if isinstance(item, dict) and _resolve_in_object(item, disclosure, digest):
            return True
        if isinstance(item, list) and _resolve_in_array(item, disclosure, digest):
            return True
    return False


def _hash_algorithm(body: dict[str, Any]) -> str:
    sd_alg = body.get(SD_ALG_CLAIM)
    if sd_alg == "none":
        raise UnsupportedAlgorithmError("none is not a valid algorithm")
    if not isinstance(sd_alg, str) or sd_alg not in HASH_ALGORITHMS:
        raise UnsupportedAlgorithmError(f"Unsupported _sd_alg: {sd_alg!r}")
    return sd_alg


def get_disclosed_claims(token: "SDJWT") -> dict[str, Any]:
    """Compute the claims an SD-JWT discloses.

    Every disclosure is hashed with the algorithm named by _sd_alg and the
    result is looked up in _sd arrays and {"...": digest} array elements at
    any depth. Matching object claims are added to the object holding the
    _sd array; matching array elements replace their marker.

    Disclosures are applied in token order over repeated passes, so a
    disclosure nested inside a value revealed by another disclosure resolves
    whichever order they were listed in.

    Args:
        token: Parsed SD-JWT; it is not modified

    Returns:
        Top-level claims with _sd and _sd_alg removed

    Raises:
        UnsupportedAlgorithmError: If _sd_alg is missing, "none" or unknown
        DigestNotFoundError: If a disclosure matches no digest
        InvalidDisclosureForObjectError: If an unnamed disclosure matches an _sd digest
        InvalidDisclosureForArrayError: If a named disclosure matches an array digest
    """
    body = token.body
    hash_alg = _hash_algorithm(body)

    pending = [(d, d.digest(hash_alg)) for d in token.disclosures]
    while pending:
        remaining = []
        for disclosure, digest in pending:
            if _resolve_in_object(body, disclosure, digest):
                logger.debug("Resolved disclosure %s", digest)
            else:
                remaining.append((disclosure, digest))

        if len(remaining) == len(pending):
            disclosure, digest = remaining[0]
            raise DigestNotFoundError(disclosure.raw_value, digest)
        pending = remaining

    return {k: v for k, v in body.items() if k not in RESERVED_CLAIMS}
