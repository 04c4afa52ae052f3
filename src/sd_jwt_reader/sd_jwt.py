"""SD-JWT token parsing.

Two serializations are accepted:

- compact: ``<header>.<payload>.<signature>~<disclosure>~...~[<kb-jwt>]``
- general JWS JSON: ``{"protected", "payload", "signature", "disclosures", "kb_jwt"}``

The issuer signature is carried through untouched; verifying it belongs to
the caller.
"""

import copy
import json
import logging
from typing import Any, Optional

from . import encoding
from .digests import collect_digests, validate_unique_digests, validate_unique_disclosures
from .disclosure import Disclosure, decode_disclosure
from .errors import InvalidFormatError, InvalidJwtStructureError, MissingDisclosuresError
from .resolution import get_disclosed_claims

logger = logging.getLogger(__name__)

DISCLOSURE_SEPARATOR = "~"
JWT_SEPARATOR = "."

COMPACT_SERIALIZATION = "compact"
JSON_SERIALIZATION = "json"


class SDJWT:
    """A structurally validated SD-JWT.

    Instances are created with :meth:`parse` and are read-only afterwards.
    """

    def __init__(
        self,
        token: str,
        header: dict[str, Any],
        body: dict[str, Any],
        signature: str,
        disclosures: tuple[Disclosure, ...],
        key_binding_jwt: Optional[str] = None,
        serialization: str = COMPACT_SERIALIZATION,
    ):
        """Initialize from already validated parts.

        Args:
            token: Serialized token the parts came from
            header: Decoded JOSE header
            body: Decoded JWT payload
            signature: Base64url signature, not interpreted
            disclosures: Decoded disclosures in token order
            key_binding_jwt: Raw key binding JWT, if one was attached
            serialization: "compact" or "json"
        """
        self._token = token
        self._header = header
        self._body = body
        self._signature = signature
        self._disclosures = tuple(disclosures)
        self._key_binding_jwt = key_binding_jwt
        self._serialization = serialization

    @classmethod
    def parse(cls, token: str) -> "SDJWT":
        """Parse and validate an SD-JWT in either serialization."""
        return parse_sd_jwt(token)

    @property
    def token(self) -> str:
        """The token as received (compact) or re-serialized (JWS JSON)."""
        return self._token

    @property
    def header(self) -> dict[str, Any]:
        """A copy of the decoded JOSE header."""
        return copy.deepcopy(self._header)

    @property
    def body(self) -> dict[str, Any]:
        """A copy of the decoded payload, digests included."""
        return copy.deepcopy(self._body)

    @property
    def signature(self) -> str:
        return self._signature

    @property
    def disclosures(self) -> tuple[Disclosure, ...]:
        return self._disclosures

    @property
    def key_binding_jwt(self) -> Optional[str]:
        return self._key_binding_jwt

    @property
    def serialization(self) -> str:
        return self._serialization

    def get_disclosed_claims(self) -> dict[str, Any]:
        """Return plaintext claims merged with every disclosed claim."""
        return get_disclosed_claims(self)

    def __repr__(self) -> str:
        return (
            f"SDJWT(serialization={self._serialization!r}, "
            f"disclosures={len(self._disclosures)}, "
            f"key_binding_jwt={self._key_binding_jwt is not None})"
        )


def _looks_like_jwt(segment: str) -> bool:
    return len(segment.split(JWT_SEPARATOR)) == 3


def _build(
    token: str,
    protected: str,
    payload: str,
    signature: str,
    raw_disclosures: list[str],
    key_binding_jwt: Optional[str],
    serialization: str,
) -> SDJWT:
    header = encoding.decode_json_object(protected, "header")
    body = encoding.decode_json_object(payload, "payload")

    validate_unique_disclosures(raw_disclosures)
    disclosures = tuple(decode_disclosure(d) for d in raw_disclosures if d)
    if not disclosures:
        raise MissingDisclosuresError("Token has no specified disclosures")

    digests = collect_digests(body)
    validate_unique_digests(digests)

    logger.debug(
        "Parsed %s SD-JWT with %d disclosures and %d digests",
        serialization,
        len(disclosures),
        len(digests),
    )
    return SDJWT(
        token,
        header,
        body,
        signature,
        disclosures,
        key_binding_jwt=key_binding_jwt,
        serialization=serialization,
    )


def _parse_json(jws: dict[str, Any]) -> SDJWT:
    payload = jws.get("payload")
    protected = jws.get("protected")
    signature = jws.get("signature")
    if not all(isinstance(v, str) for v in (payload, protected, signature)):
        raise InvalidFormatError("Invalid JWS format SD-JWT provided")

    disclosures = jws.get("disclosures")
    if disclosures is None:
        disclosures = []
    if not isinstance(disclosures, list) or not all(isinstance(d, str) for d in disclosures):
        raise InvalidFormatError("JWS disclosures must be an array of strings")

    kb_jwt = jws.get("kb_jwt")
    if kb_jwt is not None and not isinstance(kb_jwt, str):
        raise InvalidFormatError("JWS kb_jwt must be a string")

    serialized = encoding.dumps(
        {
            "payload": payload,
            "protected": protected,
            "signature": signature,
            "disclosures": disclosures,
            "kb_jwt": kb_jwt,
        }
    )
    return _build(
        serialized, protected, payload, signature, disclosures, kb_jwt or None, JSON_SERIALIZATION
    )


def _parse_compact(token: str) -> SDJWT:
    sections = token.split(DISCLOSURE_SEPARATOR)
    if len(sections) < 2:
        raise MissingDisclosuresError("Token has no specified disclosures")

    jwt_parts = sections[0].split(JWT_SEPARATOR)
    if len(jwt_parts) != 3:
        raise InvalidJwtStructureError("Token is not a valid JWT")
    protected, payload, signature = jwt_parts

    raw_disclosures = sections[1:]
    key_binding_jwt = None
    if raw_disclosures[-1] and _looks_like_jwt(raw_disclosures[-1]):
        key_binding_jwt = raw_disclosures.pop()

    return _build(
        token,
        protected,
        payload,
        signature,
        raw_disclosures,
        key_binding_jwt,
        COMPACT_SERIALIZATION,
    )


def parse_sd_jwt(token: str) -> SDJWT:
    """Parse and validate an SD-JWT.

    A token that parses as a JSON object is treated as the general JWS JSON
    serialization; anything else is treated as the compact serialization.

    Args:
        token: Serialized SD-JWT

    Returns:
        The validated token

    Raises:
        SDJWTError: A subclass describing the first problem found
    """
    try:
        jws = json.loads(token)
    except ValueError:
        jws = None

    if isinstance(jws, dict):
        return _parse_json(jws)
    return _parse_compact(token)
