"""SD-JWT Reader: parse SD-JWTs and compute their disclosed claims."""

# Hide module imports
from . import digests, disclosure, errors, resolution, sd_jwt
from .digests import (
    collect_digests,
    hash_disclosure,
)
from .disclosure import (
    Disclosure,
    decode_disclosure,
    parse_claim_value,
)
from .errors import (
    DecodeError,
    DigestNotFoundError,
    DuplicateDigestError,
    DuplicateDisclosureError,
    InvalidDisclosureEncodingError,
    InvalidDisclosureForArrayError,
    InvalidDisclosureForObjectError,
    InvalidDisclosureStructureError,
    InvalidFormatError,
    InvalidJwtStructureError,
    InvalidSDClaimError,
    MissingDisclosuresError,
    SDJWTError,
    UnsupportedAlgorithmError,
)
from .resolution import get_disclosed_claims
from .sd_jwt import SDJWT, parse_sd_jwt

del digests, disclosure, errors, resolution, sd_jwt

__version__ = "0.1.0"


__all__ = [
    "__version__",
    # Parsing
    "SDJWT",
    "parse_sd_jwt",
    # Disclosures
    "Disclosure",
    "decode_disclosure",
    "parse_claim_value",
    # Digests
    "collect_digests",
    "hash_disclosure",
    # Resolution
    "get_disclosed_claims",
    # Errors
    "SDJWTError",
    "InvalidFormatError",
    "MissingDisclosuresError",
    "InvalidJwtStructureError",
    "InvalidDisclosureEncodingError",
    "InvalidDisclosureStructureError",
    "DuplicateDisclosureError",
    "DuplicateDigestError",
    "UnsupportedAlgorithmError",
    "DigestNotFoundError",
    "InvalidDisclosureForObjectError",
    "InvalidDisclosureForArrayError",
    "InvalidSDClaimError",
    "DecodeError",
]
