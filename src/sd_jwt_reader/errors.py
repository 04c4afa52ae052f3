"""Exceptions raised while parsing and disclosing SD-JWTs."""

from typing import Optional


class SDJWTError(ValueError):
    """Base class for every SD-JWT parsing or disclosure failure."""


class InvalidFormatError(SDJWTError):
    """JWS JSON serialization is missing required members."""


class MissingDisclosuresError(SDJWTError):
    """Token carries no disclosures."""


class InvalidJwtStructureError(SDJWTError):
    """JWT part does not have exactly three dot-separated segments."""


class InvalidDisclosureEncodingError(SDJWTError):
    """Disclosure is not valid unpadded base64url."""


class InvalidDisclosureStructureError(SDJWTError):
    """Decoded disclosure is not a two or three element array."""


class DuplicateDisclosureError(SDJWTError):
    """The same disclosure appears more than once."""


class DuplicateDigestError(SDJWTError):
    """The same digest is referenced more than once in the body."""


class UnsupportedAlgorithmError(SDJWTError):
    """The _sd_alg claim names a hash algorithm that is not supported."""


class InvalidSDClaimError(SDJWTError):
    """An _sd array or array element digest marker is malformed."""


class InvalidDisclosureForObjectError(SDJWTError):
    """A disclosure without a claim name matched an _sd digest."""


class DecodeError(SDJWTError):
    """Header or payload is not base64url-encoded JSON."""


class DigestNotFoundError(SDJWTError):
    """A disclosure's digest is not referenced anywhere in the body."""

    def __init__(self, raw_value: str, digest: str, message: Optional[str] = None):
        """Initialize with the unmatched disclosure.

        Args:
            raw_value: Decoded disclosure text
            digest: Digest computed for the disclosure
            message: Optional override for the error message
        """
        self.raw_value = raw_value
        self.digest = digest
        super().__init__(message or f"No matching digest found: {raw_value} encoded: {digest}")


class InvalidDisclosureForArrayError(DigestNotFoundError):
    """A disclosure with a claim name matched an array element digest.

    Only _sd arrays can hold a named disclosure, so this is also a
    DigestNotFoundError.
    """
