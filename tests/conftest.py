"""Pytest configuration and shared fixtures for SD-JWT tests."""

import json
from typing import Any, Callable, Optional

import pytest
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, utils
from cryptography.hazmat.primitives.asymmetric.ec import (
    EllipticCurvePrivateKey,
    EllipticCurvePublicKey,
)

from sd_jwt_reader.digests import hash_disclosure
from sd_jwt_reader.encoding import b64url_decode, b64url_encode


@pytest.fixture(scope="session")
def ec_keypair() -> tuple[EllipticCurvePrivateKey, EllipticCurvePublicKey]:
    """Generate an EC P-256 keypair for signing test tokens."""
    private_key = ec.generate_private_key(ec.SECP256R1())
    public_key = private_key.public_key()
    return private_key, public_key


def es256_sign(private_key: EllipticCurvePrivateKey, signing_input: bytes) -> str:
    """Sign with ES256 and return the JWS signature (raw r || s, base64url)."""
    der_signature = private_key.sign(signing_input, ec.ECDSA(hashes.SHA256()))
    r, s = utils.decode_dss_signature(der_signature)
    return b64url_encode(r.to_bytes(32, "big") + s.to_bytes(32, "big"))


def es256_verify(public_key: EllipticCurvePublicKey, signing_input: bytes, signature: bytes) -> None:
    """Verify a raw r || s ES256 signature, raising InvalidSignature on failure."""
    r = int.from_bytes(signature[:32], "big")
    s = int.from_bytes(signature[32:], "big")
    public_key.verify(
        utils.encode_dss_signature(r, s), signing_input, ec.ECDSA(hashes.SHA256())
    )


def encode_segment(value: Any) -> str:
    """JSON-encode a value and wrap it in base64url."""
    return b64url_encode(json.dumps(value).encode("utf-8"))


@pytest.fixture
def make_disclosure() -> Callable[..., str]:
    """Build an encoded disclosure from its array elements."""

    def _make(*elements: Any) -> str:
        return encode_segment(list(elements))

    return _make


@pytest.fixture
def make_segment() -> Callable[[Any], str]:
    """Encode any JSON value as a base64url segment."""
    return encode_segment


@pytest.fixture
def digest_of() -> Callable[[str], str]:
    """Compute the sha-256 digest of an encoded disclosure."""
    return hash_disclosure


@pytest.fixture
def issue_sd_jwt(ec_keypair) -> Callable[..., str]:
    """Return a function that signs a body and serializes an SD-JWT."""
    private_key, _ = ec_keypair

    def _issue(
        body: dict[str, Any],
        disclosures: list[str],
        header: Optional[dict[str, Any]] = None,
        kb_jwt: Optional[str] = None,
        serialization: str = "compact",
    ) -> str:
        protected = encode_segment(header or {"alg": "ES256", "typ": "vc+sd-jwt"})
        payload = encode_segment(body)
        signature = es256_sign(private_key, f"{protected}.{payload}".encode("ascii"))

        if serialization == "json":
            jws: dict[str, Any] = {
                "protected": protected,
                "payload": payload,
                "signature": signature,
                "disclosures": disclosures,
            }
            if kb_jwt is not None:
                jws["kb_jwt"] = kb_jwt
            return json.dumps(jws)

        return "~".join([f"{protected}.{payload}.{signature}", *disclosures, kb_jwt or ""])

    return _issue


@pytest.fixture
def verify_issuer_signature(ec_keypair) -> Callable[[str, str], None]:
    """Check an ES256 signature over a compact JWT, as a relying party would."""
    _, public_key = ec_keypair

    def _verify(jwt: str, signature: str) -> None:
        signing_input = jwt.rsplit(".", 1)[0].encode("ascii")
        es256_verify(public_key, signing_input, b64url_decode(signature))

    return _verify


@pytest.fixture
def person_disclosures(make_disclosure) -> dict[str, str]:
    """Encoded disclosures for the person credential, keyed by what they reveal."""
    return {
        "given_name": make_disclosure("2GLC42sKQveCfGfryNRN9w", "given_name", "John"),
        "family_name": make_disclosure("eluV5Og3gSNII8EYnsxA_A", "family_name", "Doe"),
        "age": make_disclosure("6Ij7tM-a5iVPGboS5tmvVA", "age", 42),
        "email_verified": make_disclosure("eI8ZWm9QnKPpNPeNenHdhQ", "email_verified", True),
        "street_address": make_disclosure("Qg_O64zqAxe412a108iroA", "street_address", "123 Main St"),
        "nationality_us": make_disclosure("lklxF5jMYlGTPUovMNIvCA", "US"),
        "nationality_de": make_disclosure("nPuoQnkRFq3BIeAm7AnXFA", "DE"),
    }


@pytest.fixture
def person_body(person_disclosures, digest_of) -> dict[str, Any]:
    """Issuer-signed payload referencing every person disclosure."""
    d = {name: digest_of(encoded) for name, encoded in person_disclosures.items()}
    return {
        "iss": "https://issuer.example.com",
        "iat": 1683000000,
        "_sd": [d["given_name"], d["family_name"], d["age"], d["email_verified"]],
        "address": {
            "_sd": [d["street_address"]],
            "locality": "Anytown",
            "country": "US",
        },
        "nationalities": [{"...": d["nationality_us"]}, {"...": d["nationality_de"]}],
        "_sd_alg": "sha-256",
    }


@pytest.fixture
def person_token(issue_sd_jwt, person_body, person_disclosures) -> str:
    """Compact SD-JWT carrying every person disclosure."""
    return issue_sd_jwt(person_body, list(person_disclosures.values()))
