"""RS256 JWT assertions for the OAuth2 JWT-bearer grant.

The assertion identifies the service account (``iss``), requests the
cloud-platform scope and is addressed to the token endpoint (``aud``). It is
valid for exactly one hour from ``iat``; the token endpoint rejects
assertions outside its accepted clock skew, so ``now`` should come from a
reasonably synchronized clock.
"""

from __future__ import annotations

import base64
import json
import time
from dataclasses import dataclass
from typing import Any

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding

from bucket_lister.domain.credentials import ServiceAccountKey
from bucket_lister.gcp.credentials import CLOUD_PLATFORM_SCOPE
from bucket_lister.gcp.pem import load_signing_key

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
ASSERTION_LIFETIME_SECONDS = 3600


def b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(segment: str) -> bytes:
    padded = segment + "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def _encode_json_segment(value: dict[str, Any]) -> str:
    return b64url_encode(json.dumps(value, separators=(",", ":")).encode("utf-8"))


@dataclass(frozen=True, slots=True)
class JwtClaims:
    issuer: str
    scope: str
    audience: str
    issued_at: int
    expiry: int

    def __post_init__(self) -> None:
        if self.expiry - self.issued_at != ASSERTION_LIFETIME_SECONDS:
            raise ValueError(f"expiry must be issued_at + {ASSERTION_LIFETIME_SECONDS}")

    @classmethod
    def for_key(
        cls,
        key: ServiceAccountKey,
        *,
        issued_at: int,
        scope: str = CLOUD_PLATFORM_SCOPE,
        audience: str = GOOGLE_TOKEN_URI,
    ) -> JwtClaims:
        return cls(
            issuer=key.client_email,
            scope=scope,
            audience=audience,
            issued_at=issued_at,
            expiry=issued_at + ASSERTION_LIFETIME_SECONDS,
        )

    def as_payload(self) -> dict[str, Any]:
        return {
            "iss": self.issuer,
            "scope": self.scope,
            "aud": self.audience,
            "iat": self.issued_at,
            "exp": self.expiry,
        }


@dataclass(frozen=True, slots=True)
class SignedAssertion:
    header_segment: str
    claims_segment: str
    signature_segment: str

    @property
    def signing_input(self) -> str:
        return f"{self.header_segment}.{self.claims_segment}"

    @property
    def signature(self) -> bytes:
        return b64url_decode(self.signature_segment)

    def header(self) -> dict[str, Any]:
        return dict(json.loads(b64url_decode(self.header_segment)))

    def claims(self) -> dict[str, Any]:
        return dict(json.loads(b64url_decode(self.claims_segment)))

    def __str__(self) -> str:
        return f"{self.signing_input}.{self.signature_segment}"


def assertion_header(key: ServiceAccountKey) -> dict[str, Any]:
    header: dict[str, Any] = {"alg": "RS256", "typ": "JWT"}
    if key.private_key_id:
        header["kid"] = key.private_key_id
    return header


def build_assertion(
    key: ServiceAccountKey,
    *,
    now: int | None = None,
    audience: str = GOOGLE_TOKEN_URI,
    scope: str = CLOUD_PLATFORM_SCOPE,
) -> SignedAssertion:
    """Build and sign the JWT-bearer assertion for ``key``.

    Raises ``InvalidPrivateKeyError`` when the key's PEM cannot be decoded or
    imported as an RSA key.
    """

    issued_at = int(time.time()) if now is None else now
    claims = JwtClaims.for_key(key, issued_at=issued_at, scope=scope, audience=audience)
    header_segment = _encode_json_segment(assertion_header(key))
    claims_segment = _encode_json_segment(claims.as_payload())
    signing_input = f"{header_segment}.{claims_segment}".encode("ascii")

    signing_key = load_signing_key(key.private_key)
    signature = signing_key.sign(signing_input, padding.PKCS1v15(), hashes.SHA256())

    return SignedAssertion(
        header_segment=header_segment,
        claims_segment=claims_segment,
        signature_segment=b64url_encode(signature),
    )


__all__ = [
    "ASSERTION_LIFETIME_SECONDS",
    "GOOGLE_TOKEN_URI",
    "JwtClaims",
    "SignedAssertion",
    "assertion_header",
    "b64url_decode",
    "b64url_encode",
    "build_assertion",
]
