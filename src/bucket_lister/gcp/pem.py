"""PEM private-key decoding for service-account signing keys."""

from __future__ import annotations

import base64
import binascii
import re

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from bucket_lister.errors import InvalidPrivateKeyError

_PEM_ARMOR = re.compile(r"-----(?:BEGIN|END)[A-Z0-9 ]*-----")
_WHITESPACE = re.compile(r"\s+")


def decode_pem(pem: str) -> bytes:
    """Strip PEM armor and whitespace, then base64-decode the key body.

    Keys copied through environment variables often carry literal ``\\n``
    sequences instead of newlines; those are dropped as well.
    """

    body = _PEM_ARMOR.sub("", pem.replace("\\n", "\n"))
    body = _WHITESPACE.sub("", body)
    if not body:
        raise InvalidPrivateKeyError("private key PEM contains no key material")
    try:
        return base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidPrivateKeyError("private key PEM is not valid base64") from exc


def load_signing_key(pem: str) -> RSAPrivateKey:
    der = decode_pem(pem)
    try:
        key = serialization.load_der_private_key(der, password=None)
    except (ValueError, TypeError) as exc:
        raise InvalidPrivateKeyError("private key could not be imported") from exc
    if not isinstance(key, RSAPrivateKey):
        raise InvalidPrivateKeyError(f"private key must be RSA, got {type(key).__name__}")
    return key


__all__ = ["decode_pem", "load_signing_key"]
