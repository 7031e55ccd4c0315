"""Service-account JSON loading shared by the resolvers and cloud logging."""

from __future__ import annotations

import base64
import binascii
import json
from pathlib import Path
from typing import Any, cast

from google.oauth2.service_account import Credentials as ServiceAccountCredentials

from bucket_lister.domain.credentials import ServiceAccountKey

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"


def decode_service_account_b64(blob: str, *, source: str) -> str:
    try:
        decoded = base64.b64decode(blob.encode("utf-8"), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"{source} is neither JSON nor valid base64") from exc
    try:
        return decoded.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ValueError(f"{source} must decode to UTF-8 JSON") from exc


def load_service_account_info(serialized: str, *, source: str) -> dict[str, Any]:
    try:
        data = json.loads(serialized)
    except json.JSONDecodeError as exc:
        raise ValueError(f"{source} is not valid JSON") from exc
    if not isinstance(data, dict):
        raise ValueError(f"{source} must be a JSON object")
    return data


def inline_service_account_info(value: str, *, source: str) -> dict[str, Any]:
    """Parse an inline value holding either raw JSON or base64-encoded JSON."""

    stripped = value.strip()
    serialized = stripped if stripped.startswith("{") else decode_service_account_b64(stripped, source=source)
    return load_service_account_info(serialized, source=source)


def file_service_account_info(path: Path) -> dict[str, Any]:
    return load_service_account_info(path.read_text(encoding="utf-8"), source=str(path))


def load_inline_service_account(value: str, *, source: str) -> ServiceAccountKey:
    return ServiceAccountKey.from_info(inline_service_account_info(value, source=source), source=source)


def load_service_account_file(path: Path) -> ServiceAccountKey:
    return ServiceAccountKey.from_info(file_service_account_info(path), source=str(path))


def service_account_credentials(
    info: dict[str, Any],
    *,
    scopes: tuple[str, ...] = (CLOUD_PLATFORM_SCOPE,),
) -> ServiceAccountCredentials:
    return cast(
        ServiceAccountCredentials,
        ServiceAccountCredentials.from_service_account_info(  # type: ignore[no-untyped-call]
            info,
            scopes=scopes,
        ),
    )


__all__ = [
    "CLOUD_PLATFORM_SCOPE",
    "decode_service_account_b64",
    "file_service_account_info",
    "inline_service_account_info",
    "load_inline_service_account",
    "load_service_account_file",
    "load_service_account_info",
    "service_account_credentials",
    "ServiceAccountCredentials",
]
