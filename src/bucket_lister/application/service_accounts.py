"""Locate service-account keys in the configured places.

Each lookup returns ``None`` when its place is not configured (empty env
value, missing default file) and raises when it is configured but cannot be
read or parsed. The fallback chains rely on that distinction.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from bucket_lister.config.credentials import CredentialSources
from bucket_lister.domain.credentials import ServiceAccountKey
from bucket_lister.gcp.credentials import load_inline_service_account, load_service_account_file

INLINE_SOURCE = "GCP_SERVICE_ACCOUNT_JSON"
FILE_SOURCE = "GOOGLE_APPLICATION_CREDENTIALS"


@dataclass(frozen=True, slots=True)
class ServiceAccountLocator:
    sources: CredentialSources

    def inline(self) -> ServiceAccountKey | None:
        value = self.sources.service_account_json
        if not value or not value.strip():
            return None
        return load_inline_service_account(value, source=INLINE_SOURCE)

    def env_file(self) -> ServiceAccountKey | None:
        path = self.sources.service_account_file
        if path is None:
            return None
        return load_service_account_file(path)

    def default_file(self) -> ServiceAccountKey | None:
        path = self.sources.default_service_account_path
        if path is None or not path.is_file():
            return None
        return load_service_account_file(path)

    def default_source_name(self) -> str:
        path: Path | None = self.sources.default_service_account_path
        return f"default file {path}" if path is not None else "default file"


__all__ = ["FILE_SOURCE", "INLINE_SOURCE", "ServiceAccountLocator"]
