"""Google API endpoint settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from bucket_lister.gcp.jwt_assertion import GOOGLE_TOKEN_URI
from bucket_lister.infrastructure.storage.client import STORAGE_BASE_URL


class GcpApiSettings(BaseSettings):
    """Token and storage endpoints plus the per-call HTTP deadline."""

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    token_uri: str = Field(default=GOOGLE_TOKEN_URI, alias="GCP_TOKEN_URI")
    storage_base_url: str = Field(default=STORAGE_BASE_URL, alias="GCP_STORAGE_BASE_URL")
    http_timeout_seconds: float = Field(default=30.0, alias="GCP_HTTP_TIMEOUT_SECONDS", gt=0)


__all__ = ["GcpApiSettings"]
