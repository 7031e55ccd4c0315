"""Logging export settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ObservabilitySettings(BaseSettings):
    """Flags controlling where logs are shipped."""

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    enable_cloud_logging: bool = Field(default=False, alias="ENABLE_CLOUD_LOGGING")
    cloud_log_name: str = Field(default="bucket-lister", alias="CLOUD_LOG_NAME")
    logging_gcp_project_id: str | None = Field(default=None, alias="LOGGING_GCP_PROJECT_ID")


__all__ = ["ObservabilitySettings"]
