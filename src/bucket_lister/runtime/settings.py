"""Configuration helpers for service runtime wiring."""

from __future__ import annotations

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from bucket_lister.config.credentials import CredentialSettings
from bucket_lister.config.gcp_api import GcpApiSettings
from bucket_lister.config.observability import ObservabilitySettings


class Settings(BaseSettings):
    """Service configuration resolved from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
    )

    # --- Server ---
    listen_host: str = Field(default="0.0.0.0", alias="BUCKET_LISTER_HOST")  # noqa: S104
    port: int = Field(default=8000, alias="BUCKET_LISTER_PORT")

    # --- Component settings ---
    credentials: CredentialSettings = Field(default_factory=CredentialSettings)
    gcp_api: GcpApiSettings = Field(default_factory=GcpApiSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @property
    def logging_gcp_project(self) -> str | None:
        return self.observability.logging_gcp_project_id or self.credentials.gcp_project_id

    # --- Loader ---
    @classmethod
    def load(cls) -> Settings:
        instance = cls()
        logger = logging.getLogger("bucket_lister.settings")
        logger.info("settings loaded: %r", instance)
        return instance


__all__ = ["Settings"]
