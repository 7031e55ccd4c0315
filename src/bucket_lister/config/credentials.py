"""Credential discovery settings."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SERVICE_ACCOUNT_PATH = Path("service-account.json")


@dataclass(frozen=True, slots=True)
class CredentialSources:
    """Explicit snapshot of every place the resolvers may look at."""

    service_account_json: str | None = None
    service_account_file: Path | None = None
    cloud_access_token: str | None = None
    project_id: str | None = None
    default_service_account_path: Path | None = DEFAULT_SERVICE_ACCOUNT_PATH
    strict: bool = False


class CredentialSettings(BaseSettings):
    """Where to look for service-account keys, tokens and the project id."""

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    gcp_service_account_json: SecretStr = Field(
        default_factory=lambda: SecretStr(""), alias="GCP_SERVICE_ACCOUNT_JSON"
    )
    google_application_credentials: str | None = Field(
        default=None, alias="GOOGLE_APPLICATION_CREDENTIALS"
    )
    cloud_access_token: SecretStr = Field(
        default_factory=lambda: SecretStr(""), alias="CLOUD_ACCESS_TOKEN"
    )
    gcp_project_id: str | None = Field(default=None, alias="GCP_PROJECT_ID")
    default_service_account_path: str = Field(
        default=str(DEFAULT_SERVICE_ACCOUNT_PATH), alias="DEFAULT_SERVICE_ACCOUNT_PATH"
    )
    credentials_strict: bool = Field(default=False, alias="CREDENTIALS_STRICT")
    gcloud_binary: str = Field(default="gcloud", alias="GCLOUD_BINARY")
    gcloud_timeout_seconds: float = Field(default=30.0, alias="GCLOUD_TIMEOUT_SECONDS", gt=0)

    @property
    def gcp_service_account_json_value(self) -> str:
        return self.gcp_service_account_json.get_secret_value()

    def sources(self) -> CredentialSources:
        file_path = (self.google_application_credentials or "").strip()
        default_path = self.default_service_account_path.strip()
        return CredentialSources(
            service_account_json=self.gcp_service_account_json_value or None,
            service_account_file=Path(file_path).expanduser() if file_path else None,
            cloud_access_token=self.cloud_access_token.get_secret_value() or None,
            project_id=self.gcp_project_id,
            default_service_account_path=Path(default_path).expanduser() if default_path else None,
            strict=self.credentials_strict,
        )


__all__ = ["CredentialSettings", "CredentialSources", "DEFAULT_SERVICE_ACCOUNT_PATH"]
