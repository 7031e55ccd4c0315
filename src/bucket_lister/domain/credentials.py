"""Credential value objects produced by the resolution chains."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class ServiceAccountKey:
    """Subset of a service-account JSON key needed to mint access tokens."""

    client_email: str
    private_key: str = field(repr=False)
    project_id: str | None = None
    private_key_id: str | None = None
    source: str = "unknown"

    def __post_init__(self) -> None:
        if not self.client_email.strip():
            raise ValueError("client_email must not be empty")
        if not self.private_key.strip():
            raise ValueError("private_key must not be empty")

    @classmethod
    def from_info(cls, info: Mapping[str, Any], *, source: str) -> ServiceAccountKey:
        client_email = info.get("client_email")
        private_key = info.get("private_key")
        if not isinstance(client_email, str) or not isinstance(private_key, str):
            raise ValueError(f"{source} is missing client_email or private_key")
        return cls(
            client_email=client_email,
            private_key=private_key,
            project_id=_optional_str(info.get("project_id")),
            private_key_id=_optional_str(info.get("private_key_id")),
            source=source,
        )


@dataclass(frozen=True, slots=True)
class AccessToken:
    """Opaque OAuth2 bearer token plus the label of the source that produced it."""

    value: str = field(repr=False)
    source: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("access token must not be empty")

    @property
    def authorization_header(self) -> str:
        return f"Bearer {self.value}"


Credential = ServiceAccountKey | AccessToken


def _optional_str(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    return value.strip() or None


__all__ = ["AccessToken", "Credential", "ServiceAccountKey"]
