from __future__ import annotations

import json
import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

_CREDENTIAL_ENV = (
    "GCP_SERVICE_ACCOUNT_JSON",
    "GOOGLE_APPLICATION_CREDENTIALS",
    "CLOUD_ACCESS_TOKEN",
    "GCP_PROJECT_ID",
    "DEFAULT_SERVICE_ACCOUNT_PATH",
    "CREDENTIALS_STRICT",
    "GCLOUD_BINARY",
    "GCLOUD_TIMEOUT_SECONDS",
    "GCP_TOKEN_URI",
    "GCP_STORAGE_BASE_URL",
    "GCP_HTTP_TIMEOUT_SECONDS",
    "BUCKET_LISTER_HOST",
    "BUCKET_LISTER_PORT",
    "ENABLE_CLOUD_LOGGING",
    "LOGGING_GCP_PROJECT_ID",
    "K_SERVICE",
    "KUBERNETES_SERVICE_HOST",
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch, tmp_path: Path) -> None:
    # Keep the developer's own credentials, .env and service-account.json out of the tests.
    for name in _CREDENTIAL_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(rsa_private_key: rsa.RSAPrivateKey) -> str:
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture(scope="session")
def public_key_pem(rsa_private_key: rsa.RSAPrivateKey) -> str:
    return rsa_private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")


@pytest.fixture
def service_account_info(private_key_pem: str) -> Callable[..., dict[str, Any]]:
    def factory(
        *,
        client_email: str = "lister@demo-project.iam.gserviceaccount.com",
        project_id: str | None = "demo-project",
        private_key_id: str | None = "key-1",
    ) -> dict[str, Any]:
        info: dict[str, Any] = {
            "type": "service_account",
            "client_email": client_email,
            "private_key": private_key_pem,
            "client_id": "1234567890",
            "token_uri": "https://oauth2.googleapis.com/token",
        }
        if project_id is not None:
            info["project_id"] = project_id
        if private_key_id is not None:
            info["private_key_id"] = private_key_id
        return info

    return factory


@pytest.fixture
def write_service_account(tmp_path: Path) -> Callable[[str, dict[str, Any]], Path]:
    def write(name: str, info: dict[str, Any]) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(info), encoding="utf-8")
        return path

    return write


class RecordingRunner:
    """subprocess.run stand-in answering gcloud subcommands from a table."""

    def __init__(self, outputs: dict[tuple[str, ...], str | BaseException] | None = None) -> None:
        self.outputs = outputs or {}
        self.calls: list[list[str]] = []
        self.kwargs: list[dict[str, Any]] = []

    def __call__(self, command: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        self.calls.append(list(command))
        self.kwargs.append(kwargs)
        outcome = self.outputs.get(tuple(command[1:]))
        if outcome is None:
            raise subprocess.CalledProcessError(1, command, output="", stderr="ERROR: not configured")
        if isinstance(outcome, BaseException):
            raise outcome
        return subprocess.CompletedProcess(command, 0, stdout=outcome, stderr="")


@pytest.fixture
def gcloud_runner() -> Callable[..., RecordingRunner]:
    def factory(outputs: dict[tuple[str, ...], str | BaseException] | None = None) -> RecordingRunner:
        return RecordingRunner(outputs)

    return factory
