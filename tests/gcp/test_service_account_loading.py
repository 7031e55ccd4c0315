from __future__ import annotations

import base64
import json

import pytest

from bucket_lister.gcp.credentials import (
    inline_service_account_info,
    load_inline_service_account,
    load_service_account_file,
    service_account_credentials,
)


def test_inline_raw_json_is_parsed(service_account_info) -> None:
    info = service_account_info()

    key = load_inline_service_account(json.dumps(info), source="GCP_SERVICE_ACCOUNT_JSON")

    assert key.client_email == info["client_email"]
    assert key.private_key == info["private_key"]
    assert key.project_id == "demo-project"
    assert key.private_key_id == "key-1"
    assert key.source == "GCP_SERVICE_ACCOUNT_JSON"


def test_inline_base64_json_is_parsed(service_account_info) -> None:
    info = service_account_info()
    encoded = base64.b64encode(json.dumps(info).encode("utf-8")).decode("ascii")

    assert inline_service_account_info(encoded, source="inline") == info


@pytest.mark.parametrize(
    ("value", "message"),
    [
        ("{not json", "is not valid JSON"),
        ("definitely not base64!", "neither JSON nor valid base64"),
        (base64.b64encode(b"[1, 2]").decode("ascii"), "must be a JSON object"),
    ],
)
def test_inline_invalid_values_raise(value: str, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        inline_service_account_info(value, source="inline")


def test_missing_private_key_raises(service_account_info) -> None:
    info = service_account_info()
    del info["private_key"]

    with pytest.raises(ValueError, match="missing client_email or private_key"):
        load_inline_service_account(json.dumps(info), source="inline")


def test_file_key_is_labelled_with_its_path(service_account_info, write_service_account) -> None:
    path = write_service_account("key.json", service_account_info(project_id=None, private_key_id=None))

    key = load_service_account_file(path)

    assert key.source == str(path)
    assert key.project_id is None
    assert key.private_key_id is None


def test_private_key_is_hidden_from_repr(service_account_info) -> None:
    key = load_inline_service_account(json.dumps(service_account_info()), source="inline")

    assert "PRIVATE KEY" not in repr(key)


def test_service_account_credentials_use_cloud_platform_scope(service_account_info) -> None:
    credentials = service_account_credentials(service_account_info())

    assert credentials.service_account_email == "lister@demo-project.iam.gserviceaccount.com"
    assert list(credentials.scopes) == ["https://www.googleapis.com/auth/cloud-platform"]
