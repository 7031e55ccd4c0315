import json
import logging
import sys

from bucket_lister.observability.logging import (
    CloudJsonSanitizer,
    ExtrasFormatter,
    build_log_config,
    cloud_logging_credentials,
)


def _record(msg: str, *, level: int = logging.INFO, exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="bucket_lister.credentials",
        level=level,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


def test_formatter_emits_json_payload_for_data_in_cloud_run(monkeypatch) -> None:
    monkeypatch.setenv("K_SERVICE", "bucket-lister")
    formatter = ExtrasFormatter("%(levelname)s %(name)s: %(message)s")

    record = _record("credential resolved")
    record.data = {"source": "GCP_SERVICE_ACCOUNT_JSON", "key": b"secret"}

    payload = json.loads(formatter.format(record))

    assert payload["message"].startswith("credential resolved | data=")
    assert payload["severity"] == "INFO"
    assert payload["logger"] == "bucket_lister.credentials"
    assert payload["data"]["source"] == "GCP_SERVICE_ACCOUNT_JSON"
    assert payload["data"]["key"] == "<bytes len=6>"


def test_formatter_emits_exception_payload_in_kubernetes(monkeypatch) -> None:
    monkeypatch.setenv("KUBERNETES_SERVICE_HOST", "10.0.0.1")
    formatter = ExtrasFormatter("%(levelname)s %(name)s: %(message)s")

    try:
        raise ValueError("boom")
    except ValueError:
        exc_info = sys.exc_info()

    record = _record("bucket listing failed", level=logging.ERROR, exc_info=exc_info)
    record.data = {"error_type": "ValueError"}

    payload = json.loads(formatter.format(record))

    assert payload["severity"] == "ERROR"
    assert payload["data"]["error_type"] == "ValueError"
    assert "ValueError: boom" in payload["exception"]


def test_formatter_appends_data_outside_managed_runtimes() -> None:
    formatter = ExtrasFormatter("%(levelname)s %(name)s: %(message)s")

    record = _record("credential source failed, trying next")
    record.data = {"source": "CLOUD_ACCESS_TOKEN"}

    rendered = formatter.format(record)

    assert rendered == (
        'INFO bucket_lister.credentials: credential source failed, trying next'
        ' | data={"source":"CLOUD_ACCESS_TOKEN"}'
    )


def test_cloud_json_sanitizer_injects_data_into_json_fields() -> None:
    sanitizer = CloudJsonSanitizer()
    record = _record("listed buckets")
    record.data = {"count": 3, "payload": b"hello"}

    assert sanitizer.filter(record) is True
    assert record.json_fields["data"] == {"count": 3, "payload": "<bytes len=5>"}


def test_log_config_keeps_service_loggers_and_console_handler() -> None:
    config = build_log_config()

    assert config["disable_existing_loggers"] is False
    assert config["root"]["handlers"] == ["console"]
    assert "bucket_lister.credentials" in config["loggers"]
    assert config["loggers"]["httpx"]["propagate"] is False


def test_cloud_logging_credentials_come_from_inline_service_account(service_account_info) -> None:
    credentials = cloud_logging_credentials(json.dumps(service_account_info()))

    assert credentials is not None
    assert credentials.service_account_email == "lister@demo-project.iam.gserviceaccount.com"


def test_cloud_logging_credentials_default_to_ambient_without_inline_key() -> None:
    assert cloud_logging_credentials(None) is None
    assert cloud_logging_credentials("  ") is None


def test_malformed_inline_key_falls_back_to_ambient_credentials(caplog) -> None:
    caplog.set_level(logging.WARNING, logger="bucket_lister.logging")

    assert cloud_logging_credentials("{not json") is None

    warning = next(record for record in caplog.records if record.name == "bucket_lister.logging")
    assert "GCP_SERVICE_ACCOUNT_JSON is not valid JSON" in warning.data["error"]
