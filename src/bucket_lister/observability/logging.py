"""Logging setup: console formatter, optional Cloud Logging handler, dictConfig builder."""

from __future__ import annotations

import json
import logging
import os
import time
import traceback
import types
from collections.abc import Mapping
from dataclasses import asdict, is_dataclass
from logging.config import dictConfig
from typing import Any

from google.cloud import logging as gcp_logging
from opentelemetry import trace

from bucket_lister.gcp.credentials import (
    ServiceAccountCredentials,
    inline_service_account_info,
    service_account_credentials,
)

ROOT_LEVEL_ENV = "LOG_LEVEL"
ROOT_LEVEL_DEFAULT = "INFO"

_SERVICE_LOGGERS: dict[str, dict[str, Any]] = {
    "bucket_lister.credentials": {"level": "INFO"},
    "bucket_lister.project": {"level": "INFO"},
    "bucket_lister.http": {"level": "INFO"},
}


def _level(env_var: str, default: str) -> str:
    return os.getenv(env_var, default).upper()


def _should_emit_json_payload() -> bool:
    # Cloud Run and Kubernetes parse JSON log lines into structured payloads.
    return bool(os.getenv("K_SERVICE") or os.getenv("KUBERNETES_SERVICE_HOST"))


def _compact_json(value: Any, *, limit: int = 512) -> str:
    encoded = json.dumps(value, sort_keys=True, separators=(",", ":"))
    if len(encoded) <= limit:
        return encoded
    return encoded[:limit] + "... (truncated)"


def _structured_payload(record: logging.LogRecord) -> dict[str, Any]:
    record_data = record.__dict__.get("data")

    message = record.getMessage()
    sanitized_data: Any | None = None
    if record_data:
        sanitized_data = _sanitize_for_json(record_data)
        message = f"{message} | data={_compact_json(sanitized_data)}"

    payload: dict[str, Any] = {
        "message": message,
        "severity": record.levelname,
        "logger": record.name,
        "timestamp": (
            f"{time.strftime('%Y-%m-%dT%H:%M:%S', time.gmtime(record.created))}"
            f".{int(record.msecs):03d}Z"
        ),
    }
    if record.exc_info:
        payload["exception"] = "".join(traceback.format_exception(*record.exc_info)).rstrip("\n")
    if sanitized_data is not None:
        payload["data"] = sanitized_data

    json_fields = record.__dict__.get("json_fields")
    if isinstance(json_fields, Mapping):
        for key, value in _sanitize_for_json(json_fields).items():
            payload.setdefault(key, value)
    return payload


class ExtrasFormatter(logging.Formatter):
    """Append structured `data` payloads when present."""

    def format(self, record: logging.LogRecord) -> str:
        if _should_emit_json_payload():
            return json.dumps(_structured_payload(record), sort_keys=True, separators=(",", ":"))

        formatted = super().format(record)
        record_data = record.__dict__.get("data")
        if record_data:
            try:
                encoded = json.dumps(record_data, sort_keys=True, separators=(",", ":"))
            except TypeError:
                encoded = str(record_data)
            return f"{formatted} | data={encoded}"
        return formatted


class CloudJsonSanitizer(logging.Filter):
    """Make `data` JSON-serializable and expose it through json_fields for Cloud Logging."""

    def filter(self, record: logging.LogRecord) -> bool:
        record_dict = record.__dict__
        if "data" not in record_dict:
            return True
        sanitized = _sanitize_for_json(record_dict["data"])
        record_dict["data"] = sanitized
        json_fields = record_dict.get("json_fields")
        fields = dict(json_fields) if isinstance(json_fields, Mapping) else {}
        fields.setdefault("data", sanitized)
        record_dict["json_fields"] = fields
        return True


class OtelContextLogFilter(logging.Filter):
    """Attach the active OpenTelemetry trace/span ids to json_fields."""

    def __init__(self, *, gcp_project_id: str | None = None) -> None:
        super().__init__()
        self._gcp_project_id = gcp_project_id.strip() if gcp_project_id else None

    def filter(self, record: logging.LogRecord) -> bool:
        span_context = trace.get_current_span().get_span_context()
        if not span_context.is_valid:
            return True

        record_dict = record.__dict__
        json_fields = record_dict.get("json_fields")
        fields = dict(json_fields) if isinstance(json_fields, Mapping) else {}
        trace_id = f"{span_context.trace_id:032x}"
        span_id = f"{span_context.span_id:016x}"
        fields["otel"] = {"trace_id": trace_id, "span_id": span_id}
        if self._gcp_project_id:
            fields.setdefault(
                "logging.googleapis.com/trace",
                f"projects/{self._gcp_project_id}/traces/{trace_id}",
            )
            fields.setdefault("logging.googleapis.com/spanId", span_id)
        record_dict["json_fields"] = fields
        return True


def build_log_config(
    *,
    cloud_logging_enabled: bool = False,
    gcp_project: str | None = None,
    cloud_log_name: str = "bucket-lister",
    cloud_log_labels: Mapping[str, str] | None = None,
    service_account_json: str | None = None,
) -> dict[str, Any]:
    """Return a dictConfig-compatible logging configuration."""

    cloud_handler_name = None
    cloud_handler = None
    if cloud_logging_enabled:
        if not gcp_project:
            raise RuntimeError("GCP project required when cloud logging is enabled")
        cloud_handler_name = "cloud_logging"
        cloud_handler = _cloud_logging_handler(
            gcp_project,
            cloud_log_name,
            cloud_log_labels,
            cloud_logging_credentials(service_account_json),
        )

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": _formatters(),
        "filters": _filters(gcp_project_id=gcp_project),
        "handlers": _handlers(cloud_handler_name, cloud_handler),
        "root": {
            "level": _level(ROOT_LEVEL_ENV, ROOT_LEVEL_DEFAULT),
            "handlers": _handler_list(cloud_handler_name),
        },
        "loggers": _logger_definitions(cloud_handler_name),
    }


def _logger_definitions(cloud_handler_name: str | None) -> dict[str, dict[str, Any]]:
    loggers: dict[str, dict[str, Any]] = {
        "uvicorn": {
            "level": _level("UVICORN_LOG_LEVEL", "INFO"),
            "handlers": _handler_list(cloud_handler_name),
            "propagate": False,
        },
        "uvicorn.error": {
            "level": _level("UVICORN_LOG_LEVEL", "INFO"),
            "handlers": _handler_list(cloud_handler_name),
            "propagate": False,
        },
        "uvicorn.access": {
            "level": _level("UVICORN_ACCESS_LOG_LEVEL", "WARNING"),
            "handlers": _handler_list(cloud_handler_name),
            "propagate": False,
        },
        "httpx": {
            "level": _level("HTTPX_LOG_LEVEL", "WARNING"),
            "handlers": _handler_list(cloud_handler_name),
            "propagate": False,
        },
        "httpcore": {
            "level": _level("HTTPX_LOG_LEVEL", "WARNING"),
            "handlers": _handler_list(cloud_handler_name),
            "propagate": False,
        },
    }
    for name, config in _SERVICE_LOGGERS.items():
        loggers[name] = dict(config)
    return loggers


def _formatters() -> dict[str, Any]:
    return {
        "console": {
            "()": ExtrasFormatter,
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
            "datefmt": "%Y-%m-%dT%H:%M:%S",
        }
    }


def _handlers(cloud_handler_name: str | None, cloud_handler: dict[str, Any] | None) -> dict[str, Any]:
    handlers: dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "console",
            "stream": "ext://sys.stdout",
            "filters": ["otel_context"],
        }
    }
    if cloud_handler_name and cloud_handler:
        cloud_handler = dict(cloud_handler)
        cloud_handler["filters"] = ["otel_context", "cloud_json_sanitizer"]
        handlers[cloud_handler_name] = cloud_handler
    return handlers


def _handler_list(cloud_handler_name: str | None) -> list[str]:
    handlers = ["console"]
    if cloud_handler_name:
        handlers.append(cloud_handler_name)
    return handlers


def _filters(*, gcp_project_id: str | None) -> dict[str, Any]:
    return {
        "otel_context": {
            "()": OtelContextLogFilter,
            "gcp_project_id": gcp_project_id,
        },
        "cloud_json_sanitizer": {
            "()": CloudJsonSanitizer,
        },
    }


def _cloud_logging_handler(
    project: str,
    log_name: str,
    labels: Mapping[str, str] | None,
    credentials: ServiceAccountCredentials | None,
) -> dict[str, Any]:
    from google.cloud.logging_v2.resource import Resource

    client: gcp_logging.Client = gcp_logging.Client(  # type: ignore[no-untyped-call]
        project=project,
        credentials=credentials,
    )
    return {
        "level": "INFO",
        "class": "google.cloud.logging_v2.handlers.handlers.CloudLoggingHandler",
        "client": client,
        "name": log_name,
        "resource": Resource("global", {"project_id": project}),
        "labels": dict(labels or {}),
        "formatter": "console",
    }


def cloud_logging_credentials(service_account_json: str | None) -> ServiceAccountCredentials | None:
    """Credentials from the inline service account, or None for ambient credentials."""

    inline = (service_account_json or "").strip()
    if not inline:
        return None
    try:
        return service_account_credentials(inline_service_account_info(inline, source="GCP_SERVICE_ACCOUNT_JSON"))
    except ValueError as exc:
        logging.getLogger("bucket_lister.logging").warning(
            "inline service account unusable for cloud logging, using ambient credentials",
            extra={"data": {"error": str(exc)}},
        )
        return None


def _sanitize_for_json(value: Any, depth: int = 10, max_items: int = 200) -> Any:
    """Return a JSON-serializable copy; fallback to string for unknowns."""

    if depth <= 0:
        return "<depth_exceeded>"

    if value is None or isinstance(value, (str, int, float, bool)):
        return value

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes len={len(value)}>"

    if isinstance(value, (types.BuiltinFunctionType, types.FunctionType, types.MethodType)):
        return f"<callable {value.__name__}>"

    if is_dataclass(value) and not isinstance(value, type):
        return _sanitize_for_json(asdict(value), depth - 1, max_items)

    if isinstance(value, Mapping):
        result: dict[str, Any] = {}
        for idx, (k, v) in enumerate(value.items()):
            if idx >= max_items:
                result["<truncated>"] = f"...{len(value) - idx} more"
                break
            result[str(k)] = _sanitize_for_json(v, depth - 1, max_items)
        return result

    if isinstance(value, (list, tuple, set)):
        items = list(value)
        out = [_sanitize_for_json(item, depth - 1, max_items) for item in items[:max_items]]
        if len(items) > max_items:
            out.append(f"... {len(items) - max_items} more")
        return out

    return str(value)


def configure_logging(
    *,
    cloud_logging_enabled: bool = False,
    gcp_project: str | None = None,
    cloud_log_name: str = "bucket-lister",
    cloud_log_labels: Mapping[str, str] | None = None,
    service_account_json: str | None = None,
) -> None:
    """Apply the logging config."""
    dictConfig(
        build_log_config(
            cloud_logging_enabled=cloud_logging_enabled,
            gcp_project=gcp_project,
            cloud_log_name=cloud_log_name,
            cloud_log_labels=cloud_log_labels,
            service_account_json=service_account_json,
        )
    )


def init_logging() -> None:
    """Bootstrap console logging without cloud handlers."""

    configure_logging(cloud_logging_enabled=False)


def enable_cloud_logging(
    *,
    gcp_project: str,
    cloud_log_name: str = "bucket-lister",
    cloud_log_labels: Mapping[str, str] | None = None,
    service_account_json: str | None = None,
) -> None:
    """Attach cloud logging on top of the console setup."""

    configure_logging(
        cloud_logging_enabled=True,
        gcp_project=gcp_project,
        cloud_log_name=cloud_log_name,
        cloud_log_labels=cloud_log_labels,
        service_account_json=service_account_json,
    )


def shutdown_logging() -> None:
    """Flush and close CloudLoggingHandler instances."""

    from google.cloud.logging_v2.handlers.handlers import CloudLoggingHandler

    seen: set[int] = set()
    loggers = [logging.getLogger()]
    loggers.extend(
        logger
        for logger in logging.Logger.manager.loggerDict.values()
        if isinstance(logger, logging.Logger)
    )
    for logger in loggers:
        for handler in logger.handlers:
            if id(handler) in seen or not isinstance(handler, CloudLoggingHandler):
                continue
            seen.add(id(handler))
            handler.flush()  # type: ignore[no-untyped-call]
            handler.close()  # type: ignore[no-untyped-call]


__all__ = [
    "CloudJsonSanitizer",
    "ExtrasFormatter",
    "OtelContextLogFilter",
    "build_log_config",
    "cloud_logging_credentials",
    "configure_logging",
    "enable_cloud_logging",
    "init_logging",
    "shutdown_logging",
]
