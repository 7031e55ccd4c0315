"""HTTP client for the Cloud Storage JSON API bucket listing."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx
from opentelemetry import trace
from opentelemetry.trace import SpanKind

from bucket_lister.domain.bucket import BucketSummary
from bucket_lister.domain.credentials import AccessToken
from bucket_lister.errors import AuthenticationFailedError, ListFailedError, PermissionDeniedError

STORAGE_BASE_URL = "https://storage.googleapis.com"
BUCKETS_PATH = "/storage/v1/b"

logger = logging.getLogger("bucket_lister.storage")


@dataclass
class StorageClient:
    """Lists buckets of one project with a bearer token."""

    base_url: str = STORAGE_BASE_URL
    timeout_seconds: float = 30.0
    transport: httpx.BaseTransport | None = None

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ValueError("storage base_url must not be empty")

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout_seconds,
            transport=self.transport,
        )

    def list_buckets(self, token: AccessToken, project: str) -> list[BucketSummary]:
        tracer = trace.get_tracer("bucket_lister.storage")
        with tracer.start_as_current_span(
            "gcs.list_buckets",
            kind=SpanKind.CLIENT,
            attributes={"gcp.project_id": project},
        ) as span:
            logger.info("fetching buckets", extra={"data": {"project_id": project}})
            with self._client() as client:
                response = client.get(
                    BUCKETS_PATH,
                    params={"project": project},
                    headers={"Authorization": token.authorization_header, "Accept": "application/json"},
                )
            span.set_attribute("http.status_code", response.status_code)

        if not response.is_success:
            logger.error(
                "storage API error",
                extra={"data": {"status_code": response.status_code, "body": response.text[:500]}},
            )
            if response.status_code == httpx.codes.UNAUTHORIZED:
                raise AuthenticationFailedError()
            if response.status_code == httpx.codes.FORBIDDEN:
                raise PermissionDeniedError()
            raise ListFailedError(response.status_code, response.text)

        buckets = [BucketSummary.from_resource(item) for item in _items_from(response)]
        logger.info(
            "retrieved buckets",
            extra={"data": {"project_id": project, "count": len(buckets)}},
        )
        return buckets


def _items_from(response: httpx.Response) -> list[dict[str, Any]]:
    try:
        payload = response.json()
    except ValueError as exc:
        raise ListFailedError(response.status_code, response.text) from exc
    if not isinstance(payload, dict):
        raise ListFailedError(response.status_code, response.text)
    items = payload.get("items") or []
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        raise ListFailedError(response.status_code, response.text)
    return items


__all__ = ["BUCKETS_PATH", "STORAGE_BASE_URL", "StorageClient"]
