"""Use case behind the bucket listing endpoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from opentelemetry import trace

from bucket_lister.domain.bucket import BucketListing, BucketSummary
from bucket_lister.domain.credentials import AccessToken

logger = logging.getLogger("bucket_lister.application")


class AccessTokenProvider(Protocol):
    def resolve_access_token(self) -> AccessToken:
        ...


class ProjectIdProvider(Protocol):
    def resolve_project_id(self) -> str:
        ...


class BucketLister(Protocol):
    def list_buckets(self, token: AccessToken, project: str) -> list[BucketSummary]:
        ...


@dataclass(slots=True)
class ListBuckets:
    """Resolve credentials and project from scratch, then list the buckets."""

    credentials: AccessTokenProvider
    projects: ProjectIdProvider
    storage: BucketLister

    def execute(self) -> BucketListing:
        tracer = trace.get_tracer("bucket_lister.application")
        with tracer.start_as_current_span("bucket_lister.list_buckets") as span:
            token = self.credentials.resolve_access_token()
            project_id = self.projects.resolve_project_id()
            span.set_attribute("gcp.project_id", project_id)
            span.set_attribute("bucket_lister.credential_source", token.source)

            buckets = self.storage.list_buckets(token, project_id)
            span.set_attribute("bucket_lister.bucket_count", len(buckets))

        logger.info(
            "listed buckets",
            extra={
                "data": {
                    "project_id": project_id,
                    "credential_source": token.source,
                    "count": len(buckets),
                }
            },
        )
        return BucketListing(project_id=project_id, buckets=tuple(buckets))


__all__ = ["ListBuckets"]
