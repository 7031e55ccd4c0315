"""Wire settings into resolvers, clients and the listing use case."""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial

import httpx

from bucket_lister.application.credential_resolver import CredentialResolver
from bucket_lister.application.list_buckets import ListBuckets
from bucket_lister.application.project_resolver import ProjectIdResolver
from bucket_lister.gcp.gcloud import GcloudCli
from bucket_lister.gcp.jwt_assertion import build_assertion
from bucket_lister.gcp.token_exchange import TokenExchangeClient
from bucket_lister.infrastructure.http.routes import BucketRouteDeps
from bucket_lister.infrastructure.storage.client import StorageClient
from bucket_lister.runtime.settings import Settings


@dataclass(frozen=True)
class Runtime:
    settings: Settings
    credential_resolver: CredentialResolver
    project_resolver: ProjectIdResolver
    list_buckets: ListBuckets

    def bucket_route_deps(self) -> BucketRouteDeps:
        return BucketRouteDeps(list_buckets=self.list_buckets)


def build_runtime(
    settings: Settings,
    *,
    transport: httpx.BaseTransport | None = None,
    command_runner: Callable[..., subprocess.CompletedProcess[str]] | None = None,
) -> Runtime:
    """Build the object graph; ``transport`` and ``command_runner`` replace network and CLI I/O."""
    credential_settings = settings.credentials
    api = settings.gcp_api
    sources = credential_settings.sources()

    gcloud = GcloudCli(
        binary=credential_settings.gcloud_binary,
        timeout_seconds=credential_settings.gcloud_timeout_seconds,
        command_runner=command_runner,
    )
    exchanger = TokenExchangeClient(
        token_uri=api.token_uri,
        timeout_seconds=api.http_timeout_seconds,
        transport=transport,
    )
    credential_resolver = CredentialResolver(
        sources=sources,
        exchanger=exchanger,
        gcloud=gcloud,
        assertion_builder=partial(build_assertion, audience=api.token_uri),
    )
    project_resolver = ProjectIdResolver(sources=sources, gcloud=gcloud)
    storage = StorageClient(
        base_url=api.storage_base_url,
        timeout_seconds=api.http_timeout_seconds,
        transport=transport,
    )
    return Runtime(
        settings=settings,
        credential_resolver=credential_resolver,
        project_resolver=project_resolver,
        list_buckets=ListBuckets(
            credentials=credential_resolver,
            projects=project_resolver,
            storage=storage,
        ),
    )


__all__ = ["Runtime", "build_runtime"]
