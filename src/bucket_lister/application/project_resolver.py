"""Ordered project-id resolution mirroring the credential chain."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from bucket_lister.application.fallback import Source, describe_failures, first_available
from bucket_lister.application.service_accounts import FILE_SOURCE, INLINE_SOURCE, ServiceAccountLocator
from bucket_lister.config.credentials import CredentialSources
from bucket_lister.domain.credentials import ServiceAccountKey
from bucket_lister.errors import NoProjectConfiguredError

PROJECT_ENV_SOURCE = "GCP_PROJECT_ID"
GCLOUD_PROJECT_SOURCE = "gcloud config get-value project"

logger = logging.getLogger("bucket_lister.project")


class ProjectCli(Protocol):
    def current_project(self) -> str | None:
        ...


@dataclass
class ProjectIdResolver:
    sources: CredentialSources
    gcloud: ProjectCli
    _locator: ServiceAccountLocator = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._locator = ServiceAccountLocator(self.sources)

    def chain(self) -> list[Source[str]]:
        return [
            Source(PROJECT_ENV_SOURCE, self._explicit_project),
            Source(f"{INLINE_SOURCE} project_id", _project_of(self._locator.inline)),
            Source(f"{FILE_SOURCE} project_id", _project_of(self._locator.env_file)),
            Source(f"{self._locator.default_source_name()} project_id", _project_of(self._locator.default_file)),
            Source(GCLOUD_PROJECT_SOURCE, self._gcloud_project),
        ]

    def resolve_project_id(self) -> str:
        outcome = first_available(
            self.chain(),
            logger=logger,
            kind="project",
            strict=self.sources.strict,
        )
        if outcome.resolved is None:
            message = "Could not determine current GCP project"
            details = describe_failures(outcome.failures)
            raise NoProjectConfiguredError(f"{message} ({details})" if details else message)
        return outcome.resolved.value

    def _explicit_project(self) -> str | None:
        return _non_empty(self.sources.project_id)

    def _gcloud_project(self) -> str | None:
        return _non_empty(self.gcloud.current_project())


def _project_of(load_key: Callable[[], ServiceAccountKey | None]) -> Callable[[], str | None]:
    def fetch() -> str | None:
        key = load_key()
        if key is None:
            return None
        return _non_empty(key.project_id)

    return fetch


def _non_empty(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


__all__ = ["GCLOUD_PROJECT_SOURCE", "PROJECT_ENV_SOURCE", "ProjectIdResolver"]
