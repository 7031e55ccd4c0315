"""Ordered access-token resolution across env, files, platform token and gcloud."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from bucket_lister.application.fallback import Resolved, Source, describe_failures, first_available
from bucket_lister.application.service_accounts import FILE_SOURCE, INLINE_SOURCE, ServiceAccountLocator
from bucket_lister.config.credentials import CredentialSources
from bucket_lister.domain.credentials import AccessToken, Credential, ServiceAccountKey
from bucket_lister.errors import NoCredentialsAvailableError
from bucket_lister.gcp.jwt_assertion import SignedAssertion, build_assertion

PLATFORM_TOKEN_SOURCE = "CLOUD_ACCESS_TOKEN"
GCLOUD_TOKEN_SOURCE = "gcloud auth application-default print-access-token"

logger = logging.getLogger("bucket_lister.credentials")


class TokenExchanger(Protocol):
    def exchange(self, assertion: SignedAssertion | str) -> str:
        ...


class AccessTokenCli(Protocol):
    def print_access_token(self) -> str | None:
        ...


@dataclass
class CredentialResolver:
    """Resolve a bearer token from the first usable credential source.

    Discovery walks the sources in priority order and skips the ones that are
    absent or broken. Turning the chosen credential into a token (signing and
    exchanging a service-account assertion) happens after discovery, so its
    errors reach the caller.
    """

    sources: CredentialSources
    exchanger: TokenExchanger
    gcloud: AccessTokenCli
    assertion_builder: Callable[[ServiceAccountKey], SignedAssertion] = build_assertion
    _locator: ServiceAccountLocator = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._locator = ServiceAccountLocator(self.sources)

    def chain(self) -> list[Source[Credential]]:
        return [
            Source(INLINE_SOURCE, self._locator.inline),
            Source(FILE_SOURCE, self._locator.env_file),
            Source(PLATFORM_TOKEN_SOURCE, self._platform_token),
            Source(self._locator.default_source_name(), self._locator.default_file),
            Source(GCLOUD_TOKEN_SOURCE, self._gcloud_token),
        ]

    def resolve_credential(self) -> Resolved[Credential]:
        outcome = first_available(
            self.chain(),
            logger=logger,
            kind="credential",
            strict=self.sources.strict,
        )
        if outcome.resolved is None:
            message = (
                "No authentication method available. Please make sure you're authenticated with "
                "'gcloud auth login' and 'gcloud auth application-default login'"
            )
            details = describe_failures(outcome.failures)
            raise NoCredentialsAvailableError(f"{message} ({details})" if details else message)
        return outcome.resolved

    def resolve_access_token(self) -> AccessToken:
        resolved = self.resolve_credential()
        credential = resolved.value
        if isinstance(credential, AccessToken):
            return credential

        assertion = self.assertion_builder(credential)
        token = self.exchanger.exchange(assertion)
        logger.info(
            "exchanged service account assertion",
            extra={"data": {"source": resolved.source, "client_email": credential.client_email}},
        )
        return AccessToken(value=token, source=resolved.source)

    def _platform_token(self) -> AccessToken | None:
        token = self.sources.cloud_access_token
        if not token or not token.strip():
            return None
        return AccessToken(value=token, source=PLATFORM_TOKEN_SOURCE)

    def _gcloud_token(self) -> AccessToken | None:
        token = self.gcloud.print_access_token()
        if token is None:
            return None
        return AccessToken(value=token, source=GCLOUD_TOKEN_SOURCE)


__all__ = ["CredentialResolver", "GCLOUD_TOKEN_SOURCE", "PLATFORM_TOKEN_SOURCE"]
