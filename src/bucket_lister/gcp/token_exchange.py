"""OAuth2 JWT-bearer token exchange backed by HTTPX."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import httpx
from opentelemetry import trace
from opentelemetry.trace import SpanKind

from bucket_lister.errors import MalformedTokenResponseError, TokenExchangeFailedError
from bucket_lister.gcp.jwt_assertion import GOOGLE_TOKEN_URI, SignedAssertion

JWT_BEARER_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"

logger = logging.getLogger("bucket_lister.gcp.token_exchange")


@dataclass
class TokenExchangeClient:
    """Exchange a signed assertion for a bearer access token."""

    token_uri: str = GOOGLE_TOKEN_URI
    timeout_seconds: float = 30.0
    transport: httpx.BaseTransport | None = None

    def __post_init__(self) -> None:
        if not self.token_uri:
            raise ValueError("token_uri must not be empty")

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout_seconds, transport=self.transport)

    def exchange(self, assertion: SignedAssertion | str) -> str:
        form = {"grant_type": JWT_BEARER_GRANT_TYPE, "assertion": str(assertion)}
        tracer = trace.get_tracer("bucket_lister.gcp")
        with tracer.start_as_current_span(
            "gcp.token_exchange",
            kind=SpanKind.CLIENT,
            attributes={"http.url": self.token_uri},
        ) as span:
            start = time.perf_counter()
            with self._client() as client:
                response = client.post(
                    self.token_uri,
                    data=form,
                    headers={"Accept": "application/json"},
                )
            span.set_attribute("http.status_code", response.status_code)
            logger.debug(
                "token exchange completed",
                extra={
                    "data": {
                        "status_code": response.status_code,
                        "elapsed_ms": round((time.perf_counter() - start) * 1000, 2),
                    }
                },
            )

        if not response.is_success:
            raise TokenExchangeFailedError(response.status_code, response.text)
        return _access_token_from(response)


def _access_token_from(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError as exc:
        raise MalformedTokenResponseError("token endpoint returned a non-JSON body") from exc
    if not isinstance(payload, dict):
        raise MalformedTokenResponseError("token endpoint returned a non-object body")
    token = payload.get("access_token")
    if not isinstance(token, str) or not token:
        raise MalformedTokenResponseError("token endpoint response has no access_token")
    return token


__all__ = ["JWT_BEARER_GRANT_TYPE", "TokenExchangeClient"]
