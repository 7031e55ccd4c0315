"""Exception taxonomy for credential resolution and bucket listing."""

from __future__ import annotations

from collections.abc import Sequence


class BucketListerError(Exception):
    """Base class for failures surfaced to the request boundary."""


class NoCredentialsAvailableError(BucketListerError):
    """Raised when every credential source has been exhausted."""


class NoProjectConfiguredError(BucketListerError):
    """Raised when no project id source yields a non-empty value."""


class InvalidPrivateKeyError(BucketListerError, ValueError):
    """Raised when a service-account private key cannot be decoded or imported."""


class MalformedTokenResponseError(BucketListerError):
    """Raised when the token endpoint answers 2xx without a usable access_token."""


class TokenExchangeFailedError(BucketListerError):
    """Raised when the token endpoint rejects the assertion."""

    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"token exchange failed: {status} {body}")
        self.status = status
        self.body = body


class AuthenticationFailedError(BucketListerError):
    """Raised when the storage API answers 401."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or "Authentication failed. Please ensure you're properly authenticated with Google Cloud."
        )


class PermissionDeniedError(BucketListerError):
    """Raised when the storage API answers 403."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or "Permission denied. Your account may not have sufficient permissions "
            "to list GCS buckets."
        )


class ListFailedError(BucketListerError):
    """Raised for any other non-2xx answer from the storage API."""

    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"Failed to list buckets: {status} {body}")
        self.status = status
        self.body = body


class SubprocessFailedError(BucketListerError):
    """Raised when a gcloud invocation exits non-zero, times out or cannot start."""

    def __init__(self, command: Sequence[str], returncode: int | None, stderr: str) -> None:
        cmd_str = " ".join(command)
        detail = f": {stderr}" if stderr else ""
        super().__init__(f"`{cmd_str}` failed (returncode={returncode}){detail}")
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr


__all__ = [
    "AuthenticationFailedError",
    "BucketListerError",
    "InvalidPrivateKeyError",
    "ListFailedError",
    "MalformedTokenResponseError",
    "NoCredentialsAvailableError",
    "NoProjectConfiguredError",
    "PermissionDeniedError",
    "SubprocessFailedError",
    "TokenExchangeFailedError",
]
