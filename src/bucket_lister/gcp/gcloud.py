"""Thin wrapper around the gcloud CLI for token and project lookup."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from typing import Any

from bucket_lister.errors import SubprocessFailedError

logger = logging.getLogger("bucket_lister.gcp.gcloud")

PRINT_ACCESS_TOKEN_ARGS: tuple[str, ...] = ("auth", "application-default", "print-access-token")
GET_PROJECT_ARGS: tuple[str, ...] = ("config", "get-value", "project")

# `gcloud config get-value` prints this marker for unset properties on some versions.
_UNSET_MARKER = "(unset)"


class GcloudCli:
    """Runs gcloud subcommands and returns their trimmed stdout."""

    def __init__(
        self,
        *,
        binary: str = "gcloud",
        timeout_seconds: float = 30.0,
        command_runner: Callable[..., subprocess.CompletedProcess[str]] | None = None,
    ) -> None:
        self._binary = binary
        self._timeout = timeout_seconds
        self._run = command_runner or self._default_run

    def print_access_token(self) -> str | None:
        return self._output(PRINT_ACCESS_TOKEN_ARGS)

    def current_project(self) -> str | None:
        value = self._output(GET_PROJECT_ARGS)
        if value == _UNSET_MARKER:
            return None
        return value

    def _output(self, args: tuple[str, ...]) -> str | None:
        command = [self._binary, *args]
        logger.debug("running gcloud", extra={"data": {"args": list(args)}})
        try:
            result = self._run(
                command,
                capture_output=True,
                text=True,
                check=True,
                timeout=self._timeout,
            )
        except subprocess.CalledProcessError as exc:
            raise SubprocessFailedError(command, exc.returncode, (exc.stderr or "").strip()) from exc
        except subprocess.TimeoutExpired as exc:
            raise SubprocessFailedError(command, None, f"timed out after {self._timeout}s") from exc
        except OSError as exc:
            raise SubprocessFailedError(command, None, str(exc)) from exc
        output = (result.stdout or "").strip()
        return output or None

    @staticmethod
    def _default_run(
        *args: Any,
        **kwargs: Any,
    ) -> subprocess.CompletedProcess[str]:  # pragma: no cover - thin wrapper
        return subprocess.run(*args, **kwargs)  # noqa: S603


__all__ = ["GET_PROJECT_ARGS", "GcloudCli", "PRINT_ACCESS_TOKEN_ARGS"]
