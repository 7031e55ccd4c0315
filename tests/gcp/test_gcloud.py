from __future__ import annotations

import subprocess

import pytest

from bucket_lister.errors import SubprocessFailedError
from bucket_lister.gcp.gcloud import GET_PROJECT_ARGS, PRINT_ACCESS_TOKEN_ARGS, GcloudCli


def test_print_access_token_returns_trimmed_stdout(gcloud_runner) -> None:
    runner = gcloud_runner({PRINT_ACCESS_TOKEN_ARGS: "  ya29.token\n"})
    cli = GcloudCli(binary="/opt/gcloud", timeout_seconds=5.0, command_runner=runner)

    assert cli.print_access_token() == "ya29.token"
    assert runner.calls == [["/opt/gcloud", "auth", "application-default", "print-access-token"]]
    assert runner.kwargs[0] == {"capture_output": True, "text": True, "check": True, "timeout": 5.0}


def test_current_project_returns_trimmed_stdout(gcloud_runner) -> None:
    runner = gcloud_runner({GET_PROJECT_ARGS: "demo-project\n"})

    assert GcloudCli(command_runner=runner).current_project() == "demo-project"
    assert runner.calls == [["gcloud", "config", "get-value", "project"]]


@pytest.mark.parametrize("stdout", ["", "   \n", "(unset)\n"])
def test_current_project_without_value_returns_none(gcloud_runner, stdout: str) -> None:
    runner = gcloud_runner({GET_PROJECT_ARGS: stdout})

    assert GcloudCli(command_runner=runner).current_project() is None


def test_non_zero_exit_raises_with_stderr(gcloud_runner) -> None:
    cli = GcloudCli(command_runner=gcloud_runner())

    with pytest.raises(SubprocessFailedError) as excinfo:
        cli.print_access_token()

    assert excinfo.value.returncode == 1
    assert excinfo.value.stderr == "ERROR: not configured"
    assert excinfo.value.command == ("gcloud", *PRINT_ACCESS_TOKEN_ARGS)


def test_missing_binary_raises(gcloud_runner) -> None:
    runner = gcloud_runner({PRINT_ACCESS_TOKEN_ARGS: FileNotFoundError(2, "No such file", "gcloud")})

    with pytest.raises(SubprocessFailedError) as excinfo:
        GcloudCli(command_runner=runner).print_access_token()

    assert excinfo.value.returncode is None
    assert "No such file" in excinfo.value.stderr


def test_timeout_raises(gcloud_runner) -> None:
    runner = gcloud_runner({GET_PROJECT_ARGS: subprocess.TimeoutExpired(["gcloud"], 2.0)})

    with pytest.raises(SubprocessFailedError, match="timed out after 2.0s"):
        GcloudCli(timeout_seconds=2.0, command_runner=runner).current_project()
