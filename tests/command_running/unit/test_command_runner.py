"""External command runner tests."""

from __future__ import annotations

import pytest
from catalog_e2e_tester.command_running import (
    CommandError,
    CommandTimeoutError,
    run_command,
)


def test_captures_stdout_and_stderr_in_one_output() -> None:
    result = run_command("sh", "-c", "echo out; echo err >&2")

    assert result.succeeded is True
    assert "out" in result.output
    assert "err" in result.output
    assert result.command == ("sh", "-c", "echo out; echo err >&2")


def test_pipes_stdin_to_the_process() -> None:
    result = run_command("cat", stdin="kind: TaskRun\n")

    assert result.output == "kind: TaskRun\n"


def test_non_zero_exit_raises_with_output_and_returncode() -> None:
    with pytest.raises(CommandError) as exc_info:
        run_command("sh", "-c", "echo broken manifest; exit 3")

    assert exc_info.value.returncode == 3
    assert "broken manifest" in exc_info.value.output
    assert "exit code 3" in str(exc_info.value)
    assert "broken manifest" in str(exc_info.value)


def test_non_zero_exit_is_returned_when_check_is_disabled() -> None:
    result = run_command("sh", "-c", "exit 4", check=False)

    assert result.succeeded is False
    assert result.returncode == 4


def test_missing_program_raises_command_error() -> None:
    with pytest.raises(CommandError, match="Command not found"):
        run_command("definitely-not-an-installed-program-xyz")


def test_deadline_raises_timeout_error() -> None:
    with pytest.raises(CommandTimeoutError, match="timed out"):
        run_command("sh", "-c", "sleep 5", timeout=0.2)
