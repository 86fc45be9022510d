"""External command execution with combined output capture."""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Protocol

_LOGGER = logging.getLogger(__name__)


class CommandError(Exception):
    """Raised when an external command cannot be run or exits non-zero."""

    def __init__(
        self,
        message: str,
        *,
        command: tuple[str, ...],
        output: str = "",
        returncode: int | None = None,
    ) -> None:
        super().__init__(f"{message}\n{output}" if output else message)
        self.command = command
        self.output = output
        self.returncode = returncode


class CommandTimeoutError(CommandError):
    """Raised when an external command exceeds its deadline."""


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one finished external command."""

    command: tuple[str, ...]
    output: str
    returncode: int

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


class CommandRunner(Protocol):  # pylint: disable=too-few-public-methods
    """Callable contract shared by the real runner and test fakes."""

    def __call__(
        self,
        program: str,
        *args: str,
        stdin: str | None = None,
        timeout: float | None = None,
        check: bool = True,
    ) -> CommandResult: ...


def run_command(
    program: str,
    *args: str,
    stdin: str | None = None,
    timeout: float | None = None,
    check: bool = True,
) -> CommandResult:
    """Run one external command and return its combined stdout/stderr.

    Args:
      program: Executable name resolved through PATH.
      args: Command arguments.
      stdin: Optional text piped to the process input.
      timeout: Optional deadline in seconds.
      check: Raise on a non-zero exit code when true.

    Returns:
      The captured command result.

    Raises:
      CommandError: If the executable is missing or exits non-zero with `check` set.
      CommandTimeoutError: If the deadline elapses before the process exits.
    """
    command = (program, *args)
    command_text = shlex.join(command)
    _LOGGER.debug("running %s", command_text)
    try:
        completed = subprocess.run(
            list(command),
            input=stdin,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as exc:
        raise CommandError(f"Command not found: {command_text}", command=command) from exc
    except subprocess.TimeoutExpired as exc:
        partial = _decode_partial_output(exc.output)
        raise CommandTimeoutError(
            f"Command timed out after {timeout}s: {command_text}",
            command=command,
            output=partial,
        ) from exc

    result = CommandResult(
        command=command,
        output=completed.stdout or "",
        returncode=completed.returncode,
    )
    if check and not result.succeeded:
        raise CommandError(
            f"Command failed with exit code {result.returncode}: {command_text}",
            command=command,
            output=result.output,
            returncode=result.returncode,
        )
    return result


def _decode_partial_output(output: bytes | str | None) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output
