"""Command running exports."""

from .command_runner import (
    CommandError,
    CommandResult,
    CommandRunner,
    CommandTimeoutError,
    run_command,
)

__all__ = [
    "CommandError",
    "CommandResult",
    "CommandRunner",
    "CommandTimeoutError",
    "run_command",
]
