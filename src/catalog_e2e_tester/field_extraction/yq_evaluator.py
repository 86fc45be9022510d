"""Field extraction through the `yq` structured-query evaluator."""

from __future__ import annotations

from pathlib import Path

from catalog_e2e_tester.command_running import CommandError, CommandRunner, run_command

YQ_PROGRAM = "yq"


class FieldExtractionError(Exception):
    """Raised when yq rejects the expression or the document."""


def extract_field(
    document: str,
    expression: str,
    *,
    runner: CommandRunner = run_command,
) -> str:
    """Evaluate `expression` against a YAML document piped to yq's input."""
    try:
        result = runner(YQ_PROGRAM, "eval", expression, "-", stdin=document)
    except CommandError as exc:
        raise FieldExtractionError(
            f"failed to extract field '{expression}' from YAML: {exc}"
        ) from exc
    return result.output.strip()


def read_file_field(
    path: Path | str,
    expression: str,
    *,
    runner: CommandRunner = run_command,
) -> str:
    """Evaluate `expression` against a YAML file without modifying it."""
    try:
        result = runner(YQ_PROGRAM, "eval", expression, str(path))
    except CommandError as exc:
        raise FieldExtractionError(
            f"failed to read field '{expression}' from {path}: {exc}"
        ) from exc
    return result.output.strip()


def update_file_in_place(
    path: Path | str,
    expression: str,
    *,
    runner: CommandRunner = run_command,
) -> None:
    """Apply an update expression to a YAML file in place."""
    try:
        runner(YQ_PROGRAM, "eval", expression, "-i", str(path))
    except CommandError as exc:
        raise FieldExtractionError(f"failed to update {path} with '{expression}': {exc}") from exc
