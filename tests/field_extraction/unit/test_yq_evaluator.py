"""yq field extraction tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from catalog_e2e_tester.command_running import CommandError, CommandResult
from catalog_e2e_tester.field_extraction import (
    FieldExtractionError,
    extract_field,
    read_file_field,
    update_file_in_place,
)


class FakeRunner:
    def __init__(self, output: str = "", error: CommandError | None = None) -> None:
        self.output = output
        self.error = error
        self.calls: list[tuple[tuple[str, ...], str | None]] = []

    def __call__(self, program, *args, stdin=None, timeout=None, check=True):
        command = (program, *args)
        self.calls.append((command, stdin))
        if self.error is not None:
            raise self.error
        return CommandResult(command=command, output=self.output, returncode=0)


def test_extract_field_pipes_document_to_yq_and_strips_output() -> None:
    runner = FakeRunner(output="Running\n")

    value = extract_field("status:\n  phase: Running\n", ".status.phase", runner=runner)

    assert value == "Running"
    assert runner.calls == [
        (("yq", "eval", ".status.phase", "-"), "status:\n  phase: Running\n"),
    ]


def test_extract_field_wraps_yq_failures() -> None:
    runner = FakeRunner(
        error=CommandError("Command failed", command=("yq",), output="bad expression")
    )

    with pytest.raises(FieldExtractionError, match="failed to extract field '.status.\\['"):
        extract_field("a: 1\n", ".status.[", runner=runner)


def test_read_file_field_passes_the_file_path(tmp_path: Path) -> None:
    runner = FakeRunner(output="git-clone\n")
    manifest = tmp_path / "git-clone.yaml"

    assert read_file_field(manifest, ".metadata.name", runner=runner) == "git-clone"
    assert runner.calls[0][0] == ("yq", "eval", ".metadata.name", str(manifest))


def test_update_file_in_place_uses_in_place_flag(tmp_path: Path) -> None:
    runner = FakeRunner()
    manifest = tmp_path / "run.yaml"

    update_file_in_place(manifest, '(.metadata.name) += "-abc"', runner=runner)

    assert runner.calls[0][0] == ("yq", "eval", '(.metadata.name) += "-abc"', "-i", str(manifest))
