"""Manifest name suffixing tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from catalog_e2e_tester.command_running import CommandResult
from catalog_e2e_tester.manifest_preparation import (
    FixtureLayoutError,
    load_fixture,
    read_step_action_name,
    suffix_fixture_names,
)


class ScriptedYq:
    """Answers read queries from a table and records in-place updates."""

    def __init__(self, reads: dict[str, str]) -> None:
        self.reads = reads
        self.updates: list[tuple[str, str]] = []

    def __call__(self, program, *args, stdin=None, timeout=None, check=True):
        command = (program, *args)
        if "-i" in args:
            self.updates.append((Path(args[-1]).name, args[1]))
            return CommandResult(command=command, output="", returncode=0)
        return CommandResult(command=command, output=self.reads.get(args[1], ""), returncode=0)


def _fixture(tmp_path: Path) -> Path:
    (tmp_path / "tests").mkdir()
    (tmp_path / "git-clone.yaml").write_text("kind: StepAction\n", encoding="utf-8")
    (tmp_path / "tests" / "basic.yaml").write_text("kind: TaskRun\n", encoding="utf-8")
    return tmp_path


def test_suffixes_step_action_then_references_then_metadata(tmp_path: Path) -> None:
    runner = ScriptedYq(
        {
            ".metadata.name": "git-clone\n",
            'select(.kind == "Task" or .kind == "Pipeline") | .metadata.name': (
                "helper\n---\nbuild\n"
            ),
        }
    )

    new_name = suffix_fixture_names(load_fixture(_fixture(tmp_path)), "1a2b3c4d", runner=runner)

    assert new_name == "git-clone-1a2b3c4d"
    ref = '(.. | select(has("{key}")) | select(.{key}.name == "{name}") | .{key}.name)'
    assert runner.updates == [
        ("git-clone.yaml", '(.metadata.name) += "-1a2b3c4d"'),
        ("basic.yaml", ref.format(key="ref", name="git-clone") + ' += "-1a2b3c4d"'),
        ("basic.yaml", ref.format(key="taskRef", name="helper") + ' += "-1a2b3c4d"'),
        ("basic.yaml", ref.format(key="pipelineRef", name="helper") + ' += "-1a2b3c4d"'),
        ("basic.yaml", ref.format(key="taskRef", name="build") + ' += "-1a2b3c4d"'),
        ("basic.yaml", ref.format(key="pipelineRef", name="build") + ' += "-1a2b3c4d"'),
        ("basic.yaml", '(.metadata.name) += "-1a2b3c4d"'),
    ]


@pytest.mark.parametrize("output", ["", "null\n"])
def test_step_action_without_name_is_rejected(tmp_path: Path, output: str) -> None:
    runner = ScriptedYq({".metadata.name": output})

    with pytest.raises(FixtureLayoutError, match="has no metadata.name"):
        read_step_action_name(tmp_path / "git-clone.yaml", runner=runner)
