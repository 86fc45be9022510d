"""Uniqueness suffixing of manifest names and the references to them."""

from __future__ import annotations

import logging
from pathlib import Path

from catalog_e2e_tester.command_running import CommandRunner, run_command
from catalog_e2e_tester.field_extraction import read_file_field, update_file_in_place

from .fixture_layout import CatalogFixture, FixtureLayoutError

_LOGGER = logging.getLogger(__name__)

_DEFINITION_NAMES_QUERY = 'select(.kind == "Task" or .kind == "Pipeline") | .metadata.name'


def read_step_action_name(path: Path | str, *, runner: CommandRunner = run_command) -> str:
    name = read_file_field(path, ".metadata.name", runner=runner)
    if not name or name == "null":
        raise FixtureLayoutError(f"StepAction in {path} has no metadata.name")
    return name


def suffix_fixture_names(
    fixture: CatalogFixture,
    suffix: str,
    *,
    runner: CommandRunner = run_command,
) -> str:
    """Suffix every name in the fixture and return the new StepAction name.

    The fixture must be a scope-private copy: files are rewritten in place.
    """
    step_action_name = read_step_action_name(fixture.step_action_file, runner=runner)
    update_file_in_place(
        fixture.step_action_file, _append_suffix(".metadata.name", suffix), runner=runner
    )
    for test_file in fixture.test_files:
        suffix_test_file(test_file, step_action_name, suffix, runner=runner)
    _LOGGER.debug("suffixed fixture %s with -%s", fixture.root, suffix)
    return f"{step_action_name}-{suffix}"


def suffix_test_file(
    path: Path | str,
    step_action_name: str,
    suffix: str,
    *,
    runner: CommandRunner = run_command,
) -> None:
    """Suffix one test manifest: StepAction refs, Task/Pipeline refs, then metadata names."""
    update_file_in_place(
        path, _suffix_reference("ref", step_action_name, suffix), runner=runner
    )
    for definition_name in _definition_names(path, runner=runner):
        for reference_key in ("taskRef", "pipelineRef"):
            update_file_in_place(
                path, _suffix_reference(reference_key, definition_name, suffix), runner=runner
            )
    update_file_in_place(path, _append_suffix(".metadata.name", suffix), runner=runner)


def _definition_names(path: Path | str, *, runner: CommandRunner) -> list[str]:
    output = read_file_field(path, _DEFINITION_NAMES_QUERY, runner=runner)
    return [
        line.strip()
        for line in output.splitlines()
        if line.strip() and line.strip() not in ("---", "null")
    ]


def _append_suffix(path_expression: str, suffix: str) -> str:
    return f'({path_expression}) += "-{suffix}"'


def _suffix_reference(key: str, name: str, suffix: str) -> str:
    return (
        f'(.. | select(has("{key}")) | select(.{key}.name == "{name}") | .{key}.name)'
        f' += "-{suffix}"'
    )
