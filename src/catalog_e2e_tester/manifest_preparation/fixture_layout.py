"""Catalog fixture discovery and per-scope copies."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

TESTS_DIRNAME = "tests"
MANIFEST_GLOB = "*.yaml"


class FixtureLayoutError(Exception):
    """Raised when a StepAction directory does not follow the catalog layout."""


@dataclass(frozen=True)
class CatalogFixture:
    """One StepAction manifest with the test manifests that exercise it."""

    root: Path
    step_action_file: Path
    test_files: tuple[Path, ...]


def locate_step_action_file(source_dir: Path | str) -> Path:
    """Return the single top-level YAML file of a StepAction directory."""
    directory = Path(source_dir)
    candidates = sorted(directory.glob(MANIFEST_GLOB))
    if not candidates:
        raise FixtureLayoutError(f"no YAML file found in {directory}")
    if len(candidates) > 1:
        raise FixtureLayoutError(f"multiple YAML files found in {directory}")
    return candidates[0]


def load_fixture(source_dir: Path | str) -> CatalogFixture:
    directory = Path(source_dir)
    return CatalogFixture(
        root=directory,
        step_action_file=locate_step_action_file(directory),
        test_files=tuple(sorted((directory / TESTS_DIRNAME).glob(MANIFEST_GLOB))),
    )


def copy_fixture(
    fixture: CatalogFixture,
    destination_dir: Path | str,
    *,
    test_files: tuple[Path, ...] | None = None,
) -> CatalogFixture:
    """Copy the StepAction and the selected test manifests into `destination_dir`.

    Args:
      fixture: Source fixture.
      destination_dir: Directory receiving the copy; created when missing.
      test_files: Subset of `fixture.test_files` to copy, all of them by default.

    Returns:
      The fixture describing the copied files.
    """
    destination = Path(destination_dir)
    selected = fixture.test_files if test_files is None else test_files
    unknown = [path for path in selected if path not in fixture.test_files]
    if unknown:
        raise FixtureLayoutError(f"test manifests not part of {fixture.root}: {unknown}")

    destination.mkdir(parents=True, exist_ok=True)
    step_action_copy = destination / fixture.step_action_file.name
    shutil.copyfile(fixture.step_action_file, step_action_copy)

    copied_tests: list[Path] = []
    if selected:
        tests_dir = destination / TESTS_DIRNAME
        tests_dir.mkdir(parents=True, exist_ok=True)
        for test_file in selected:
            target = tests_dir / test_file.name
            shutil.copyfile(test_file, target)
            copied_tests.append(target)

    return CatalogFixture(
        root=destination,
        step_action_file=step_action_copy,
        test_files=tuple(copied_tests),
    )
