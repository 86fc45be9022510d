"""Manifest preparation exports."""

from .fixture_layout import (
    CatalogFixture,
    FixtureLayoutError,
    copy_fixture,
    load_fixture,
    locate_step_action_file,
)
from .name_suffixing import read_step_action_name, suffix_fixture_names, suffix_test_file

__all__ = [
    "CatalogFixture",
    "FixtureLayoutError",
    "copy_fixture",
    "load_fixture",
    "locate_step_action_file",
    "read_step_action_name",
    "suffix_fixture_names",
    "suffix_test_file",
]
