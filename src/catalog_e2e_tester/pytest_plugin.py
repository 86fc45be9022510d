"""pytest fixtures for writing catalog integration tests.

Enable with `-p catalog_e2e_tester.pytest_plugin` or through the `pytest11`
entry point installed with the package.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from catalog_e2e_tester.configuration import (
    ConfigurationError,
    HarnessConfiguration,
    load_configuration,
)
from catalog_e2e_tester.manifest_preparation import load_fixture
from catalog_e2e_tester.run_execution import start_test_manifest
from catalog_e2e_tester.run_lifecycle import (
    ExecutionStrategy,
    RunLifecycleController,
    select_strategy,
)
from catalog_e2e_tester.scope_management import (
    ExecutionScope,
    ScopeManager,
    build_scope_manager,
)

CONFIG_ENV_VAR = "CATALOG_E2E_CONFIG"

CatalogRunFactory = Callable[[Path | str, str], RunLifecycleController]


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("catalog-e2e")
    group.addoption(
        "--catalog-config",
        action="store",
        default=None,
        help=f"Harness configuration file (falls back to ${CONFIG_ENV_VAR}).",
    )


def resolve_config_path(option_value: str | None) -> str | None:
    return option_value or os.environ.get(CONFIG_ENV_VAR) or None


@pytest.fixture(scope="session")
def catalog_configuration(pytestconfig: pytest.Config) -> HarnessConfiguration:
    """Harness configuration loaded once per test session."""
    config_path = resolve_config_path(pytestconfig.getoption("--catalog-config"))
    try:
        return load_configuration(config_path)
    except ConfigurationError as exc:
        raise pytest.UsageError(f"invalid catalog configuration: {exc}") from exc


@pytest.fixture(scope="session")
def catalog_strategy(catalog_configuration: HarnessConfiguration) -> ExecutionStrategy:
    return select_strategy(catalog_configuration)


@pytest.fixture(scope="session")
def catalog_scope_manager(catalog_configuration: HarnessConfiguration) -> ScopeManager:
    return build_scope_manager(catalog_configuration)


@pytest.fixture
def execution_scope(catalog_scope_manager: ScopeManager) -> Iterator[ExecutionScope]:
    """A fresh scope, released after the test whatever its outcome."""
    with catalog_scope_manager.scoped() as scope:
        yield scope


@pytest.fixture
def catalog_run(  # pylint: disable=too-many-arguments
    catalog_configuration: HarnessConfiguration,
    execution_scope: ExecutionScope,
    catalog_strategy: ExecutionStrategy,
    catalog_scope_manager: ScopeManager,
    tmp_path: Path,
) -> CatalogRunFactory:
    """Factory submitting `tests/<manifest>` of a StepAction directory into the test's scope.

    The returned controller waits with the configured expected condition and
    watch timeout unless `wait_for_completion` is given others.

    Usage::

        def test_git_clone(catalog_run):
            controller = catalog_run("stepactions/git-clone", "basic.yaml")
            controller.wait_for_completion().raise_for_outcome()
            assert_field_not_empty(controller, ".status.results[0].value")
    """

    def _start(step_action_dir: Path | str, manifest_name: str) -> RunLifecycleController:
        fixture = load_fixture(step_action_dir)
        matches = [path for path in fixture.test_files if path.name == manifest_name]
        if not matches:
            raise pytest.UsageError(f"{manifest_name} not found in {fixture.root / 'tests'}")
        return start_test_manifest(
            matches[0],
            execution_scope,
            fixture=fixture,
            strategy=catalog_strategy,
            scope_manager=catalog_scope_manager,
            work_root=tmp_path,
            execution=catalog_configuration.execution,
        )

    return _start
