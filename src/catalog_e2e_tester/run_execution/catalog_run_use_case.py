"""Run execution use-case service."""

from __future__ import annotations

import logging
import tempfile
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from catalog_e2e_tester.cluster_access import RunWatcher
from catalog_e2e_tester.command_running import CommandError, CommandRunner, run_command
from catalog_e2e_tester.configuration import (
    ConfigurationError,
    ExecutionSettings,
    HarnessConfiguration,
    load_configuration,
)
from catalog_e2e_tester.field_extraction import FieldExtractionError
from catalog_e2e_tester.managed_builds import BuildDescriptionError, BuildDocumentError
from catalog_e2e_tester.manifest_preparation import (
    CatalogFixture,
    FixtureLayoutError,
    copy_fixture,
    load_fixture,
    suffix_fixture_names,
)
from catalog_e2e_tester.results_writing import (
    CaseResult,
    CaseStatus,
    RunMetadata,
    write_results_workbook,
)
from catalog_e2e_tester.run_assertions import RunAssertionError, assert_field_not_empty
from catalog_e2e_tester.run_identification import RunNotFoundError
from catalog_e2e_tester.run_lifecycle import (
    ExecutionStrategy,
    LifecycleStateError,
    RunLifecycleController,
    WaitOutcome,
    select_strategy,
)
from catalog_e2e_tester.scope_management import (
    ExecutionScope,
    ScopeError,
    ScopeManager,
    build_scope_manager,
)

from .run_contracts import RunOutcome, RunRequest

_LOGGER = logging.getLogger(__name__)

_CASE_ERRORS = (
    CommandError,
    RunNotFoundError,
    FieldExtractionError,
    BuildDocumentError,
    BuildDescriptionError,
    FixtureLayoutError,
    LifecycleStateError,
    ScopeError,
    OSError,
)
_DIAGNOSTICS_TAIL = 2000
_STATUS_BY_OUTCOME = {
    WaitOutcome.SUCCEEDED: CaseStatus.PASSED,
    WaitOutcome.FAILED: CaseStatus.FAILED,
    WaitOutcome.TIMED_OUT: CaseStatus.TIMED_OUT,
}


class RunExecutionError(Exception):
    """Raised when a run use case cannot be completed."""


@dataclass(frozen=True)
class _CaseContext:
    """Collaborators shared by every test manifest of one run."""

    configuration: HarnessConfiguration
    fixture: CatalogFixture
    strategy: ExecutionStrategy
    scope_manager: ScopeManager
    work_root: Path
    required_fields: tuple[str, ...]
    runner: CommandRunner
    clock: Callable[[], float]


# pylint: disable=too-many-arguments
def execute_catalog_test_run(
    request: RunRequest,
    *,
    runner: CommandRunner = run_command,
    watcher: RunWatcher | None = None,
    strategy_factory: Callable[..., ExecutionStrategy] = select_strategy,
    scope_manager_factory: Callable[..., ScopeManager] = build_scope_manager,
    environ: Mapping[str, str] | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> RunOutcome:
    """Run every test manifest of a StepAction directory and write the results workbook."""
    try:
        configuration = load_configuration(request.config_path, environ=environ)
        fixture = load_fixture(request.step_action_dir)
    except (ConfigurationError, FixtureLayoutError, OSError) as exc:
        raise RunExecutionError(str(exc)) from exc
    if not fixture.test_files:
        raise RunExecutionError(f"no test manifests found in {fixture.root / 'tests'}")

    try:
        strategy = strategy_factory(configuration, runner=runner, watcher=watcher)
        scope_manager = scope_manager_factory(configuration, runner=runner)
    except (ValueError, ScopeError) as exc:
        raise RunExecutionError(str(exc)) from exc

    context = _CaseContext(
        configuration=configuration,
        fixture=fixture,
        strategy=strategy,
        scope_manager=scope_manager,
        work_root=_resolve_work_root(request.work_dir),
        required_fields=request.required_fields,
        runner=runner,
        clock=clock,
    )
    run_start = datetime.now(UTC)
    results = tuple(_run_case(test_file, context) for test_file in fixture.test_files)

    output_path = _resolve_output_path(fixture.root, request.output_dir)
    try:
        written = write_results_workbook(
            output_path,
            results,
            RunMetadata(
                run_start=run_start,
                step_action_dir=fixture.root.resolve(),
                output_path=output_path.resolve(),
                mode=configuration.mode.value,
                expected_condition=configuration.execution.expected_condition,
                timeout_seconds=configuration.execution.watch_timeout_seconds,
            ),
        )
    except OSError as exc:
        raise RunExecutionError(f"failed to write results workbook: {exc}") from exc
    return RunOutcome(output_path=written, results=results)


# pylint: enable=too-many-arguments


def _run_case(test_file: Path, context: _CaseContext) -> CaseResult:
    started = context.clock()
    try:
        scope = context.scope_manager.acquire()
    except Exception as exc:  # pylint: disable=broad-exception-caught
        _LOGGER.error("could not acquire scope for %s: %s", test_file.name, exc)
        return CaseResult(
            test_file=test_file,
            scope_id="",
            status=CaseStatus.ERROR,
            run=None,
            reason=str(exc),
            duration_seconds=context.clock() - started,
        )

    controller: RunLifecycleController | None = None
    try:
        controller = start_test_manifest(
            test_file,
            scope,
            fixture=context.fixture,
            strategy=context.strategy,
            scope_manager=context.scope_manager,
            work_root=context.work_root,
            runner=context.runner,
            execution=context.configuration.execution,
        )
        status, reason = _execute_case(controller, context)
    except RunAssertionError as exc:
        status, reason = CaseStatus.FAILED, str(exc)
    except _CASE_ERRORS as exc:
        status, reason = CaseStatus.ERROR, str(exc)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        _LOGGER.exception("unexpected error while running %s", test_file.name)
        status, reason = CaseStatus.ERROR, f"{type(exc).__name__}: {exc}"
    finally:
        failures = context.scope_manager.release(scope)

    _LOGGER.info("%s: %s %s", test_file.name, status.value, reason)
    return CaseResult(
        test_file=test_file,
        scope_id=scope.id,
        status=status,
        run=controller.submitted_run if controller is not None else None,
        reason=reason,
        duration_seconds=context.clock() - started,
        cleanup_failures=tuple(
            f"{failure.description}: {failure.error}" for failure in failures
        ),
    )


# pylint: disable=too-many-arguments
def start_test_manifest(
    test_file: Path,
    scope: ExecutionScope,
    *,
    fixture: CatalogFixture,
    strategy: ExecutionStrategy,
    scope_manager: ScopeManager,
    work_root: Path,
    runner: CommandRunner = run_command,
    execution: ExecutionSettings | None = None,
) -> RunLifecycleController:
    """Copy the fixture into the scope, publish its StepAction, and submit one test manifest.

    Returns:
      A controller in the watching state.
    """
    scoped_fixture = copy_fixture(fixture, work_root / scope.id, test_files=(test_file,))
    step_action_name = suffix_fixture_names(scoped_fixture, scope.suffix, runner=runner)
    published = scope_manager.publish_step_action(
        scope, scoped_fixture.step_action_file, step_action_name
    )
    controller = RunLifecycleController(
        strategy, scope, published=published, execution=execution
    )
    controller.submit(scoped_fixture.test_files[0])
    return controller


# pylint: enable=too-many-arguments


def _execute_case(
    controller: RunLifecycleController, context: _CaseContext
) -> tuple[CaseStatus, str]:
    result = controller.wait_for_completion()
    if not result.succeeded:
        if result.diagnostics:
            _LOGGER.warning("diagnostics for %s:\n%s", result.run.resource, result.diagnostics)
        reason = result.reason
        if result.diagnostics:
            reason += f"\n{result.diagnostics[-_DIAGNOSTICS_TAIL:]}"
        return _STATUS_BY_OUTCOME[result.outcome], reason
    for expression in context.required_fields:
        assert_field_not_empty(controller, expression)
    return CaseStatus.PASSED, ""


def _resolve_work_root(work_dir: str | None) -> Path:
    if work_dir:
        root = Path(work_dir)
        root.mkdir(parents=True, exist_ok=True)
        return root
    return Path(tempfile.mkdtemp(prefix="catalog-e2e-"))


def _resolve_output_path(step_action_dir: Path, output_dir: str | None) -> Path:
    destination = Path(output_dir) if output_dir else Path.cwd()
    timestamp = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    return destination / f"{step_action_dir.resolve().name}-results-{timestamp}.xlsx"
