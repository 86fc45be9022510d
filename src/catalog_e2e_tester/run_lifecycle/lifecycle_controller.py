"""State machine driving one test run from manifest to terminal outcome."""

from __future__ import annotations

import logging
from pathlib import Path

from catalog_e2e_tester.configuration.loader import (
    DEFAULT_EXPECTED_CONDITION,
    DEFAULT_WATCH_TIMEOUT_SECONDS,
)
from catalog_e2e_tester.configuration.runtime_settings import ExecutionSettings
from catalog_e2e_tester.run_identification import RunIdentifier
from catalog_e2e_tester.scope_management import ExecutionScope, PublishedStepAction

from .execution_strategies import ExecutionStrategy
from .lifecycle_states import (
    ALLOWED_TRANSITIONS,
    LifecycleStateError,
    RunState,
    WaitOutcome,
    WaitResult,
)

_LOGGER = logging.getLogger(__name__)


class RunLifecycleController:
    """Drive one run through submit, watch, and a terminal state.

    The controller owns no resources: the scope it runs in is released by the
    scope manager that created it. `execution` supplies the expected condition
    and watch timeout used when `wait_for_completion` is called without them.
    """

    def __init__(
        self,
        strategy: ExecutionStrategy,
        scope: ExecutionScope,
        *,
        published: PublishedStepAction | None = None,
        execution: ExecutionSettings | None = None,
    ) -> None:
        self._strategy = strategy
        self._scope = scope
        self._published = published
        self._expected_condition = (
            execution.expected_condition if execution else DEFAULT_EXPECTED_CONDITION
        )
        self._timeout_seconds = (
            execution.watch_timeout_seconds if execution else DEFAULT_WATCH_TIMEOUT_SECONDS
        )
        self._state = RunState.CREATED
        self._history: list[RunState] = [RunState.CREATED]
        self._run: RunIdentifier | None = None
        self._result: WaitResult | None = None

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def history(self) -> tuple[RunState, ...]:
        return tuple(self._history)

    @property
    def scope(self) -> ExecutionScope:
        return self._scope

    @property
    def run(self) -> RunIdentifier:
        if self._run is None:
            raise LifecycleStateError("no run has been submitted yet")
        return self._run

    @property
    def submitted_run(self) -> RunIdentifier | None:
        return self._run

    @property
    def result(self) -> WaitResult | None:
        return self._result

    def submit(self, manifest_path: Path | str) -> RunIdentifier:
        """Apply the test manifest and start watching the run it creates."""
        self._require_state(RunState.CREATED, "submit")
        try:
            run = self._strategy.submit(Path(manifest_path), self._scope, self._published)
        except Exception:
            self._transition(RunState.FAILED)
            raise
        self._run = run
        self._transition(RunState.SUBMITTED)
        self._transition(RunState.WATCHING)
        return run

    def wait_for_completion(
        self,
        expected_condition: str | None = None,
        timeout_seconds: int | None = None,
    ) -> WaitResult:
        """Block until the run reaches a terminal outcome or the timeout elapses."""
        self._require_state(RunState.WATCHING, "wait for completion")
        if expected_condition is None:
            expected_condition = self._expected_condition
        if timeout_seconds is None:
            timeout_seconds = self._timeout_seconds
        try:
            result = self._strategy.wait(
                self.run,
                self._scope,
                expected_condition=expected_condition,
                timeout_seconds=timeout_seconds,
            )
        except Exception:
            self._transition(RunState.FAILED)
            raise
        self._result = result
        self._transition(result.outcome.state)
        log = _LOGGER.info if result.outcome is WaitOutcome.SUCCEEDED else _LOGGER.warning
        log("%s finished as %s %s", self.run.resource, result.outcome.value, result.reason)
        return result

    def fetch_document(self) -> str:
        """Current status document of the submitted run."""
        return self._strategy.fetch_document(self.run, self._scope)

    def extract_field(self, expression: str) -> str:
        return self._strategy.extract_field(self.run, self._scope, expression)

    def _require_state(self, expected: RunState, operation: str) -> None:
        if self._state is not expected:
            raise LifecycleStateError(
                f"cannot {operation} in state {self._state.value}; expected {expected.value}"
            )

    def _transition(self, target: RunState) -> None:
        if target not in ALLOWED_TRANSITIONS[self._state]:
            raise LifecycleStateError(
                f"illegal transition {self._state.value} -> {target.value}"
            )
        _LOGGER.debug("scope %s: %s -> %s", self._scope.id, self._state.value, target.value)
        self._state = target
        self._history.append(target)
