"""Direct execution path: kubectl apply into the scope namespace and watch."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator, Mapping
from pathlib import Path
from typing import Any

from catalog_e2e_tester.cluster_access import KubectlClient, RunWatcher
from catalog_e2e_tester.cluster_access.run_status import (
    describe_conditions,
    is_run_done,
    meets_expected_condition,
    pod_name,
)
from catalog_e2e_tester.cluster_access.run_watcher import ADDED, ERROR, MODIFIED, TIMEOUT
from catalog_e2e_tester.command_running import CommandError, CommandRunner, run_command
from catalog_e2e_tester.field_extraction import extract_field
from catalog_e2e_tester.run_identification import RunIdentifier, RunKind, extract_run_identifier
from catalog_e2e_tester.scope_management import ExecutionScope, PublishedStepAction

from .lifecycle_states import WaitOutcome, WaitResult

_LOGGER = logging.getLogger(__name__)

_RUN_LABELS = {
    RunKind.TASK_RUN: "tekton.dev/taskRun",
    RunKind.PIPELINE_RUN: "tekton.dev/pipelineRun",
}


class DirectExecutionStrategy:
    """Apply manifests with kubectl and follow runs through a watch stream."""

    def __init__(
        self,
        kubectl: KubectlClient,
        watcher: RunWatcher,
        *,
        runner: CommandRunner = run_command,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._kubectl = kubectl
        self._watcher = watcher
        self._runner = runner
        self._clock = clock

    def submit(
        self,
        manifest_path: Path,
        scope: ExecutionScope,
        published: PublishedStepAction | None = None,
    ) -> RunIdentifier:
        output = self._kubectl.apply(manifest_path, scope.namespace)
        run = extract_run_identifier(output)
        _LOGGER.info("created %s in namespace %s", run.resource, scope.namespace)
        return run

    def wait(
        self,
        run: RunIdentifier,
        scope: ExecutionScope,
        *,
        expected_condition: str,
        timeout_seconds: int,
    ) -> WaitResult:
        """Follow the run until it is done, the stream errors, or the deadline passes."""
        deadline = self._clock() + timeout_seconds
        last_seen: Mapping[str, Any] = {}
        events = self._watcher.stream(run, scope.namespace, timeout_seconds)
        try:
            for event in events:
                if event.type == TIMEOUT:
                    break
                if event.type == ERROR:
                    return WaitResult(
                        outcome=WaitOutcome.FAILED,
                        run=run,
                        reason=f"watch error: {event.object.get('message', event.object)}",
                        diagnostics=self._collect_logs(run, scope, last_seen),
                    )
                if event.type in (ADDED, MODIFIED):
                    last_seen = event.object
                    if is_run_done(last_seen):
                        return self._finished_result(run, scope, last_seen, expected_condition)
                if self._clock() >= deadline:
                    break
        finally:
            _close(events)

        return WaitResult(
            outcome=WaitOutcome.TIMED_OUT,
            run=run,
            reason=f"watch timed out after {timeout_seconds}s",
            diagnostics=self._collect_logs(run, scope, last_seen),
        )

    def fetch_document(self, run: RunIdentifier, scope: ExecutionScope) -> str:
        return self._kubectl.get_yaml(run, scope.namespace)

    def extract_field(self, run: RunIdentifier, scope: ExecutionScope, expression: str) -> str:
        return extract_field(self.fetch_document(run, scope), expression, runner=self._runner)

    def _finished_result(
        self,
        run: RunIdentifier,
        scope: ExecutionScope,
        run_object: Mapping[str, Any],
        expected_condition: str,
    ) -> WaitResult:
        if meets_expected_condition(run_object, expected_condition):
            return WaitResult(outcome=WaitOutcome.SUCCEEDED, run=run)
        return WaitResult(
            outcome=WaitOutcome.FAILED,
            run=run,
            reason=(
                f"finished without condition {expected_condition}=True: "
                f"{describe_conditions(run_object)}"
            ),
            diagnostics=self._collect_logs(run, scope, run_object),
        )

    def _collect_logs(
        self, run: RunIdentifier, scope: ExecutionScope, run_object: Mapping[str, Any]
    ) -> str:
        pod = pod_name(run_object)
        selector = None if pod else f"{_RUN_LABELS[run.kind]}={run.name}"
        try:
            return self._kubectl.logs(scope.namespace, pod=pod, selector=selector)
        except CommandError as exc:
            _LOGGER.warning("could not fetch logs for %s: %s", run.resource, exc)
            return f"log retrieval failed: {exc}"


def _close(events: Iterator[Any]) -> None:
    close = getattr(events, "close", None)
    if close is not None:
        close()
