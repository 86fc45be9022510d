"""Managed execution path: submit Cloud Build v2 runs and poll their status."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

from catalog_e2e_tester.cluster_access.run_status import find_condition
from catalog_e2e_tester.command_running import CommandRunner, run_command
from catalog_e2e_tester.configuration.runtime_settings import ManagedBuildSettings
from catalog_e2e_tester.field_extraction import extract_field
from catalog_e2e_tester.managed_builds import CloudBuildCli, prepare_managed_document
from catalog_e2e_tester.run_identification import RunIdentifier
from catalog_e2e_tester.scope_management import ExecutionScope, PublishedStepAction

from .lifecycle_states import WaitOutcome, WaitResult

STATUS_TRUE = "TRUE"
STATUS_FALSE = "FALSE"

_LOGGER = logging.getLogger(__name__)


class ManagedExecutionStrategy:
    """Submit rewritten run documents with gcloud and poll `builds runs describe`."""

    def __init__(  # pylint: disable=too-many-arguments
        self,
        settings: ManagedBuildSettings,
        cloud_build: CloudBuildCli,
        *,
        poll_interval_seconds: float,
        runner: CommandRunner = run_command,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settings = settings
        self._cloud_build = cloud_build
        self._poll_interval_seconds = poll_interval_seconds
        self._runner = runner
        self._sleep = sleep
        self._clock = clock

    def submit(
        self,
        manifest_path: Path,
        scope: ExecutionScope,
        published: PublishedStepAction | None = None,
    ) -> RunIdentifier:
        source = Path(manifest_path)
        document = prepare_managed_document(
            source.read_text(encoding="utf-8"),
            name=f"{self._settings.name_prefix}{scope.id}",
            service_account=self._settings.service_account,
            step_action_name=published.name if published else None,
            bundle_ref=published.bundle_ref if published else None,
        )
        target = source.with_name(f"{source.stem}.managed{source.suffix}")
        target.write_text(document.text, encoding="utf-8")
        self._cloud_build.apply_run(target)
        _LOGGER.info("submitted managed run %s", document.run.name)
        return document.run

    def wait(
        self,
        run: RunIdentifier,
        scope: ExecutionScope,
        *,
        expected_condition: str,
        timeout_seconds: int,
    ) -> WaitResult:
        """Poll until the condition turns TRUE or FALSE, or the deadline passes."""
        deadline = self._clock() + timeout_seconds
        while True:
            description, raw = self._cloud_build.describe_run(run.name)
            condition = find_condition(_conditions(description), expected_condition)
            status = condition.get("status") if condition else None
            if status == STATUS_TRUE:
                return WaitResult(outcome=WaitOutcome.SUCCEEDED, run=run)
            if condition is not None and status == STATUS_FALSE:
                reason = condition.get("reason") or condition.get("message") or ""
                return WaitResult(
                    outcome=WaitOutcome.FAILED,
                    run=run,
                    reason=f"{expected_condition}=FALSE: {reason}",
                    diagnostics=raw,
                )
            remaining = deadline - self._clock()
            if remaining <= 0:
                return WaitResult(
                    outcome=WaitOutcome.TIMED_OUT,
                    run=run,
                    reason=f"status still {status or 'unreported'} after {timeout_seconds}s",
                    diagnostics=raw,
                )
            _LOGGER.debug("run %s status %s, polling again", run.name, status)
            self._sleep(min(self._poll_interval_seconds, remaining))

    def fetch_document(self, run: RunIdentifier, scope: ExecutionScope) -> str:
        return self._cloud_build.describe_run(run.name)[1]

    def extract_field(self, run: RunIdentifier, scope: ExecutionScope, expression: str) -> str:
        return extract_field(self.fetch_document(run, scope), expression, runner=self._runner)


def _conditions(description: Mapping[str, Any]) -> Sequence[Mapping[str, Any]]:
    conditions = description.get("conditions")
    if conditions is None:
        conditions = (description.get("status") or {}).get("conditions")
    return [condition for condition in conditions or [] if isinstance(condition, Mapping)]
