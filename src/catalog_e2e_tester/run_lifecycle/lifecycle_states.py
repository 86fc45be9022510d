"""Run lifecycle entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from catalog_e2e_tester.run_identification import RunIdentifier


class RunState(str, Enum):
    """States a test run moves through, from manifest to terminal outcome."""

    CREATED = "created"
    SUBMITTED = "submitted"
    WATCHING = "watching"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @property
    def terminal(self) -> bool:
        return self in (RunState.SUCCEEDED, RunState.FAILED, RunState.TIMED_OUT)


ALLOWED_TRANSITIONS: dict[RunState, frozenset[RunState]] = {
    RunState.CREATED: frozenset({RunState.SUBMITTED, RunState.FAILED}),
    RunState.SUBMITTED: frozenset({RunState.WATCHING, RunState.FAILED}),
    RunState.WATCHING: frozenset({RunState.SUCCEEDED, RunState.FAILED, RunState.TIMED_OUT}),
    RunState.SUCCEEDED: frozenset(),
    RunState.FAILED: frozenset(),
    RunState.TIMED_OUT: frozenset(),
}


class WaitOutcome(str, Enum):
    """Terminal result of waiting for a run."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @property
    def state(self) -> RunState:
        return RunState(self.value)


class LifecycleStateError(Exception):
    """Raised on an operation the current lifecycle state does not allow."""


class RunWaitError(Exception):
    """Raised when a run that had to succeed did not."""

    def __init__(self, result: WaitResult) -> None:
        message = f"{result.run.kind.manifest_kind} {result.run.name} {result.outcome.value}"
        if result.reason:
            message += f": {result.reason}"
        if result.diagnostics:
            message += f"\n{result.diagnostics}"
        super().__init__(message)
        self.result = result


@dataclass(frozen=True)
class WaitResult:
    """Outcome of one wait together with what explains it."""

    outcome: WaitOutcome
    run: RunIdentifier
    reason: str = ""
    diagnostics: str = ""

    @property
    def succeeded(self) -> bool:
        return self.outcome is WaitOutcome.SUCCEEDED

    def raise_for_outcome(self) -> None:
        if not self.succeeded:
            raise RunWaitError(self)
