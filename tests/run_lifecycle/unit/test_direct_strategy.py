"""Direct execution strategy tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from catalog_e2e_tester.cluster_access import KubectlClient, KubernetesRunWatcher, WatchEvent
from catalog_e2e_tester.cluster_access import run_watcher as run_watcher_module
from catalog_e2e_tester.command_running import CommandError, CommandResult
from catalog_e2e_tester.configuration import ExecutionMode
from catalog_e2e_tester.run_identification import RunIdentifier, RunKind, RunNotFoundError
from catalog_e2e_tester.run_lifecycle import DirectExecutionStrategy, WaitOutcome
from catalog_e2e_tester.scope_management import ExecutionScope
from urllib3.exceptions import ProtocolError

_SCOPE = ExecutionScope(id="scope-1", mode=ExecutionMode.DIRECT)
_RUN = RunIdentifier(name="clone-run", kind=RunKind.TASK_RUN)


class FakeKubectlRunner:
    def __init__(self, apply_output: str = "", fail_logs: bool = False) -> None:
        self.apply_output = apply_output
        self.fail_logs = fail_logs
        self.calls: list[tuple[str, ...]] = []

    def __call__(self, program, *args, stdin=None, timeout=None, check=True):
        command = (program, *args)
        self.calls.append(command)
        if args[0] == "logs":
            if self.fail_logs:
                raise CommandError("Command failed", command=command, output="pods not found")
            return CommandResult(command=command, output="step-clone: fatal", returncode=0)
        if args[0] == "apply":
            return CommandResult(command=command, output=self.apply_output, returncode=0)
        return CommandResult(command=command, output="", returncode=0)


class FakeWatcher:
    def __init__(self, *events: WatchEvent) -> None:
        self.events = events
        self.requests: list[tuple[RunIdentifier, str, int]] = []

    def stream(self, run, namespace, timeout_seconds):
        self.requests.append((run, namespace, timeout_seconds))
        return iter(self.events)


def _status(status: str, *, pod: str | None = "clone-run-pod", reason: str = "") -> dict:
    condition = {"type": "Succeeded", "status": status}
    if reason:
        condition["reason"] = reason
    body: dict = {"conditions": [condition]}
    if pod:
        body["podName"] = pod
    return {"metadata": {"name": "clone-run"}, "status": body}


def _strategy(runner: FakeKubectlRunner, watcher: FakeWatcher) -> DirectExecutionStrategy:
    return DirectExecutionStrategy(
        KubectlClient(runner=runner), watcher, runner=runner, clock=lambda: 0.0
    )


def _wait(strategy: DirectExecutionStrategy):
    return strategy.wait(_RUN, _SCOPE, expected_condition="Succeeded", timeout_seconds=60)


def test_submit_applies_into_scope_namespace_and_parses_run() -> None:
    runner = FakeKubectlRunner(apply_output="taskrun.tekton.dev/clone-run-x7 created\n")

    run = _strategy(runner, FakeWatcher()).submit(Path("/w/basic.yaml"), _SCOPE)

    assert run == RunIdentifier(name="clone-run-x7", kind=RunKind.TASK_RUN)
    assert runner.calls == [("kubectl", "apply", "-f", "/w/basic.yaml", "-n", "scope-1")]


def test_submit_without_created_run_raises() -> None:
    runner = FakeKubectlRunner(apply_output="taskrun.tekton.dev/clone-run unchanged\n")

    with pytest.raises(RunNotFoundError):
        _strategy(runner, FakeWatcher()).submit(Path("/w/basic.yaml"), _SCOPE)


def test_true_condition_succeeds_without_fetching_logs() -> None:
    runner = FakeKubectlRunner()
    watcher = FakeWatcher(
        WatchEvent(type="ADDED", object=_status("Unknown")),
        WatchEvent(type="MODIFIED", object=_status("True")),
    )

    result = _wait(_strategy(runner, watcher))

    assert result.outcome is WaitOutcome.SUCCEEDED
    assert result.succeeded is True
    assert watcher.requests == [(_RUN, "scope-1", 60)]
    assert not any(call[1] == "logs" for call in runner.calls)


def test_false_condition_fails_with_pod_logs() -> None:
    runner = FakeKubectlRunner()
    watcher = FakeWatcher(WatchEvent(type="MODIFIED", object=_status("False", reason="Failed")))

    result = _wait(_strategy(runner, watcher))

    assert result.outcome is WaitOutcome.FAILED
    assert "Succeeded=False" in result.reason
    assert result.diagnostics == "step-clone: fatal"
    assert runner.calls[-1] == (
        "kubectl",
        "logs",
        "clone-run-pod",
        "-n",
        "scope-1",
        "--all-containers",
    )


def test_stream_ending_before_completion_times_out_and_fetches_logs_by_label() -> None:
    runner = FakeKubectlRunner()
    watcher = FakeWatcher(WatchEvent(type="ADDED", object=_status("Unknown", pod=None)))

    result = _wait(_strategy(runner, watcher))

    assert result.outcome is WaitOutcome.TIMED_OUT
    assert "timed out after 60s" in result.reason
    assert ("-l", "tekton.dev/taskRun=clone-run") == runner.calls[-1][2:4]


def test_error_event_fails_and_log_failures_are_reported() -> None:
    runner = FakeKubectlRunner(fail_logs=True)
    watcher = FakeWatcher(WatchEvent(type="ERROR", object={"message": "too old resource version"}))

    result = _wait(_strategy(runner, watcher))

    assert result.outcome is WaitOutcome.FAILED
    assert "too old resource version" in result.reason
    assert result.diagnostics.startswith("log retrieval failed:")


def test_deadline_stops_reading_events() -> None:
    ticks = iter([0.0, 61.0])
    runner = FakeKubectlRunner()
    watcher = FakeWatcher(
        WatchEvent(type="MODIFIED", object=_status("Unknown")),
        WatchEvent(type="MODIFIED", object=_status("True")),
    )
    strategy = DirectExecutionStrategy(
        KubectlClient(runner=runner), watcher, runner=runner, clock=lambda: next(ticks)
    )

    result = strategy.wait(_RUN, _SCOPE, expected_condition="Succeeded", timeout_seconds=60)

    assert result.outcome is WaitOutcome.TIMED_OUT


def test_stalled_watch_times_out_with_logs() -> None:
    runner = FakeKubectlRunner()
    watcher = FakeWatcher(
        WatchEvent(type="ADDED", object=_status("Unknown")),
        WatchEvent(type="TIMEOUT", object={"message": "Read timed out."}),
    )

    result = _wait(_strategy(runner, watcher))

    assert result.outcome is WaitOutcome.TIMED_OUT
    assert result.diagnostics == "step-clone: fatal"


class BrokenConnectionWatch:
    def stream(self, func, **kwargs):
        yield {"type": "ADDED", "object": _status("Unknown")}
        raise ProtocolError("Connection broken: IncompleteRead")

    def stop(self) -> None:
        pass


class UnusedApi:
    def list_namespaced_custom_object(self, **kwargs):  # pragma: no cover - never called
        raise AssertionError("the fake watch does not call the list function")


def test_broken_watch_connection_fails_with_logs(monkeypatch) -> None:
    monkeypatch.setattr(run_watcher_module.watch, "Watch", BrokenConnectionWatch)
    runner = FakeKubectlRunner()
    strategy = DirectExecutionStrategy(
        KubectlClient(runner=runner),
        KubernetesRunWatcher(api=UnusedApi()),
        runner=runner,
        clock=lambda: 0.0,
    )

    result = _wait(strategy)

    assert result.outcome is WaitOutcome.FAILED
    assert "IncompleteRead" in result.reason
    assert result.diagnostics == "step-clone: fatal"
