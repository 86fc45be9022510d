"""kubectl client tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from catalog_e2e_tester.cluster_access import KubectlClient
from catalog_e2e_tester.command_running import CommandResult
from catalog_e2e_tester.run_identification import RunIdentifier, RunKind


class RecordingRunner:
    def __init__(self) -> None:
        self.calls: list[tuple[str, ...]] = []
        self.timeouts: list[float | None] = []

    def __call__(self, program, *args, stdin=None, timeout=None, check=True):
        self.calls.append((program, *args))
        self.timeouts.append(timeout)
        return CommandResult(command=(program, *args), output="ok", returncode=0)


def test_commands_target_the_namespace_without_kubeconfig() -> None:
    runner = RecordingRunner()
    kubectl = KubectlClient(runner=runner, timeout_seconds=45)
    run = RunIdentifier(name="clone-run", kind=RunKind.TASK_RUN)

    kubectl.apply(Path("/w/run.yaml"), "scope-1")
    kubectl.get_yaml(run, "scope-1")

    assert runner.calls == [
        ("kubectl", "apply", "-f", "/w/run.yaml", "-n", "scope-1"),
        ("kubectl", "get", "taskruns/clone-run", "-n", "scope-1", "-o", "yaml"),
    ]
    assert runner.timeouts == [45, 45]


def test_logs_prefer_pod_over_selector() -> None:
    runner = RecordingRunner()
    kubectl = KubectlClient(runner=runner, kubeconfig=Path("/kube/config"))

    kubectl.logs("scope-1", pod="clone-run-pod")
    kubectl.logs("scope-1", selector="tekton.dev/taskRun=clone-run")

    assert runner.calls == [
        (
            "kubectl",
            "--kubeconfig",
            "/kube/config",
            "logs",
            "clone-run-pod",
            "-n",
            "scope-1",
            "--all-containers",
        ),
        (
            "kubectl",
            "--kubeconfig",
            "/kube/config",
            "logs",
            "-l",
            "tekton.dev/taskRun=clone-run",
            "--tail=-1",
            "-n",
            "scope-1",
            "--all-containers",
        ),
    ]


def test_logs_need_a_target() -> None:
    with pytest.raises(ValueError):
        KubectlClient(runner=RecordingRunner()).logs("scope-1")
