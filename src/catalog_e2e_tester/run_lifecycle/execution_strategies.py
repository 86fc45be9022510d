"""Execution strategy contract and its selection from configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from catalog_e2e_tester.cluster_access import KubectlClient, KubernetesRunWatcher, RunWatcher
from catalog_e2e_tester.command_running import CommandRunner, run_command
from catalog_e2e_tester.configuration.runtime_settings import ExecutionMode, HarnessConfiguration
from catalog_e2e_tester.managed_builds import CloudBuildCli
from catalog_e2e_tester.run_identification import RunIdentifier
from catalog_e2e_tester.scope_management import ExecutionScope, PublishedStepAction

from .direct_strategy import DirectExecutionStrategy
from .lifecycle_states import WaitResult
from .managed_strategy import ManagedExecutionStrategy


class ExecutionStrategy(Protocol):
    """Capabilities every execution path provides to the lifecycle controller."""

    def submit(
        self,
        manifest_path: Path,
        scope: ExecutionScope,
        published: PublishedStepAction | None = None,
    ) -> RunIdentifier: ...

    def wait(
        self,
        run: RunIdentifier,
        scope: ExecutionScope,
        *,
        expected_condition: str,
        timeout_seconds: int,
    ) -> WaitResult: ...

    def fetch_document(self, run: RunIdentifier, scope: ExecutionScope) -> str: ...

    def extract_field(self, run: RunIdentifier, scope: ExecutionScope, expression: str) -> str: ...


def select_strategy(
    configuration: HarnessConfiguration,
    *,
    runner: CommandRunner = run_command,
    watcher: RunWatcher | None = None,
) -> ExecutionStrategy:
    """Build the strategy for the configured mode; called once per process."""
    timeout = configuration.execution.command_timeout_seconds
    if configuration.mode is ExecutionMode.MANAGED:
        if configuration.managed is None:
            raise ValueError("managed mode requires the managed configuration section")
        return ManagedExecutionStrategy(
            configuration.managed,
            CloudBuildCli(configuration.managed, runner=runner, timeout_seconds=timeout),
            poll_interval_seconds=configuration.execution.poll_interval_seconds,
            runner=runner,
        )
    kubeconfig = configuration.cluster.kubeconfig
    return DirectExecutionStrategy(
        KubectlClient(runner=runner, kubeconfig=kubeconfig, timeout_seconds=timeout),
        watcher or KubernetesRunWatcher(kubeconfig=kubeconfig),
        runner=runner,
    )
