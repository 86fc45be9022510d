"""kubectl invocations used by the direct execution path."""

from __future__ import annotations

from pathlib import Path

from catalog_e2e_tester.command_running import CommandResult, CommandRunner, run_command
from catalog_e2e_tester.run_identification import RunIdentifier

KUBECTL_PROGRAM = "kubectl"


class KubectlClient:
    """Thin wrapper adding kubeconfig and deadline handling to kubectl calls."""

    def __init__(
        self,
        *,
        runner: CommandRunner = run_command,
        kubeconfig: Path | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self._runner = runner
        self._kubeconfig = kubeconfig
        self._timeout_seconds = timeout_seconds

    def apply(self, manifest_path: Path | str, namespace: str) -> str:
        """Apply a manifest file into `namespace` and return kubectl's output."""
        return self._run("apply", "-f", str(manifest_path), "-n", namespace).output

    def get_yaml(self, run: RunIdentifier, namespace: str) -> str:
        return self._run("get", run.resource, "-n", namespace, "-o", "yaml").output

    def create_namespace(self, namespace: str) -> None:
        self._run("create", "namespace", namespace)

    def delete_namespace(self, namespace: str) -> None:
        """Delete the namespace and everything in it."""
        self._run("delete", "namespace", namespace)

    def logs(
        self,
        namespace: str,
        *,
        pod: str | None = None,
        selector: str | None = None,
    ) -> str:
        """Fetch combined container logs for one pod or a label selector.

        Selector lookups pass `--tail=-1`; kubectl keeps only ten lines per
        container otherwise.
        """
        target: tuple[str, ...]
        if pod:
            target = (pod,)
        elif selector:
            target = ("-l", selector, "--tail=-1")
        else:
            raise ValueError("Either pod or selector is required to fetch logs.")
        return self._run("logs", *target, "-n", namespace, "--all-containers").output

    def _run(self, *args: str) -> CommandResult:
        prefix: tuple[str, ...] = ()
        if self._kubeconfig is not None:
            prefix = ("--kubeconfig", str(self._kubeconfig))
        return self._runner(KUBECTL_PROGRAM, *prefix, *args, timeout=self._timeout_seconds)
