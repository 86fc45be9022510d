"""OCI bundle publishing for StepActions under test."""

from __future__ import annotations

from pathlib import Path

from catalog_e2e_tester.command_running import CommandRunner, run_command

TKN_PROGRAM = "tkn"
GCLOUD_PROGRAM = "gcloud"


class BundleRegistry:
    """Push and delete Tekton bundles in one OCI repository."""

    def __init__(
        self,
        repository: str,
        *,
        runner: CommandRunner = run_command,
        timeout_seconds: float | None = None,
    ) -> None:
        self._repository = repository.rstrip("/")
        self._runner = runner
        self._timeout_seconds = timeout_seconds

    def reference(self, step_action_name: str, tag: str) -> str:
        """Content reference `<repository>/<name>:<tag>` for one bundle."""
        return f"{self._repository}/{step_action_name}:{tag}"

    def push(self, bundle_ref: str, manifest_path: Path | str) -> None:
        self._runner(
            TKN_PROGRAM,
            "bundle",
            "push",
            bundle_ref,
            "-f",
            str(manifest_path),
            timeout=self._timeout_seconds,
        )

    def delete(self, bundle_ref: str) -> None:
        self._runner(
            GCLOUD_PROGRAM,
            "artifacts",
            "docker",
            "images",
            "delete",
            bundle_ref,
            "--delete-tags",
            "--quiet",
            timeout=self._timeout_seconds,
        )
