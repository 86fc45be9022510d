"""gcloud invocations for Cloud Build v2 runs."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from catalog_e2e_tester.command_running import CommandRunner, run_command
from catalog_e2e_tester.configuration.runtime_settings import ManagedBuildSettings

GCLOUD_PROGRAM = "gcloud"


class BuildDescriptionError(Exception):
    """Raised when `builds runs describe` output is not a JSON object."""


class CloudBuildCli:
    """Submit and describe Cloud Build v2 runs for one project and region."""

    def __init__(
        self,
        settings: ManagedBuildSettings,
        *,
        runner: CommandRunner = run_command,
        timeout_seconds: float | None = None,
    ) -> None:
        self._settings = settings
        self._runner = runner
        self._timeout_seconds = timeout_seconds

    def apply_run(self, document_path: Path | str) -> str:
        return self._runner(
            GCLOUD_PROGRAM,
            "builds",
            "runs",
            "apply",
            f"--file={document_path}",
            f"--region={self._settings.region}",
            f"--project={self._settings.project}",
            timeout=self._timeout_seconds,
        ).output

    def describe_run(self, run_id: str) -> tuple[Mapping[str, Any], str]:
        """Return the parsed run description together with the raw JSON text."""
        output = self._runner(
            GCLOUD_PROGRAM,
            "builds",
            "runs",
            "describe",
            run_id,
            f"--project={self._settings.project}",
            f"--region={self._settings.region}",
            "--format=json",
            timeout=self._timeout_seconds,
        ).output
        try:
            parsed = json.loads(output)
        except json.JSONDecodeError as exc:
            raise BuildDescriptionError(
                f"failed to parse description of run {run_id}: {exc}\n{output}"
            ) from exc
        if not isinstance(parsed, Mapping):
            raise BuildDescriptionError(f"description of run {run_id} is not an object:\n{output}")
        return parsed, output
