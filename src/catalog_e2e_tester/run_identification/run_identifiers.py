"""Run identification entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RunKind(str, Enum):
    """Tekton execution resource kinds the harness can watch."""

    TASK_RUN = "taskrun"
    PIPELINE_RUN = "pipelinerun"

    @property
    def plural(self) -> str:
        """Resource name used by kubectl and the Kubernetes API."""
        return f"{self.value}s"

    @property
    def manifest_kind(self) -> str:
        return "TaskRun" if self is RunKind.TASK_RUN else "PipelineRun"

    @classmethod
    def from_manifest_kind(cls, kind: str) -> RunKind:
        """Map a manifest `kind` such as `TaskRun` onto a run kind."""
        try:
            return cls(kind.strip().lower())
        except ValueError as exc:
            raise ValueError(f"Unsupported Tekton run kind: {kind}") from exc


@dataclass(frozen=True)
class RunIdentifier:
    """One submitted Tekton TaskRun or PipelineRun."""

    name: str
    kind: RunKind

    @property
    def resource(self) -> str:
        """`<kind>s/<name>` reference accepted by kubectl."""
        return f"{self.kind.plural}/{self.name}"
