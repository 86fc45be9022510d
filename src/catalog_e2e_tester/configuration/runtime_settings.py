"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ExecutionMode(str, Enum):
    """How test manifests reach Tekton."""

    DIRECT = "direct"
    MANAGED = "managed"


@dataclass(frozen=True)
class ExecutionSettings:
    """Run lifecycle timing and success criteria."""

    mode: ExecutionMode
    expected_condition: str
    watch_timeout_seconds: int
    poll_interval_seconds: int
    command_timeout_seconds: int


@dataclass(frozen=True)
class ClusterSettings:
    """Target cluster access for the direct path."""

    kubeconfig: Path | None


@dataclass(frozen=True)
class ManagedBuildSettings:
    """Cloud Build v2 submission settings for the managed path."""

    project: str
    region: str
    bundle_repository: str
    service_account: str
    name_prefix: str


@dataclass(frozen=True)
class HarnessConfiguration:
    """Top-level configuration aggregate."""

    path: Path | None
    execution: ExecutionSettings
    cluster: ClusterSettings
    managed: ManagedBuildSettings | None

    @property
    def mode(self) -> ExecutionMode:
        return self.execution.mode
