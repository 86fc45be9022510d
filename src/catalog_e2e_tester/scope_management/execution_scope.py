"""Execution scope entities."""

from __future__ import annotations

from dataclasses import dataclass

from catalog_e2e_tester.configuration.runtime_settings import ExecutionMode

SUFFIX_LENGTH = 8


@dataclass(frozen=True)
class ExecutionScope:
    """Isolated environment owning every resource one test creates."""

    id: str
    mode: ExecutionMode

    @property
    def namespace(self) -> str:
        """Cluster namespace backing the scope on the direct path."""
        return self.id

    @property
    def suffix(self) -> str:
        """Short name suffix derived from the scope id."""
        return self.id.replace("-", "")[:SUFFIX_LENGTH]


@dataclass(frozen=True)
class PublishedStepAction:
    """Where a scope's StepAction can be referenced from."""

    name: str
    bundle_ref: str | None = None
