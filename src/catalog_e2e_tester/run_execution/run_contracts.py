"""Run execution entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from catalog_e2e_tester.results_writing.report_models import CaseResult


@dataclass(frozen=True)
class RunRequest:
    """Input contract for executing the tests of one StepAction directory."""

    step_action_dir: str
    config_path: str | None = None
    work_dir: str | None = None
    output_dir: str | None = None
    required_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class RunOutcome:
    """Output contract for one completed run."""

    output_path: Path
    results: tuple[CaseResult, ...]

    @property
    def passed(self) -> int:
        return sum(1 for result in self.results if result.passed)

    @property
    def failed(self) -> int:
        return len(self.results) - self.passed

    @property
    def all_passed(self) -> bool:
        return self.failed == 0
