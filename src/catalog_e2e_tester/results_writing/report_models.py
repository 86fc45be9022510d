"""Results writing entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

from catalog_e2e_tester.run_identification import RunIdentifier


class CaseStatus(str, Enum):
    """Rendered status of one test manifest in the results workbook."""

    PASSED = "PASSED"
    FAILED = "FAILED"
    TIMED_OUT = "TIMED_OUT"
    ERROR = "ERROR"


@dataclass(frozen=True)
class CaseResult:  # pylint: disable=too-many-instance-attributes
    """Outcome of running one test manifest in its own scope."""

    test_file: Path
    scope_id: str
    status: CaseStatus
    run: RunIdentifier | None
    reason: str
    duration_seconds: float
    cleanup_failures: tuple[str, ...] = ()

    @property
    def passed(self) -> bool:
        return self.status is CaseStatus.PASSED


@dataclass(frozen=True)
class RunMetadata:
    """Metadata rendered into the RunInfo sheet."""

    run_start: datetime
    step_action_dir: Path
    output_path: Path
    mode: str
    expected_condition: str
    timeout_seconds: int
