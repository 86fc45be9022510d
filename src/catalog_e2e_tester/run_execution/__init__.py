"""Run execution domain exports."""

from .catalog_run_use_case import (
    RunExecutionError,
    execute_catalog_test_run,
    start_test_manifest,
)
from .run_contracts import RunOutcome, RunRequest

__all__ = [
    "RunRequest",
    "RunOutcome",
    "RunExecutionError",
    "execute_catalog_test_run",
    "start_test_manifest",
]
