"""Run identification exports."""

from .apply_output_parser import (
    TEKTON_RUN_PATTERN,
    RunNotFoundError,
    extract_run_identifier,
    extract_run_identifiers,
)
from .run_identifiers import RunIdentifier, RunKind

__all__ = [
    "RunIdentifier",
    "RunKind",
    "RunNotFoundError",
    "TEKTON_RUN_PATTERN",
    "extract_run_identifier",
    "extract_run_identifiers",
]
