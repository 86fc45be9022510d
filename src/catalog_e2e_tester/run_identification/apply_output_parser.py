"""Parsing of `kubectl apply` output into run identifiers."""

from __future__ import annotations

import re

from .run_identifiers import RunIdentifier, RunKind

TEKTON_RUN_PATTERN = re.compile(
    r"^(taskrun|pipelinerun)\.tekton\.dev/(\S+)\s+created$", re.MULTILINE
)


class RunNotFoundError(Exception):
    """Raised when apply output does not report a created TaskRun or PipelineRun."""


def extract_run_identifiers(output: str) -> tuple[RunIdentifier, ...]:
    """Return every created run reported by apply output, in output order."""
    identifiers = tuple(
        RunIdentifier(name=match.group(2), kind=RunKind(match.group(1)))
        for match in TEKTON_RUN_PATTERN.finditer(output)
    )
    if not identifiers:
        raise RunNotFoundError(f"no TaskRun or PipelineRun found in the output:\n{output}")
    return identifiers


def extract_run_identifier(output: str) -> RunIdentifier:
    """Return the first created run reported by apply output."""
    return extract_run_identifiers(output)[0]
