"""Assertions on results reported by individual TaskRun steps."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

import yaml

from catalog_e2e_tester.run_identification import RunIdentifier, RunKind

from .assertion_errors import RunAssertionError, UnsupportedAssertionError

RESULT_TYPE_STRING = "string"
RESULT_TYPE_ARRAY = "array"
RESULT_TYPE_OBJECT = "object"


class DocumentSource(Protocol):  # pylint: disable=too-few-public-methods
    """Anything that can return the current status document of a run."""

    def fetch_document(self) -> str: ...


def assert_step_result_not_empty(
    source: DocumentSource,
    run: RunIdentifier,
    result_name: str,
    step_name: str | None = None,
) -> None:
    """Fail unless the named step result holds a value for its declared type.

    Args:
      source: Provider of the run's YAML document.
      run: The run whose steps are inspected; only TaskRuns are supported.
      result_name: Name of the step result.
      step_name: Restrict the lookup to one step; any step matches when omitted.

    Raises:
      UnsupportedAssertionError: For PipelineRuns and unknown result types.
      RunAssertionError: If the result is missing or empty.
    """
    if run.kind is not RunKind.TASK_RUN:
        raise UnsupportedAssertionError(
            f"{run.kind.manifest_kind} {run.name} is unsupported for step-level result checks"
        )
    steps = _steps(source.fetch_document())
    if step_name is not None:
        steps = [step for step in steps if step.get("name") == step_name]
        if not steps:
            raise RunAssertionError(f"step '{step_name}' not found in TaskRun {run.name}")

    for step in steps:
        for result in step.get("results") or []:
            if not isinstance(result, Mapping) or result.get("name") != result_name:
                continue
            if not _has_value(result, result_name):
                raise RunAssertionError(
                    f"step result '{result_name}' in step '{step.get('name')}' is empty"
                )
            return
    location = f"step '{step_name}'" if step_name is not None else "any step"
    raise RunAssertionError(f"step result '{result_name}' not found in {location}")


def _steps(document: str) -> list[Mapping[str, Any]]:
    try:
        parsed = yaml.safe_load(document) or {}
    except yaml.YAMLError as exc:
        raise RunAssertionError(f"run document is not valid YAML: {exc}") from exc
    if not isinstance(parsed, Mapping):
        raise RunAssertionError("run document root must be a mapping")
    status = parsed.get("status") or {}
    steps: Sequence[Any] = status.get("steps") or []
    return [step for step in steps if isinstance(step, Mapping)]


def _has_value(result: Mapping[str, Any], result_name: str) -> bool:
    result_type = result.get("type")
    value = result.get("value")
    if result_type == RESULT_TYPE_STRING:
        return isinstance(value, str) and value != ""
    if result_type == RESULT_TYPE_ARRAY:
        return isinstance(value, list) and len(value) > 0
    if result_type == RESULT_TYPE_OBJECT:
        return isinstance(value, Mapping) and len(value) > 0
    raise UnsupportedAssertionError(
        f"unsupported result type for '{result_name}': {result_type}"
    )
