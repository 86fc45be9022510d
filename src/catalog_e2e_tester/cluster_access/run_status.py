"""Readers for the status block of Tekton run objects."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

SUCCEEDED_CONDITION = "Succeeded"
CONDITION_TRUE = "True"
CONDITION_FALSE = "False"


def run_conditions(run_object: Mapping[str, Any]) -> Sequence[Mapping[str, Any]]:
    status = run_object.get("status") or {}
    conditions = status.get("conditions") or []
    return [condition for condition in conditions if isinstance(condition, Mapping)]


def find_condition(
    conditions: Sequence[Mapping[str, Any]], condition_type: str
) -> Mapping[str, Any] | None:
    """Return the first condition whose type equals `condition_type`."""
    for condition in conditions:
        if condition.get("type") == condition_type:
            return condition
    return None


def is_run_done(run_object: Mapping[str, Any]) -> bool:
    """A run is done once its Succeeded condition is no longer Unknown."""
    condition = find_condition(run_conditions(run_object), SUCCEEDED_CONDITION)
    if condition is None:
        return False
    return condition.get("status") in (CONDITION_TRUE, CONDITION_FALSE)


def meets_expected_condition(run_object: Mapping[str, Any], expected_condition: str) -> bool:
    condition = find_condition(run_conditions(run_object), expected_condition)
    return condition is not None and condition.get("status") == CONDITION_TRUE


def describe_conditions(run_object: Mapping[str, Any]) -> str:
    """Render conditions as `type=status (reason: message)` for error reports."""
    rendered = []
    for condition in run_conditions(run_object):
        text = f"{condition.get('type')}={condition.get('status')}"
        reason = condition.get("reason")
        message = condition.get("message")
        if reason or message:
            text += f" ({reason or ''}: {message or ''})"
        rendered.append(text)
    return "; ".join(rendered) or "no conditions reported"


def pod_name(run_object: Mapping[str, Any]) -> str | None:
    status = run_object.get("status") or {}
    value = status.get("podName")
    return value if isinstance(value, str) and value else None
