"""Assertions on fields of a run's status document."""

from __future__ import annotations

from typing import Protocol

from .assertion_errors import RunAssertionError


class FieldSource(Protocol):  # pylint: disable=too-few-public-methods
    """Anything that can evaluate a query expression against a run document."""

    def extract_field(self, expression: str) -> str: ...


def assert_field_not_empty(source: FieldSource, expression: str) -> str:
    """Fail unless `expression` yields a non-empty value; return the value."""
    value = source.extract_field(expression)
    if not value or value == "null":
        raise RunAssertionError(f"field '{expression}' is empty")
    return value


def assert_field_equals(source: FieldSource, expression: str, expected: str) -> None:
    value = source.extract_field(expression)
    if value != expected:
        raise RunAssertionError(
            f"field '{expression}' mismatch: expected '{expected}', got '{value}'"
        )
