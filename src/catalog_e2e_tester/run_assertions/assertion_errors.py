"""Assertion failure types."""

from __future__ import annotations


class RunAssertionError(AssertionError):
    """Raised when a post-condition on a finished run does not hold."""


class UnsupportedAssertionError(RunAssertionError):
    """Raised when an assertion cannot be evaluated for the run or result type."""
