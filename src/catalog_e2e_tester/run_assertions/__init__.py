"""Run assertion exports."""

from .assertion_errors import RunAssertionError, UnsupportedAssertionError
from .field_assertions import FieldSource, assert_field_equals, assert_field_not_empty
from .step_result_assertions import DocumentSource, assert_step_result_not_empty

__all__ = [
    "DocumentSource",
    "FieldSource",
    "RunAssertionError",
    "UnsupportedAssertionError",
    "assert_field_equals",
    "assert_field_not_empty",
    "assert_step_result_not_empty",
]
