"""Field extraction exports."""

from .yq_evaluator import FieldExtractionError, extract_field, read_file_field, update_file_in_place

__all__ = [
    "FieldExtractionError",
    "extract_field",
    "read_file_field",
    "update_file_in_place",
]
