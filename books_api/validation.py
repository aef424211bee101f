"""
Generic JSON Schema validation for request payloads.
"""

from typing import Any, Dict

from jsonschema import Draft7Validator

from books_api.models import ValidationResult


def _describe(error) -> str:
    """Render a single violation, prefixed by its path when not at the root."""
    if error.path:
        return f"{error.json_path}: {error.message}"
    return error.message


def validate(payload: Any, schema: Dict[str, Any]) -> ValidationResult:
    """
    Validate a payload against a JSON Schema.

    Args:
        payload: Decoded JSON document
        schema: Draft 7 JSON Schema

    Returns:
        ValidationResult with every violation, ordered by path then message
    """
    validator = Draft7Validator(schema)
    errors = sorted(
        validator.iter_errors(payload),
        key=lambda e: (e.json_path, e.message),
    )
    return ValidationResult(
        valid=not errors,
        errors=[_describe(e) for e in errors],
    )
