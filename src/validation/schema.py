"""JSON Schema contract for the validation digest.

The digest is the one structured format emitted for other tools, so it is
checked against a Draft-07 schema before being written.
"""

from __future__ import annotations

from typing import Any, Dict, List

from jsonschema import Draft7Validator

_NULLABLE_STRING = {"type": ["string", "null"]}

DIGEST_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "array",
    "items": {
        "type": "object",
        "additionalProperties": False,
        "required": ["package", "dependency", "explain", "sites"],
        "properties": {
            "package": _NULLABLE_STRING,
            "dependency": _NULLABLE_STRING,
            "explain": {"enum": ["Invalid", "Missing", "Disallowed"]},
            "sites": {
                "type": ["array", "null"],
                "items": {"type": "string"},
            },
        },
    },
}


class SchemaError(ValueError):
    """Raised when data fails to validate against a provided schema."""


def validate_digest(data: List[Dict[str, Any]]) -> None:
    """Strictly validate a JSON digest; raise SchemaError on the first problem."""
    validator = Draft7Validator(DIGEST_SCHEMA)
    errs = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errs:
        first = errs[0]
        path = "/".join([str(p) for p in first.path])
        raise SchemaError(f"Invalid digest at '{path}': {first.message}")
