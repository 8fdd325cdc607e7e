"""
Structural validation of raw scan records.

A scan record is the JSON document produced by the upload step:

    [{"mac_data": [{"<category>": [<device>, ...]}, ...]}, ...]

Only the outer shape is checked here. Malformed groupings and devices are
tolerated and dropped later by the pipeline, so that one bad device never
invalidates a whole scan.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from jsonschema import Draft7Validator
from jsonschema.exceptions import best_match

from ..utils.error_handler import InvalidSchemaError

SCAN_RECORD_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "array",
    "minItems": 1,
    "items": [
        {
            "type": "object",
            "required": ["mac_data"],
            "properties": {
                "mac_data": {"type": "array"},
            },
        }
    ],
}

_validator = Draft7Validator(SCAN_RECORD_SCHEMA)

_MESSAGES = {
    ("type", 0): "Scan record must be a list",
    ("minItems", 0): "Scan record is empty",
    ("type", 1): "First scan entry must be an object",
    ("required", 1): "First scan entry has no mac_data field",
    ("type", 2): "mac_data must be a list of category groupings",
}

_SUGGESTIONS = {
    0: ["Wrap the scan output in a JSON array"],
    1: ['The first array element must be an object with a "mac_data" key'],
    2: ['"mac_data" must be a list such as [{"IT": [...]}, {"OT": [...]}]'],
}


@dataclass
class ValidationResult:
    """
    Result of scan record validation.

    Attributes:
        is_valid: Whether the validation passed
        groupings: The mac_data list when valid
        error: InvalidSchemaError describing the failure when invalid
    """
    is_valid: bool
    groupings: Optional[List[Dict[str, Any]]] = None
    error: Optional[InvalidSchemaError] = None

    @property
    def error_message(self) -> Optional[str]:
        return self.error.message if self.error else None

    @property
    def suggestions(self) -> List[str]:
        return self.error.suggestions if self.error else []


def _format_path(path) -> str:
    rendered = "$"
    for part in path:
        rendered += f"[{part}]" if isinstance(part, int) else f".{part}"
    return rendered


def validate(raw: Any) -> ValidationResult:
    """
    Check that a raw scan record has the minimal expected shape.

    Args:
        raw: Parsed JSON document of unknown shape

    Returns:
        ValidationResult with the mac_data groupings, or an InvalidSchemaError
    """
    error = best_match(_validator.iter_errors(raw))
    if error is None:
        return ValidationResult(is_valid=True, groupings=raw[0]["mac_data"])

    depth = len(error.absolute_path)
    # "required" is reported on the entry that lacks the key
    message = _MESSAGES.get((error.validator, depth), error.message)
    path = list(error.absolute_path)
    if error.validator == "required":
        path.append("mac_data")

    return ValidationResult(
        is_valid=False,
        error=InvalidSchemaError(
            message,
            path=_format_path(path),
            suggestions=list(_SUGGESTIONS.get(min(depth, 2), [])),
        ),
    )
