"""
Field validators for Flux tool arguments.

Each validator checks one raw value against one rule and returns the
normalized value, or None when an optional field is absent. Failures raise
InvalidArgumentError with a message naming the field.
"""

from __future__ import annotations

from collections.abc import Sequence
import math
from typing import Any

from flux_mcp.errors import InvalidArgumentError

Number = int | float


def _format_bound(bound: Number) -> str:
    if isinstance(bound, float) and bound.is_integer():
        return str(int(bound))
    return str(bound)


def validate_required_string(value: Any, field_name: str) -> str:
    """Return value if it is a string with non-whitespace content."""
    if not isinstance(value, str) or value.strip() == "":
        raise InvalidArgumentError(
            field_name, f"{field_name} is required and must be a non-empty string"
        )
    return value


def validate_optional_string(value: Any, field_name: str) -> str | None:
    """Return value, or None for absent and blank strings."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidArgumentError(field_name, f"{field_name} must be a string")
    if value.strip() == "":
        return None
    return value


def validate_optional_number(
    value: Any,
    field_name: str,
    minimum: Number | None = None,
    maximum: Number | None = None,
) -> Number | None:
    """
    Validate an optional numeric value within inclusive bounds.

    None means absent. Zero and negative values are real values. Booleans,
    numeric strings, NaN and infinities are rejected.
    """
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(field_name, f"{field_name} must be a valid number")
    # ints are always finite and may exceed float range
    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidArgumentError(field_name, f"{field_name} must be a valid number")
    if minimum is not None and value < minimum:
        raise InvalidArgumentError(
            field_name, f"{field_name} must be at least {_format_bound(minimum)}"
        )
    if maximum is not None and value > maximum:
        raise InvalidArgumentError(
            field_name, f"{field_name} must be at most {_format_bound(maximum)}"
        )
    return value


def validate_optional_enum(value: Any, field_name: str, allowed: Sequence[str]) -> str | None:
    """Return value if it is one of allowed, None if absent."""
    if value is None:
        return None
    if not isinstance(value, str) or value not in allowed:
        raise InvalidArgumentError(
            field_name, f"{field_name} must be one of: {', '.join(allowed)}"
        )
    return value


def validate_required_enum(value: Any, field_name: str, allowed: Sequence[str]) -> str:
    """Required string that must also be one of allowed."""
    value = validate_required_string(value, field_name)
    if value not in allowed:
        raise InvalidArgumentError(
            field_name, f"{field_name} must be one of: {', '.join(allowed)}"
        )
    return value
