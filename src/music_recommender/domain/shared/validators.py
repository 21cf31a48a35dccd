"""Shared validators for request arguments.

Service operations validate their arguments up front, before any I/O, and
raise ``ValidationError`` so callers receive a validation result rather than a
half-applied operation.
"""

from typing import Any

from music_recommender.domain.shared.exceptions import ValidationError
from music_recommender.domain.shared.messages import ErrorMessages


def validate_positive_int(value: int, field_name: str = "value") -> int:
    """Validate that an integer is positive.

    Args:
        value: The integer to validate.
        field_name: Name of the field for error messages.

    Returns:
        The validated integer.

    Raises:
        ValueError: If the integer is not positive.
    """
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(ErrorMessages.FIELD_MUST_BE_POSITIVE.format(field_name=field_name))
    return value


def validate_non_empty_string(value: Any, field_name: str = "value") -> str:
    """Validate that a string is not empty or whitespace-only.

    Args:
        value: The string to validate.
        field_name: Name of the field for error messages.

    Returns:
        The validated string.

    Raises:
        ValueError: If the value is not a string, or is empty or whitespace-only.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(ErrorMessages.FIELD_CANNOT_BE_EMPTY.format(field_name=field_name))
    return value


def require_fields(message: str, *, strings: dict[str, Any], amounts: dict[str, Any] | None = None) -> None:
    """Check every named string and amount, raising one ``ValidationError`` on the first failure.

    The error carries *message* (the operation-level wording) and the offending
    field name.
    """
    for name, value in strings.items():
        try:
            validate_non_empty_string(value, name)
        except ValueError:
            raise ValidationError(message, field=name) from None

    for name, value in (amounts or {}).items():
        try:
            validate_positive_int(value, name)
        except ValueError:
            raise ValidationError(message, field=name) from None
