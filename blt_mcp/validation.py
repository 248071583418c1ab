"""Identifier and argument validation for inbound tool and prompt calls.

Every identifier that ends up in an outbound URL path goes through
``validate_identifier`` first. The argument helpers never fill in defaults
for semantically significant fields: a missing severity or type is an error.
"""

import math
import re
from collections.abc import Collection, Mapping
from typing import Any

from blt_mcp.errors import ValidationError

SEVERITIES: tuple[str, ...] = ("low", "medium", "high", "critical")
ISSUE_TYPES: tuple[str, ...] = ("bug", "vulnerability", "feature", "other")
ISSUE_STATUSES: tuple[str, ...] = ("open", "in_progress", "resolved", "closed", "wont_fix")

_IDENTIFIER_RE = re.compile(r"[A-Za-z0-9_-]+")


def validate_identifier(value: Any, field: str) -> str:
    """Return ``value`` if it is safe to use as a URL path segment.

    A safe identifier is a non-empty string of ASCII letters, digits,
    hyphens and underscores. Anything else (slashes, dots, percent-encoding,
    whitespace) is rejected rather than normalized.

    Args:
        value: Raw identifier value
        field: Field label used in the error message

    Returns:
        The identifier, unchanged

    Raises:
        ValidationError: If the value is not a safe identifier
    """
    if not isinstance(value, str) or not value:
        msg = f"{field} must be a non-empty identifier"
        raise ValidationError(msg, field=field, expected="identifier", received=value)
    if not _IDENTIFIER_RE.fullmatch(value):
        msg = f"{field} may only contain letters, digits, hyphens and underscores"
        raise ValidationError(msg, field=field, expected="[A-Za-z0-9_-]+", received=value)
    return value


def require_string(args: Mapping[str, Any], field: str) -> str:
    """Return the trimmed string at ``args[field]``.

    Raises:
        ValidationError: If the field is missing, not a string, or blank
    """
    value = args.get(field)
    if value is None:
        msg = f"Missing required field: {field}"
        raise ValidationError(msg, field=field, expected="string")
    if not isinstance(value, str):
        msg = f"{field} must be a string"
        raise ValidationError(msg, field=field, expected="string", received=type(value).__name__)
    stripped = value.strip()
    if not stripped:
        msg = f"{field} must not be blank"
        raise ValidationError(msg, field=field, expected="non-blank string")
    return stripped


def optional_string(args: Mapping[str, Any], field: str) -> str | None:
    """Like ``require_string`` but returns ``None`` when the field is absent."""
    if args.get(field) is None:
        return None
    return require_string(args, field)


def require_number(args: Mapping[str, Any], field: str) -> int | float:
    """Return the finite number at ``args[field]``.

    Numeric strings are coerced; integral values come back as ``int``.

    Raises:
        ValidationError: If the field is missing or not a finite number
    """
    value = args.get(field)
    if value is None:
        msg = f"Missing required field: {field}"
        raise ValidationError(msg, field=field, expected="number")
    # bool is an int subclass but never a meaningful count
    if isinstance(value, bool):
        msg = f"{field} must be a number"
        raise ValidationError(msg, field=field, expected="number", received=value)

    if isinstance(value, int):
        return value
    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            msg = f"{field} must be a number"
            raise ValidationError(msg, field=field, expected="number", received=value) from None
    else:
        msg = f"{field} must be a number"
        raise ValidationError(msg, field=field, expected="number", received=type(value).__name__)

    if not math.isfinite(number):
        msg = f"{field} must be a finite number"
        raise ValidationError(msg, field=field, expected="finite number", received=value)
    if isinstance(value, str) and number.is_integer():
        return int(number)
    return number


def require_positive_number(args: Mapping[str, Any], field: str) -> int | float:
    """Return the number at ``args[field]``, which must be greater than zero."""
    number = require_number(args, field)
    if number <= 0:
        msg = f"{field} must be a positive number"
        raise ValidationError(msg, field=field, expected="> 0", received=number)
    return number


def require_enum(value: str, allowed: Collection[str], field: str) -> str:
    """Check that ``value`` is one of ``allowed``.

    Raises:
        ValidationError: Listing the allowed values when ``value`` is not one
    """
    if value not in allowed:
        options = ", ".join(allowed)
        msg = f"{field} must be one of: {options}"
        raise ValidationError(msg, field=field, expected=options, received=value)
    return value


__all__ = [
    "ISSUE_STATUSES",
    "ISSUE_TYPES",
    "SEVERITIES",
    "optional_string",
    "require_enum",
    "require_number",
    "require_positive_number",
    "require_string",
    "validate_identifier",
]
