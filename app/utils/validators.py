"""
Field validators shared by request schemas and route handlers.

Each `validate_*` helper raises `BadRequestError` with a message naming the
field, so handlers can call them directly on path and query values before
any database access.
"""

import re
from datetime import date, datetime
from typing import Any, Iterable, Optional, Union

from app.utils.errors import BadRequestError

UUID_PATTERN = r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
UUID_REGEX = re.compile(UUID_PATTERN)


def is_valid_uuid(value: Any) -> bool:
    return isinstance(value, str) and bool(UUID_REGEX.fullmatch(value))


def require(value: Any, field_name: str) -> Any:
    if value is None or value == "":
        raise BadRequestError(f"{field_name} is required")
    return value


def validate_uuid(value: Any, field_name: str = "ID") -> str:
    if not is_valid_uuid(value):
        raise BadRequestError(f"Invalid {field_name} format", "INVALID_ID_FORMAT")
    return value.lower()


def validate_string(
    value: Any, field_name: str, max_length: Optional[int] = None
) -> str:
    if not isinstance(value, str):
        raise BadRequestError(f"{field_name} must be a string")
    if max_length and len(value) > max_length:
        raise BadRequestError(
            f"{field_name} must be less than {max_length} characters"
        )
    return value


def validate_number(
    value: Any,
    field_name: str,
    min_value: Optional[float] = None,
    max_value: Optional[float] = None,
) -> float:
    if isinstance(value, bool):
        raise BadRequestError(f"{field_name} must be a valid number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise BadRequestError(f"{field_name} must be a valid number")
    if number != number:  # NaN
        raise BadRequestError(f"{field_name} must be a valid number")
    if min_value is not None and number < min_value:
        raise BadRequestError(f"{field_name} must be at least {min_value:g}")
    if max_value is not None and number > max_value:
        raise BadRequestError(f"{field_name} must be at most {max_value:g}")
    return number


def validate_enum(value: Any, field_name: str, allowed_values: Iterable[Any]) -> Any:
    allowed = list(allowed_values)
    if value not in allowed:
        raise BadRequestError(
            f"{field_name} must be one of: {', '.join(str(v) for v in allowed)}"
        )
    return value


def parse_date(value: Union[str, date]) -> date:
    """Parse an ISO date (`2025-01-15`) or datetime string, keeping the date part."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError("must be a valid date")
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        raise ValueError("must be a valid date")


def validate_date(value: Union[str, date], field_name: str) -> date:
    try:
        return parse_date(value)
    except ValueError:
        raise BadRequestError(f"{field_name} must be a valid date")
