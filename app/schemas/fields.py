from datetime import date
from typing import Annotated, Any

from pydantic import AfterValidator, BeforeValidator
from pydantic_core import PydanticCustomError

from app.utils.validators import is_valid_uuid, parse_date


def _check_uuid(value: str) -> str:
    if not is_valid_uuid(value):
        raise PydanticCustomError("uuid_format", "Invalid ID format")
    return value.lower()


def _coerce_date(value: Any) -> Any:
    if value is None:
        return value
    try:
        return parse_date(value)
    except ValueError:
        raise PydanticCustomError("date_format", "must be a valid date")


# Request field types that apply the shared validation helpers
UUIDStr = Annotated[str, AfterValidator(_check_uuid)]
DateValue = Annotated[date, BeforeValidator(_coerce_date)]
