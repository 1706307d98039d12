"""Boundary parsing for raw request values"""
from datetime import date, datetime
from typing import Any, Mapping, Optional, Union
from uuid import UUID

from dateutil import parser

from domain.enums import BookingStatus
from domain.exceptions import InvalidArgumentError, MissingFieldError


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def require_fields(values: Mapping[str, Any], fields: Mapping[str, str]) -> None:
    """Raise MissingFieldError for the first absent or blank field, in order.

    ``fields`` maps argument names to the names the caller knows them by.
    """
    for name, label in fields.items():
        if is_blank(values.get(name)):
            raise MissingFieldError(label)


def parse_entity_id(value: Union[str, UUID, None], message: str) -> UUID:
    if isinstance(value, UUID):
        return value
    if is_blank(value):
        raise InvalidArgumentError(message)
    try:
        return UUID(str(value).strip())
    except ValueError:
        raise InvalidArgumentError(message)


def parse_optional_entity_id(value: Union[str, UUID, None], message: str) -> Optional[UUID]:
    if is_blank(value):
        return None
    return parse_entity_id(value, message)


def parse_calendar_date(value: Union[str, date, None], message: str) -> date:
    """Accept a date, a datetime, or an ISO-8601 string; timestamps keep only their date"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if is_blank(value):
        raise InvalidArgumentError(message)
    try:
        return parser.isoparse(str(value).strip()).date()
    except (ValueError, OverflowError):
        raise InvalidArgumentError(message)


def parse_booking_status(value: Union[str, BookingStatus, None]) -> BookingStatus:
    if isinstance(value, BookingStatus):
        return value
    try:
        return BookingStatus(str(value).strip().lower())
    except ValueError:
        raise InvalidArgumentError("Invalid booking status")


def parse_positive_int(value: Union[str, int, None], message: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(message)
    if number < 1:
        raise InvalidArgumentError(message)
    return number
