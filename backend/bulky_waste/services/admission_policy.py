"""Admission policy: checks a prospective reservation must pass, in order.

1. the municipality exists;
2. the requested date is after today (Europe/Lisbon), not today, not a Sunday;
3. the municipality is below its capacity cap.
"""
import logging
from datetime import date
from typing import Optional

from bulky_waste.errors import ConflictError, InvalidInputError
from bulky_waste.models.municipality import Municipality

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 32

PAST_DATE_MESSAGE = "Requested date cannot be in the past"
SAME_DAY_MESSAGE = "Requested date cannot be the same day"
SUNDAY_MESSAGE = "No pickups are made on weekends (Sunday)"

MISSING_MUNICIPALITY_MESSAGE = "Municipality name is required"

_SUNDAY = 6


def require_municipality(name: Optional[str], municipality: Optional[Municipality]) -> Municipality:
    if name is None or not name.strip():
        raise InvalidInputError(MISSING_MUNICIPALITY_MESSAGE)
    if municipality is None:
        raise InvalidInputError(f"Municipality '{name}' not found")
    return municipality


def validate_date(requested: date, today: date) -> None:
    """Raise ``InvalidInputError`` with the first rule the date breaks."""
    if requested < today:
        raise InvalidInputError(PAST_DATE_MESSAGE)
    if requested == today:
        raise InvalidInputError(SAME_DAY_MESSAGE)
    if requested.weekday() == _SUNDAY:
        raise InvalidInputError(SUNDAY_MESSAGE)


def is_valid_date(requested: date, today: date) -> bool:
    try:
        validate_date(requested, today)
    except InvalidInputError:
        return False
    return True


def check_capacity(municipality: Municipality, current_count: int, cap: int = DEFAULT_CAPACITY) -> None:
    """Soft cap: concurrent creates may both pass at ``cap - 1``."""
    if current_count >= cap:
        raise ConflictError(
            f"Limit of {cap} bookings reached for municipality '{municipality.name}'"
        )
