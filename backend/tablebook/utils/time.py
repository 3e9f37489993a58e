import re
from datetime import date

SLOT_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_slot_time(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight.

    Raises ValueError if the value does not split into two integers; range
    checks belong to ``is_slot_time``.
    """
    hour, minute = value.split(":")
    return int(hour) * 60 + int(minute)


def is_slot_time(value: str) -> bool:
    return bool(SLOT_TIME_PATTERN.match(value))


def is_calendar_date(value: str) -> bool:
    if not DATE_PATTERN.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True
