from dataclasses import dataclass
from typing import Iterable, Optional

from ..models import Reservation
from ..utils.time import is_calendar_date, is_slot_time, parse_slot_time
from .errors import InvalidRequestError, MissingFieldsError, StorageFailureError


@dataclass(frozen=True)
class ReservationRequest:
    table_number: int
    client_name: str
    phone_number: str
    date: str
    slot_time_start: str
    slot_time_end: str


@dataclass(frozen=True)
class TimeWindow:
    """Half-open window [start, end) in minutes since midnight."""

    start: int
    end: int

    @classmethod
    def from_strings(cls, start: str, end: str) -> "TimeWindow":
        return cls(start=parse_slot_time(start), end=parse_slot_time(end))


def overlaps(new_start: int, new_end: int, existing_start: int, existing_end: int) -> bool:
    """Half-open overlap test: back-to-back windows do not overlap."""
    return new_start < existing_end and existing_start < new_end


def validate_reservation_request(request: ReservationRequest) -> TimeWindow:
    """
    Pure validation of a reservation request before any storage access.
    Returns the requested window in minutes. Raises MissingFieldsError or
    InvalidRequestError otherwise.
    """
    missing = [
        name
        for name, value in (
            ("tableNumber", request.table_number),
            ("clientName", request.client_name),
            ("phoneNumber", request.phone_number),
            ("date", request.date),
            ("slotTimeStart", request.slot_time_start),
            ("slotTimeEnd", request.slot_time_end),
        )
        if value is None or (isinstance(value, str) and not value.strip())
    ]
    if missing:
        raise MissingFieldsError(missing)

    if isinstance(request.table_number, bool) or not isinstance(request.table_number, int):
        raise InvalidRequestError("tableNumber must be an integer")
    if request.table_number < 1:
        raise InvalidRequestError("tableNumber must be positive")
    if not is_calendar_date(request.date):
        raise InvalidRequestError("date must be a calendar date in YYYY-MM-DD format")
    if not is_slot_time(request.slot_time_start) or not is_slot_time(request.slot_time_end):
        raise InvalidRequestError("slot times must use HH:MM format")

    window = TimeWindow.from_strings(request.slot_time_start, request.slot_time_end)
    if window.end <= window.start:
        raise InvalidRequestError("slotTimeEnd must be later than slotTimeStart")
    return window


def find_conflict(window: TimeWindow, existing: Iterable[Reservation]) -> Optional[Reservation]:
    """Return the first existing reservation overlapping ``window``, if any."""
    for reservation in existing:
        try:
            booked = TimeWindow.from_strings(reservation.slot_time_start, reservation.slot_time_end)
        except (AttributeError, ValueError) as exc:
            raise StorageFailureError(f"reservation {reservation.id} has malformed slot times") from exc
        if overlaps(window.start, window.end, booked.start, booked.end):
            return reservation
    return None
