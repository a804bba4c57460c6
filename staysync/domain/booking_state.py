"""Booking state machine."""

from enum import Enum


class BookingStatus(str, Enum):
    """Booking lifecycle status."""

    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"


BOOKING_TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.CANCELLED},
    BookingStatus.CANCELLED: set(),  # Terminal state
}


def can_transition_booking(current: BookingStatus, target: BookingStatus) -> bool:
    return target in BOOKING_TRANSITIONS.get(current, set())


def is_terminal(status: BookingStatus) -> bool:
    return not BOOKING_TRANSITIONS.get(status)
