"""Booking state machine."""

from app.schemas.booking import BookingStatus

BOOKING_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.REJECTED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.CANCELLED, BookingStatus.COMPLETED},
    BookingStatus.REJECTED: set(),
    BookingStatus.CANCELLED: set(),
    BookingStatus.COMPLETED: set(),
}


def allowed_transitions(current: BookingStatus) -> set:
    return set(BOOKING_TRANSITIONS.get(BookingStatus(current), set()))


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return BookingStatus(target) in allowed_transitions(current)


def can_rate(status: BookingStatus) -> bool:
    # only confirmed bookings accept the embedded rating
    return BookingStatus(status) == BookingStatus.CONFIRMED
