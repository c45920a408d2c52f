import pytest

from app.domain.booking_state import allowed_transitions, can_rate, can_transition
from app.schemas.booking import BookingStatus


@pytest.mark.parametrize(
    "target",
    [BookingStatus.CONFIRMED, BookingStatus.REJECTED, BookingStatus.CANCELLED],
)
def test_pending_moves_to_seller_or_customer_outcomes(target):
    assert can_transition(BookingStatus.PENDING, target)


def test_confirmed_can_be_cancelled_or_completed():
    assert allowed_transitions(BookingStatus.CONFIRMED) == {BookingStatus.CANCELLED, BookingStatus.COMPLETED}


@pytest.mark.parametrize("status", [BookingStatus.REJECTED, BookingStatus.CANCELLED, BookingStatus.COMPLETED])
def test_closed_statuses_have_no_way_out(status):
    assert allowed_transitions(status) == set()


def test_completed_only_reachable_from_confirmed():
    assert not can_transition(BookingStatus.PENDING, BookingStatus.COMPLETED)
    assert can_transition("confirmed", "completed")


def test_only_confirmed_bookings_can_be_rated():
    assert can_rate(BookingStatus.CONFIRMED)
    for status in BookingStatus:
        if status != BookingStatus.CONFIRMED:
            assert not can_rate(status)
