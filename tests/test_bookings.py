from datetime import datetime, timedelta, timezone

import pytest

from app.core.exceptions import Forbidden, InternalError, NotFound, ValidationFailure
from app.schemas.booking import BookingCreate, BookingRatingCreate, BookingStatus
from app.schemas.notification import NotificationType


def booking_payload(customer_uid="customer-1", owner_uid="seller-1", **overrides):
    data = {
        "customerName": "Carla",
        "serviceName": "Elegant Evening Gown",
        "productId": "product-1",
        "date": "2024-06-01",
        "time": "10:00",
        "price": 2999.99,
        "uid": customer_uid,
        "ownerUid": owner_uid,
        "productImage": "https://img.test/gown.jpg",
    }
    data.update(overrides)
    return BookingCreate.model_validate(data)


def notifications_for(notification_service, user_id):
    return notification_service.list_for_user(user_id)


@pytest.fixture
def pending(booking_service, customer, seller):
    return booking_service.create(booking_payload(), customer.uid)


# --- create ---

def test_create_sets_defaults_and_persists(booking_service, store, customer, seller):
    booking = booking_service.create(booking_payload(), customer.uid)

    assert booking.status == BookingStatus.PENDING
    assert booking.quantity == 1
    assert booking.include_makeup is False
    assert booking.owner_username == ""
    assert booking.created_at == booking.updated_at

    stored = store.get("bookings", booking.id)
    assert stored["uid"] == customer.uid
    assert stored["ownerUid"] == seller.uid
    assert stored["status"] == "pending"


def test_create_keeps_explicit_quantity_and_makeup(booking_service, customer, seller):
    booking = booking_service.create(
        booking_payload(quantity=3, includeMakeup=True, selectedSize="M"), customer.uid
    )

    assert (booking.quantity, booking.include_makeup, booking.selected_size) == (3, True, "M")


def test_create_notifies_seller(booking_service, notification_service, customer, seller):
    booking = booking_service.create(booking_payload(), customer.uid)

    [notification] = notifications_for(notification_service, seller.uid)
    assert notification.type == NotificationType.NEW_BOOKING
    assert notification.related_booking_id == booking.id
    assert notification.related_product_id == "product-1"
    assert "Carla" in notification.message


def test_create_for_another_user_is_forbidden(booking_service, customer):
    with pytest.raises(Forbidden, match="Cannot create booking for another user"):
        booking_service.create(booking_payload(customer_uid="someone-else"), customer.uid)


def test_create_requires_owner(booking_service, customer):
    with pytest.raises(ValidationFailure):
        booking_service.create(booking_payload(owner_uid=None), customer.uid)


def test_create_survives_notification_failure(booking_service, notification_service, store, customer, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("notification backend down")

    monkeypatch.setattr(notification_service, "notify_new_booking", broken)

    booking = booking_service.create(booking_payload(), customer.uid)

    assert store.get("bookings", booking.id) is not None


# --- reads ---

def test_get_attaches_owner_username(booking_service, pending, customer, seller):
    assert booking_service.get(pending.id, customer.uid).owner_username == "sam_shop"
    assert booking_service.get(pending.id, seller.uid).owner_username == "sam_shop"


def test_get_falls_back_to_unknown_owner(booking_service, customer):
    booking = booking_service.create(booking_payload(owner_uid="ghost-seller"), customer.uid)

    assert booking_service.get(booking.id, customer.uid).owner_username == "Unknown"


def test_get_by_third_party_is_forbidden(booking_service, pending):
    with pytest.raises(Forbidden):
        booking_service.get(pending.id, "stranger")


def test_get_missing_booking(booking_service, customer):
    with pytest.raises(NotFound):
        booking_service.get("missing", customer.uid)


def _insert_booking(store, booking_id, uid, owner_uid, minutes):
    at = datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=minutes)
    store.add(
        "bookings",
        {
            "customerName": uid,
            "serviceName": "Suit",
            "productId": "p",
            "date": "2024-02-01",
            "time": "09:00",
            "status": "pending",
            "price": 10,
            "uid": uid,
            "ownerUid": owner_uid,
            "ownerUsername": "",
            "createdAt": at,
            "updatedAt": at,
        },
        doc_id=booking_id,
    )


def test_list_for_principal_merges_customer_and_seller_sides(booking_service, store, customer, seller):
    _insert_booking(store, "as-customer-old", customer.uid, seller.uid, 1)
    _insert_booking(store, "as-seller", "other-customer", customer.uid, 2)
    _insert_booking(store, "as-customer-new", customer.uid, seller.uid, 3)
    _insert_booking(store, "unrelated", "x", "y", 4)

    listed = booking_service.list_for_principal(customer)

    assert [b.id for b in listed] == ["as-customer-new", "as-seller", "as-customer-old"]


def test_admin_sees_every_booking(booking_service, store, admin):
    _insert_booking(store, "first", "a", "b", 1)
    _insert_booking(store, "second", "c", "d", 2)

    assert [b.id for b in booking_service.list_for_principal(admin)] == ["second", "first"]


def test_list_by_customer_and_seller_ids(booking_service, store):
    _insert_booking(store, "one", "cust", "sell", 1)
    _insert_booking(store, "two", "cust", "other", 2)

    assert [b.id for b in booking_service.list_for_customer("cust")] == ["two", "one"]
    assert [b.id for b in booking_service.list_for_seller("sell")] == ["one"]
    assert booking_service.list_for_seller("nobody") == []


# --- status changes ---

def test_seller_confirming_notifies_customer(booking_service, notification_service, pending, customer, seller):
    updated = booking_service.update_status(pending.id, BookingStatus.CONFIRMED, seller.uid)

    assert updated.status == BookingStatus.CONFIRMED
    assert updated.updated_at >= pending.updated_at
    [notification] = notifications_for(notification_service, customer.uid)
    assert notification.type == NotificationType.BOOKING_ACCEPTED


def test_seller_rejecting_stores_message_and_notifies(booking_service, notification_service, pending, customer, seller):
    updated = booking_service.update_status(pending.id, BookingStatus.REJECTED, seller.uid, "Out of stock")

    assert updated.rejection_message == "Out of stock"
    [notification] = notifications_for(notification_service, customer.uid)
    assert notification.type == NotificationType.BOOKING_REJECTED
    assert "Out of stock" in notification.message


def test_rejection_message_only_set_when_rejecting(booking_service, pending, seller):
    updated = booking_service.update_status(pending.id, BookingStatus.CONFIRMED, seller.uid, "ignored")

    assert updated.rejection_message is None


def test_customer_cancelling_notifies_seller(booking_service, notification_service, pending, customer, seller):
    booking_service.update_status(pending.id, BookingStatus.CANCELLED, customer.uid)

    seller_notifications = notifications_for(notification_service, seller.uid)
    assert [n.type for n in seller_notifications].count(NotificationType.BOOKING_CANCELLED) == 1
    assert notifications_for(notification_service, customer.uid) == []


def test_seller_cancelling_does_not_notify_anyone(booking_service, notification_service, pending, customer, seller):
    booking_service.update_status(pending.id, BookingStatus.CANCELLED, seller.uid)

    assert notifications_for(notification_service, customer.uid) == []
    assert all(n.type == NotificationType.NEW_BOOKING for n in notifications_for(notification_service, seller.uid))


def test_customer_confirming_own_booking_sends_nothing(booking_service, notification_service, pending, customer):
    booking_service.update_status(pending.id, BookingStatus.CONFIRMED, customer.uid)

    assert notifications_for(notification_service, customer.uid) == []


def test_status_update_by_third_party_is_forbidden(booking_service, pending, store):
    with pytest.raises(Forbidden):
        booking_service.update_status(pending.id, BookingStatus.CONFIRMED, "stranger")

    assert store.get("bookings", pending.id)["status"] == "pending"


def test_status_update_missing_booking(booking_service, seller):
    with pytest.raises(NotFound):
        booking_service.update_status("missing", BookingStatus.CONFIRMED, seller.uid)


def test_status_update_survives_notification_failure(booking_service, notification_service, pending, seller, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("notification backend down")

    monkeypatch.setattr(notification_service, "notify_booking_accepted", broken)

    updated = booking_service.update_status(pending.id, BookingStatus.CONFIRMED, seller.uid)

    assert updated.status == BookingStatus.CONFIRMED


def test_cancel_is_status_update_to_cancelled(booking_service, notification_service, pending, customer, seller):
    cancelled = booking_service.cancel(pending.id, customer.uid)

    assert cancelled.status == BookingStatus.CANCELLED
    assert cancelled.rejection_message is None
    types = [n.type for n in notifications_for(notification_service, seller.uid)]
    assert NotificationType.BOOKING_CANCELLED in types


# --- delete ---

def test_delete_by_either_party(booking_service, store, customer, seller):
    first = booking_service.create(booking_payload(), customer.uid)
    second = booking_service.create(booking_payload(), customer.uid)

    booking_service.delete(first.id, customer.uid)
    booking_service.delete(second.id, seller.uid)

    assert store.get("bookings", first.id) is None
    assert store.get("bookings", second.id) is None


def test_delete_keeps_notifications(booking_service, notification_service, pending, seller):
    booking_service.delete(pending.id, seller.uid)

    assert len(notifications_for(notification_service, seller.uid)) == 1


def test_delete_by_third_party_is_forbidden(booking_service, pending):
    with pytest.raises(Forbidden):
        booking_service.delete(pending.id, "stranger")


# --- embedded rating ---

def test_customer_rates_confirmed_booking(booking_service, pending, customer, seller):
    booking_service.update_status(pending.id, BookingStatus.CONFIRMED, seller.uid)

    rated = booking_service.submit_rating(pending.id, BookingRatingCreate(rating=5, comment="Lovely"), customer.uid)

    assert rated.rating.rating == 5
    assert rated.rating.comment == "Lovely"
    assert rated.updated_at == rated.rating.updated_at


def test_seller_cannot_rate(booking_service, pending, seller):
    booking_service.update_status(pending.id, BookingStatus.CONFIRMED, seller.uid)

    with pytest.raises(Forbidden):
        booking_service.submit_rating(pending.id, BookingRatingCreate(rating=1), seller.uid)


@pytest.mark.parametrize(
    "status",
    [BookingStatus.PENDING, BookingStatus.REJECTED, BookingStatus.CANCELLED, BookingStatus.COMPLETED],
)
def test_only_confirmed_bookings_can_be_rated(booking_service, store, pending, customer, status):
    store.update("bookings", pending.id, {"status": status})

    with pytest.raises(Forbidden, match="Can only rate confirmed bookings"):
        booking_service.submit_rating(pending.id, BookingRatingCreate(rating=4), customer.uid)


def test_rate_missing_booking(booking_service, customer):
    with pytest.raises(NotFound):
        booking_service.submit_rating("missing", BookingRatingCreate(rating=4), customer.uid)


# --- failure translation ---

def test_store_errors_become_internal_errors(booking_service, store, customer, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("connection reset")

    monkeypatch.setattr(store, "find", broken)

    with pytest.raises(InternalError) as excinfo:
        booking_service.list_for_principal(customer)

    assert excinfo.value.status_code == 500
    assert excinfo.value.detail == "Failed to fetch bookings"
