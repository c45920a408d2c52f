# app/services/bookings.py
"""
Booking lifecycle.

Owns the booking documents: who may see and change them, status changes and
the notification sent to the other party on each change. Notifications are a
side effect; failing to send one never fails the booking operation.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app.core.exceptions import Forbidden, NotFound, ValidationFailure, translate_errors
from app.db.store import DocumentStore
from app.domain.booking_state import can_rate, can_transition
from app.schemas.booking import (
    Booking,
    BookingCreate,
    BookingRatingCreate,
    BookingStatus,
)
from app.schemas.user import User
from app.services.notifications import NotificationService

logger = logging.getLogger(__name__)

BOOKINGS = "bookings"
USERS = "users"
UNKNOWN_OWNER = "Unknown"


def _to_booking(doc: Dict[str, Any], **overrides) -> Booking:
    return Booking.model_validate({**doc, **overrides})


class BookingService:
    def __init__(self, store: DocumentStore, notifications: NotificationService):
        self.store = store
        self.notifications = notifications

    # ---------- reads ----------

    @translate_errors("Failed to fetch bookings")
    def list_for_principal(self, user: User) -> List[Booking]:
        if user.is_admin:
            logger.info("Listing all bookings for admin %s", user.uid)
            docs = self.store.find(BOOKINGS, order_by="createdAt", descending=True)
            return [_to_booking(d) for d in docs]

        as_customer = self.store.find(BOOKINGS, where={"uid": user.uid})
        as_seller = self.store.find(BOOKINGS, where={"ownerUid": user.uid})
        logger.info(
            "Bookings for user %s: %d as customer, %d as seller",
            user.uid,
            len(as_customer),
            len(as_seller),
        )
        bookings = [_to_booking(d) for d in as_customer + as_seller]
        bookings.sort(key=lambda b: b.created_at, reverse=True)
        return bookings

    @translate_errors("Failed to fetch user bookings")
    def list_for_customer(self, user_id: str) -> List[Booking]:
        docs = self.store.find(BOOKINGS, where={"uid": user_id}, order_by="createdAt", descending=True)
        return [_to_booking(d) for d in docs]

    @translate_errors("Failed to fetch seller bookings")
    def list_for_seller(self, seller_id: str) -> List[Booking]:
        docs = self.store.find(BOOKINGS, where={"ownerUid": seller_id}, order_by="createdAt", descending=True)
        return [_to_booking(d) for d in docs]

    @translate_errors("Failed to fetch booking")
    def get(self, booking_id: str, uid: str) -> Booking:
        doc = self._get_owned(booking_id, uid, "access")

        owner = self.store.get(USERS, doc["ownerUid"])
        owner_username = owner.get("username", UNKNOWN_OWNER) if owner else UNKNOWN_OWNER
        return _to_booking(doc, ownerUsername=owner_username)

    # ---------- writes ----------

    @translate_errors("Failed to create booking")
    def create(self, payload: BookingCreate, uid: str) -> Booking:
        if not payload.owner_uid:
            raise ValidationFailure("ownerUid is required for creating a booking")
        if payload.uid != uid:
            raise Forbidden("Cannot create booking for another user")

        now = datetime.now(timezone.utc)
        fields = payload.model_dump(exclude={"quantity", "include_makeup"})
        booking = Booking(
            **fields,
            id=self.store.new_id(),
            status=BookingStatus.PENDING,
            created_at=now,
            updated_at=now,
            owner_username="",
            quantity=payload.quantity or 1,
            include_makeup=payload.include_makeup or False,
        )
        logger.info(
            "Creating booking %s: customer %s, seller %s, %s",
            booking.id,
            booking.uid,
            booking.owner_uid,
            booking.service_name,
        )
        self.store.add(BOOKINGS, booking.model_dump(by_alias=True, exclude_none=True))

        self._notify(
            "new booking",
            self.notifications.notify_new_booking,
            booking.owner_uid,
            booking.id,
            booking.service_name,
            booking.customer_name,
            booking.product_id,
        )
        return booking

    @translate_errors("Failed to update booking status")
    def update_status(
        self,
        booking_id: str,
        status: BookingStatus,
        uid: str,
        message: Optional[str] = None,
    ) -> Booking:
        status = BookingStatus(status)
        doc = self._get_owned(booking_id, uid, "update")
        current = BookingStatus(doc["status"])
        if not can_transition(current, status):
            logger.warning(
                "Booking %s moved %s -> %s by %s outside the usual lifecycle",
                booking_id,
                current.value,
                status.value,
                uid,
            )

        changes: Dict[str, Any] = {"status": status, "updatedAt": datetime.now(timezone.utc)}
        if status == BookingStatus.REJECTED and message:
            changes["rejectionMessage"] = message
        self.store.update(BOOKINGS, booking_id, changes)
        logger.info("Booking %s status set to %s by %s", booking_id, status.value, uid)

        customer, seller = doc["uid"], doc["ownerUid"]
        service_name, product_id = doc.get("serviceName", ""), doc.get("productId")

        if status == BookingStatus.CONFIRMED and uid != customer:
            self._notify(
                "booking accepted",
                self.notifications.notify_booking_accepted,
                customer,
                booking_id,
                service_name,
                product_id,
            )
        elif status == BookingStatus.REJECTED and uid != customer:
            self._notify(
                "booking rejected",
                self.notifications.notify_booking_rejected,
                customer,
                booking_id,
                service_name,
                message,
                product_id,
            )
        elif status == BookingStatus.CANCELLED and uid != seller:
            self._notify(
                "booking cancelled",
                self.notifications.notify_booking_cancelled,
                seller,
                booking_id,
                service_name,
                doc.get("customerName", ""),
                product_id,
            )

        return _to_booking(self.store.get(BOOKINGS, booking_id))

    def cancel(self, booking_id: str, uid: str) -> Booking:
        return self.update_status(booking_id, BookingStatus.CANCELLED, uid)

    @translate_errors("Failed to delete booking")
    def delete(self, booking_id: str, uid: str) -> None:
        self._get_owned(booking_id, uid, "delete")
        self.store.delete(BOOKINGS, booking_id)
        logger.info("Booking %s deleted by %s", booking_id, uid)

    @translate_errors("Failed to submit rating")
    def submit_rating(self, booking_id: str, rating: BookingRatingCreate, uid: str) -> Booking:
        doc = self.store.get(BOOKINGS, booking_id)
        if doc is None:
            raise NotFound(f"Booking with ID {booking_id} not found")
        if doc["uid"] != uid:
            raise Forbidden("Only the customer who made the booking can submit a rating")
        if not can_rate(doc["status"]):
            raise Forbidden("Can only rate confirmed bookings")

        now = datetime.now(timezone.utc)
        embedded = {"rating": rating.rating, "createdAt": now, "updatedAt": now}
        if rating.comment is not None:
            embedded["comment"] = rating.comment

        self.store.update(BOOKINGS, booking_id, {"rating": embedded, "updatedAt": now})
        logger.info("Rating %s submitted on booking %s", rating.rating, booking_id)
        return _to_booking(self.store.get(BOOKINGS, booking_id))

    # ---------- helpers ----------

    def _get_owned(self, booking_id: str, uid: str, action: str) -> Dict[str, Any]:
        doc = self.store.get(BOOKINGS, booking_id)
        if doc is None:
            raise NotFound(f"Booking with ID {booking_id} not found")
        if uid not in (doc["uid"], doc["ownerUid"]):
            raise Forbidden(f"You do not have permission to {action} this booking")
        return doc

    def _notify(self, event: str, send, *args) -> None:
        try:
            send(*args)
        except Exception:
            logger.exception("Failed to send %s notification", event)
