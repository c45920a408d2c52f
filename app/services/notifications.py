# app/services/notifications.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

from app.core.exceptions import Forbidden, NotFound, translate_errors
from app.db.store import DocumentStore
from app.schemas.notification import (
    BookingAcceptedData,
    BookingCancelledData,
    BookingCompletedData,
    BookingRejectedData,
    NewBookingData,
    Notification,
    NotificationData,
    NotificationType,
)

logger = logging.getLogger(__name__)

NOTIFICATIONS = "notifications"
LIST_LIMIT = 50


class NotificationService:
    def __init__(self, store: DocumentStore):
        self.store = store

    @translate_errors("Failed to create notification")
    def create(
        self,
        user_id: str,
        title: str,
        message: str,
        notification_type: NotificationType,
        related_booking_id: Optional[str] = None,
        related_product_id: Optional[str] = None,
        data: Optional[NotificationData] = None,
    ) -> Notification:
        now = datetime.now(timezone.utc)
        notification = Notification(
            id=self.store.new_id(),
            user_id=user_id,
            title=title,
            message=message,
            type=notification_type,
            is_read=False,
            related_booking_id=related_booking_id,
            related_product_id=related_product_id,
            created_at=now,
            updated_at=now,
            data=data,
        )
        logger.info("Creating notification %s (%s) for user %s", notification.id, notification_type.value, user_id)

        # absent optional fields are left out of the document, not stored as null
        self.store.add(NOTIFICATIONS, notification.model_dump(by_alias=True, exclude_none=True))
        return notification

    @translate_errors("Failed to fetch notifications")
    def list_for_user(self, user_id: str) -> List[Notification]:
        docs = self.store.find(
            NOTIFICATIONS,
            where={"userId": user_id},
            order_by="createdAt",
            descending=True,
            limit=LIST_LIMIT,
        )
        return [Notification.model_validate(d) for d in docs]

    @translate_errors("Failed to get unread count")
    def unread_count(self, user_id: str) -> int:
        return self.store.count(NOTIFICATIONS, where={"userId": user_id, "isRead": False})

    @translate_errors("Failed to mark notification as read")
    def mark_read(self, notification_id: str, user_id: str) -> None:
        doc = self.store.get(NOTIFICATIONS, notification_id)
        if doc is None:
            raise NotFound(f"Notification with ID {notification_id} not found")
        if doc["userId"] != user_id:
            raise Forbidden("You do not have permission to update this notification")

        self.store.update(
            NOTIFICATIONS,
            notification_id,
            {"isRead": True, "updatedAt": datetime.now(timezone.utc)},
        )
        logger.info("Marked notification %s as read for user %s", notification_id, user_id)

    @translate_errors("Failed to mark all notifications as read")
    def mark_all_read(self, user_id: str) -> int:
        unread = self.store.find(NOTIFICATIONS, where={"userId": user_id, "isRead": False})
        now = datetime.now(timezone.utc)
        with self.store.batch():
            for doc in unread:
                self.store.update(NOTIFICATIONS, doc["id"], {"isRead": True, "updatedAt": now})
        logger.info("Marked %d notifications as read for user %s", len(unread), user_id)
        return len(unread)

    # ---------- booking event helpers ----------

    def notify_booking_accepted(
        self, customer_id: str, booking_id: str, service_name: str, product_id: Optional[str] = None
    ) -> Notification:
        return self.create(
            customer_id,
            "Booking Confirmed! 🎉",
            f'Your booking for "{service_name}" has been accepted by the seller.',
            NotificationType.BOOKING_ACCEPTED,
            booking_id,
            product_id,
            BookingAcceptedData(service_name=service_name),
        )

    def notify_booking_rejected(
        self,
        customer_id: str,
        booking_id: str,
        service_name: str,
        reason: Optional[str] = None,
        product_id: Optional[str] = None,
    ) -> Notification:
        if reason:
            message = f'Your booking for "{service_name}" was declined. Reason: {reason}'
        else:
            message = f'Your booking for "{service_name}" was declined by the seller.'
        return self.create(
            customer_id,
            "Booking Declined",
            message,
            NotificationType.BOOKING_REJECTED,
            booking_id,
            product_id,
            BookingRejectedData(service_name=service_name, reason=reason),
        )

    def notify_new_booking(
        self,
        seller_id: str,
        booking_id: str,
        service_name: str,
        customer_name: str,
        product_id: Optional[str] = None,
    ) -> Notification:
        return self.create(
            seller_id,
            "New Booking Request! 📅",
            f'{customer_name} wants to rent your "{service_name}". Please review and respond.',
            NotificationType.NEW_BOOKING,
            booking_id,
            product_id,
            NewBookingData(service_name=service_name, customer_name=customer_name),
        )

    def notify_booking_cancelled(
        self,
        seller_id: str,
        booking_id: str,
        service_name: str,
        customer_name: str,
        product_id: Optional[str] = None,
    ) -> Notification:
        return self.create(
            seller_id,
            "Booking Cancelled",
            f'{customer_name} has cancelled their booking for "{service_name}".',
            NotificationType.BOOKING_CANCELLED,
            booking_id,
            product_id,
            BookingCancelledData(service_name=service_name, customer_name=customer_name),
        )

    def notify_booking_completed(
        self, customer_id: str, booking_id: str, service_name: str, product_id: Optional[str] = None
    ) -> Notification:
        # called by the external order-completion process, no endpoint uses it
        return self.create(
            customer_id,
            "Order Completed! ✅",
            f'Your order for "{service_name}" has been completed successfully. '
            "The rented items have been returned and are now available in inventory. "
            "Thank you for renting with us!",
            NotificationType.BOOKING_COMPLETED,
            booking_id,
            product_id,
            BookingCompletedData(service_name=service_name),
        )
