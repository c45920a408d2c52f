# app/schemas/notification.py
from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from app.schemas.common import CamelModel


class NotificationType(str, Enum):
    NEW_BOOKING = "new_booking"
    BOOKING_ACCEPTED = "booking_accepted"
    BOOKING_REJECTED = "booking_rejected"
    BOOKING_CANCELLED = "booking_cancelled"
    BOOKING_COMPLETED = "booking_completed"


# Payloads, one per notification type. `kind` is the discriminator.

class NewBookingData(CamelModel):
    kind: Literal["new_booking"] = "new_booking"
    service_name: str
    customer_name: str


class BookingAcceptedData(CamelModel):
    kind: Literal["booking_accepted"] = "booking_accepted"
    service_name: str


class BookingRejectedData(CamelModel):
    kind: Literal["booking_rejected"] = "booking_rejected"
    service_name: str
    reason: Optional[str] = None


class BookingCancelledData(CamelModel):
    kind: Literal["booking_cancelled"] = "booking_cancelled"
    service_name: str
    customer_name: str


class BookingCompletedData(CamelModel):
    kind: Literal["booking_completed"] = "booking_completed"
    service_name: str


NotificationData = Annotated[
    Union[
        NewBookingData,
        BookingAcceptedData,
        BookingRejectedData,
        BookingCancelledData,
        BookingCompletedData,
    ],
    Field(discriminator="kind"),
]


class Notification(CamelModel):
    id: str
    user_id: str
    title: str
    message: str
    type: NotificationType
    is_read: bool = False
    related_booking_id: Optional[str] = None
    related_product_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    data: Optional[NotificationData] = None


class UnreadCount(BaseModel):
    count: int
