# app/schemas/booking.py
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from app.schemas.common import CamelModel


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class BookingRating(CamelModel):
    """Rating embedded on the booking document itself."""
    rating: float
    comment: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# --- CREATE (customer) ---
class BookingCreate(CamelModel):
    customer_name: str
    service_name: str
    product_id: str
    date: str
    time: str
    price: float = Field(..., ge=0)
    notes: Optional[str] = None

    uid: str
    owner_uid: Optional[str] = None

    seller_location: Optional[str] = None
    product_image: Optional[str] = None

    event_time_period: Optional[str] = None
    event_type: Optional[str] = None
    fitting_time: Optional[str] = None
    fitting_time_period: Optional[str] = None
    event_location: Optional[str] = None

    quantity: Optional[int] = Field(default=None, ge=1)
    include_makeup: Optional[bool] = None
    selected_size: Optional[str] = None


# --- UPDATE (either party) ---
class BookingStatusUpdate(CamelModel):
    status: BookingStatus
    message: Optional[str] = None


class BookingRatingCreate(CamelModel):
    rating: float
    comment: Optional[str] = None


# --- RESPONSE / stored document ---
class Booking(CamelModel):
    id: str
    customer_name: str
    service_name: str
    product_id: str
    date: str
    time: str
    status: BookingStatus
    price: float
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    uid: str
    owner_uid: str
    seller_location: Optional[str] = None
    product_image: Optional[str] = None
    owner_username: str = ""

    rating: Optional[BookingRating] = None

    event_time_period: Optional[str] = None
    event_type: Optional[str] = None
    fitting_time: Optional[str] = None
    fitting_time_period: Optional[str] = None
    event_location: Optional[str] = None
    rejection_message: Optional[str] = None

    quantity: int = 1
    include_makeup: bool = False
    selected_size: Optional[str] = None
