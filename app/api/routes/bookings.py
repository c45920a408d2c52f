from typing import List

from fastapi import APIRouter, Depends

from app.api.deps import get_booking_service
from app.core.security import get_current_user
from app.schemas.booking import Booking, BookingCreate, BookingRatingCreate, BookingStatusUpdate
from app.schemas.common import MessageResponse
from app.schemas.user import User
from app.services.bookings import BookingService

router = APIRouter(prefix="/bookings", tags=["bookings"])


# Bookings visible to the caller (admin sees everything)

@router.get("", response_model=List[Booking])
def list_bookings(
    bookings: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_user),
):
    return bookings.list_for_principal(current_user)


# NOTE: these two are not scoped to the caller; any authenticated user can read them

@router.get("/user/{user_id}", response_model=List[Booking])
def list_customer_bookings(
    user_id: str,
    bookings: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_user),
):
    return bookings.list_for_customer(user_id)


@router.get("/seller/{seller_id}", response_model=List[Booking])
def list_seller_bookings(
    seller_id: str,
    bookings: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_user),
):
    return bookings.list_for_seller(seller_id)


@router.get("/{booking_id}", response_model=Booking)
def get_booking(
    booking_id: str,
    bookings: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_user),
):
    return bookings.get(booking_id, current_user.uid)


# Customer creates booking

@router.post("", response_model=Booking)
def create_booking(
    booking: BookingCreate,
    bookings: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_user),
):
    return bookings.create(booking, current_user.uid)


# Either party changes the status

@router.patch("/{booking_id}/status", response_model=Booking)
def update_booking_status(
    booking_id: str,
    body: BookingStatusUpdate,
    bookings: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_user),
):
    return bookings.update_status(booking_id, body.status, current_user.uid, body.message)


@router.post("/{booking_id}/cancel", response_model=Booking)
def cancel_booking(
    booking_id: str,
    bookings: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_user),
):
    return bookings.cancel(booking_id, current_user.uid)


@router.delete("/{booking_id}", response_model=MessageResponse)
def delete_booking(
    booking_id: str,
    bookings: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_user),
):
    bookings.delete(booking_id, current_user.uid)
    return {"message": "Booking deleted successfully"}


# Customer rates a confirmed booking

@router.post("/{booking_id}/rate", response_model=Booking)
def rate_booking(
    booking_id: str,
    rating: BookingRatingCreate,
    bookings: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_user),
):
    return bookings.submit_rating(booking_id, rating, current_user.uid)
