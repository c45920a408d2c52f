# app/api/deps.py
from typing import Optional, Sequence

from fastapi import Depends, UploadFile

from app.core.exceptions import ValidationFailure
from app.db.store import DocumentStore, get_store
from app.services.bookings import BookingService
from app.services.image_store import ImageStore, get_image_store
from app.services.notifications import NotificationService
from app.services.products import ProductService
from app.services.ratings import RatingService
from app.services.users import UserService

MAX_IMAGE_BYTES = 5 * 1024 * 1024


def get_notification_service(store: DocumentStore = Depends(get_store)) -> NotificationService:
    return NotificationService(store)


def get_booking_service(
    store: DocumentStore = Depends(get_store),
    notifications: NotificationService = Depends(get_notification_service),
) -> BookingService:
    return BookingService(store, notifications)


def get_rating_service(store: DocumentStore = Depends(get_store)) -> RatingService:
    return RatingService(store)


def get_product_service(
    store: DocumentStore = Depends(get_store),
    images: ImageStore = Depends(get_image_store),
) -> ProductService:
    return ProductService(store, images)


def get_user_service(
    store: DocumentStore = Depends(get_store),
    images: ImageStore = Depends(get_image_store),
) -> UserService:
    return UserService(store, images)


def read_image_upload(upload: UploadFile, allowed_types: Optional[Sequence[str]] = None) -> bytes:
    """Read an uploaded image, enforcing the content type and the 5MB limit."""
    content_type = upload.content_type or ""
    if allowed_types is not None:
        if content_type not in allowed_types:
            raise ValidationFailure("Only image files are allowed")
    elif content_type and not content_type.startswith("image/"):
        raise ValidationFailure("Only image uploads are allowed")

    content = upload.file.read()
    if not content:
        raise ValidationFailure("No file uploaded")
    if len(content) > MAX_IMAGE_BYTES:
        raise ValidationFailure("Image must be 5MB or smaller")
    return content
