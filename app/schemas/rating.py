# app/schemas/rating.py
from datetime import datetime
from typing import Optional

from app.schemas.common import CamelModel


class RatingCreate(CamelModel):
    product_id: str
    rating: float
    comment: Optional[str] = None
    booking_id: Optional[str] = None


class RatingUpdate(CamelModel):
    rating: Optional[float] = None
    comment: Optional[str] = None


class Rating(CamelModel):
    id: str
    product_id: str
    user_id: str
    user_name: str
    rating: float
    comment: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    booking_id: Optional[str] = None


class AverageRating(CamelModel):
    average: float
