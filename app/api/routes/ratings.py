# app/api/routes/ratings.py
from typing import List

from fastapi import APIRouter, Depends

from app.api.deps import get_rating_service
from app.core.security import get_current_user
from app.schemas.common import MessageResponse
from app.schemas.rating import AverageRating, Rating, RatingCreate, RatingUpdate
from app.schemas.user import User
from app.services.ratings import RatingService

router = APIRouter(prefix="/ratings", tags=["ratings"])


@router.post("", response_model=Rating)
def create_rating(
    rating_in: RatingCreate,
    ratings: RatingService = Depends(get_rating_service),
    current_user: User = Depends(get_current_user),
):
    return ratings.create(rating_in, current_user)


@router.get("/product/{product_id}", response_model=List[Rating])
def list_product_ratings(
    product_id: str,
    ratings: RatingService = Depends(get_rating_service),
    current_user: User = Depends(get_current_user),
):
    return ratings.list_for_product(product_id)


@router.get("/product/{product_id}/average", response_model=AverageRating)
def product_average_rating(
    product_id: str,
    ratings: RatingService = Depends(get_rating_service),
    current_user: User = Depends(get_current_user),
):
    return AverageRating(average=ratings.average_for_product(product_id))


# Ratings written by the caller
@router.get("/user", response_model=List[Rating])
def list_my_ratings(
    ratings: RatingService = Depends(get_rating_service),
    current_user: User = Depends(get_current_user),
):
    return ratings.list_for_user(current_user.uid)


@router.get("/{rating_id}", response_model=Rating)
def get_rating(
    rating_id: str,
    ratings: RatingService = Depends(get_rating_service),
    current_user: User = Depends(get_current_user),
):
    return ratings.get(rating_id)


@router.put("/{rating_id}", response_model=Rating)
def update_rating(
    rating_id: str,
    rating_in: RatingUpdate,
    ratings: RatingService = Depends(get_rating_service),
    current_user: User = Depends(get_current_user),
):
    return ratings.update(rating_id, rating_in, current_user.uid)


@router.delete("/{rating_id}", response_model=MessageResponse)
def delete_rating(
    rating_id: str,
    ratings: RatingService = Depends(get_rating_service),
    current_user: User = Depends(get_current_user),
):
    ratings.delete(rating_id, current_user.uid)
    return {"message": "Rating deleted successfully"}
