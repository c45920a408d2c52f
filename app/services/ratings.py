# app/services/ratings.py
import logging
from datetime import datetime, timezone
from typing import List

from app.core.exceptions import Forbidden, NotFound, translate_errors
from app.db.store import DocumentStore
from app.schemas.rating import Rating, RatingCreate, RatingUpdate
from app.schemas.user import User

logger = logging.getLogger(__name__)

RATINGS = "ratings"
ANONYMOUS = "Anonymous"


class RatingService:
    """Standalone product reviews (independent of the rating embedded on a booking)."""

    def __init__(self, store: DocumentStore):
        self.store = store

    @translate_errors("Failed to create rating")
    def create(self, payload: RatingCreate, author: User) -> Rating:
        now = datetime.now(timezone.utc)
        rating = Rating(
            id=self.store.new_id(),
            product_id=payload.product_id,
            user_id=author.uid,
            # copied once; later username changes are not propagated
            user_name=author.username or ANONYMOUS,
            rating=payload.rating,
            comment=payload.comment,
            booking_id=payload.booking_id,
            created_at=now,
            updated_at=now,
        )
        logger.info("Creating rating %s for product %s by %s", rating.id, rating.product_id, author.uid)
        self.store.add(RATINGS, rating.model_dump(by_alias=True, exclude_none=True))
        return rating

    @translate_errors("Failed to fetch product ratings")
    def list_for_product(self, product_id: str) -> List[Rating]:
        docs = self.store.find(RATINGS, where={"productId": product_id}, order_by="createdAt", descending=True)
        return [Rating.model_validate(d) for d in docs]

    @translate_errors("Failed to fetch user ratings")
    def list_for_user(self, user_id: str) -> List[Rating]:
        docs = self.store.find(RATINGS, where={"userId": user_id}, order_by="createdAt", descending=True)
        return [Rating.model_validate(d) for d in docs]

    @translate_errors("Failed to fetch rating")
    def get(self, rating_id: str) -> Rating:
        doc = self.store.get(RATINGS, rating_id)
        if doc is None:
            raise NotFound(f"Rating with ID {rating_id} not found")
        return Rating.model_validate(doc)

    @translate_errors("Failed to update rating")
    def update(self, rating_id: str, payload: RatingUpdate, user_id: str) -> Rating:
        self._get_authored(rating_id, user_id, "update")

        # null leaves the field unchanged
        changes = payload.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)
        changes["updatedAt"] = datetime.now(timezone.utc)
        self.store.update(RATINGS, rating_id, changes)
        return Rating.model_validate(self.store.get(RATINGS, rating_id))

    @translate_errors("Failed to delete rating")
    def delete(self, rating_id: str, user_id: str) -> None:
        self._get_authored(rating_id, user_id, "delete")
        self.store.delete(RATINGS, rating_id)
        logger.info("Rating %s deleted by %s", rating_id, user_id)

    @translate_errors("Failed to calculate average rating")
    def average_for_product(self, product_id: str) -> float:
        docs = self.store.find(RATINGS, where={"productId": product_id})
        values = [d["rating"] for d in docs if d.get("rating") is not None]
        if not values:
            return 0
        return sum(values) / len(values)

    def _get_authored(self, rating_id: str, user_id: str, action: str) -> dict:
        doc = self.store.get(RATINGS, rating_id)
        if doc is None:
            raise NotFound(f"Rating with ID {rating_id} not found")
        if doc["userId"] != user_id:
            raise Forbidden(f"You do not have permission to {action} this rating")
        return doc
