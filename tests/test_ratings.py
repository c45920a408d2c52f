from datetime import datetime, timedelta, timezone

import pytest

from app.core.exceptions import Forbidden, NotFound
from app.schemas.rating import RatingCreate, RatingUpdate
from app.schemas.user import User


def rate(rating_service, author, product_id="product-1", value=4, comment=None):
    return rating_service.create(RatingCreate(product_id=product_id, rating=value, comment=comment), author)


def test_create_copies_author_name(rating_service, store, customer):
    rating = rate(rating_service, customer, comment="Great fit")

    stored = store.get("ratings", rating.id)
    assert stored["userId"] == customer.uid
    assert stored["userName"] == "carla"
    assert stored["comment"] == "Great fit"
    assert "bookingId" not in stored


def test_create_without_username_is_anonymous(rating_service):
    author = User(uid="u-9", username="", email="u9@example.com")

    assert rate(rating_service, author).user_name == "Anonymous"


def test_average_of_no_ratings_is_zero(rating_service):
    assert rating_service.average_for_product("product-1") == 0


def test_average_is_arithmetic_mean(rating_service, customer, seller):
    rate(rating_service, customer, value=3)
    rate(rating_service, seller, value=5)
    rate(rating_service, customer, product_id="other", value=1)

    assert rating_service.average_for_product("product-1") == 4


def test_lists_are_newest_first(rating_service, store):
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for i, product_id in enumerate(["p-1", "p-2", "p-1"]):
        store.add(
            "ratings",
            {
                "productId": product_id,
                "userId": "u-1",
                "userName": "u",
                "rating": i + 1,
                "createdAt": base + timedelta(hours=i),
                "updatedAt": base + timedelta(hours=i),
            },
            doc_id=f"r-{i}",
        )

    assert [r.id for r in rating_service.list_for_product("p-1")] == ["r-2", "r-0"]
    assert [r.id for r in rating_service.list_for_user("u-1")] == ["r-2", "r-1", "r-0"]
    assert rating_service.list_for_user("nobody") == []


def test_author_can_update(rating_service, customer):
    rating = rate(rating_service, customer, value=2, comment="meh")

    updated = rating_service.update(rating.id, RatingUpdate(rating=5), customer.uid)

    assert updated.rating == 5
    assert updated.comment == "meh"
    assert updated.updated_at >= rating.updated_at


def test_others_cannot_update_or_delete(rating_service, customer, seller):
    rating = rate(rating_service, customer)

    with pytest.raises(Forbidden):
        rating_service.update(rating.id, RatingUpdate(rating=1), seller.uid)
    with pytest.raises(Forbidden):
        rating_service.delete(rating.id, seller.uid)

    assert rating_service.get(rating.id).rating == 4


def test_author_can_delete(rating_service, customer):
    rating = rate(rating_service, customer)

    rating_service.delete(rating.id, customer.uid)

    with pytest.raises(NotFound):
        rating_service.get(rating.id)


def test_missing_rating(rating_service, customer):
    with pytest.raises(NotFound):
        rating_service.update("missing", RatingUpdate(rating=1), customer.uid)
    with pytest.raises(NotFound):
        rating_service.delete("missing", customer.uid)


def test_update_ignores_explicit_nulls(rating_service, store, customer):
    rating = rate(rating_service, customer, value=3, comment="ok")

    updated = rating_service.update(rating.id, RatingUpdate.model_validate({"rating": None}), customer.uid)

    assert updated.rating == 3
    assert store.get("ratings", rating.id)["rating"] == 3
    assert rating_service.average_for_product("product-1") == 3
    assert len(rating_service.list_for_product("product-1")) == 1


def test_average_skips_ratings_without_a_value(rating_service, store, customer):
    rate(rating_service, customer, value=4)
    store.add("ratings", {"productId": "product-1", "userId": "u", "userName": "u", "rating": None})

    assert rating_service.average_for_product("product-1") == 4
