import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SEED_SAMPLE_PRODUCTS", "false")
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base, get_db
from app.db.models import document  # noqa: F401
from app.db.store import DocumentStore
from app.main import app
from app.schemas.user import User, UserRole
from app.services.bookings import BookingService
from app.services.image_store import get_image_store
from app.services.notifications import NotificationService
from app.services.products import ProductService
from app.services.ratings import RatingService
from app.services.users import UserService


class FakeImageStore:
    def __init__(self):
        self.deleted = []
        self.uploaded = []

    def upload_image(self, content, file_name, folder):
        file_id = f"file-{len(self.uploaded) + 1}"
        self.uploaded.append((file_name, folder, len(content)))
        return {"url": f"https://images.test/{folder}/{file_name}", "fileId": file_id}

    def delete_image(self, file_id):
        self.deleted.append(file_id)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store(db):
    return DocumentStore(db)


@pytest.fixture
def notification_service(store):
    return NotificationService(store)


@pytest.fixture
def booking_service(store, notification_service):
    return BookingService(store, notification_service)


@pytest.fixture
def rating_service(store):
    return RatingService(store)


@pytest.fixture
def images():
    return FakeImageStore()


@pytest.fixture
def product_service(store, images):
    return ProductService(store, images)


@pytest.fixture
def user_service(store, images):
    return UserService(store, images)


def make_user(store, uid, username=None, role=UserRole.CUSTOMER, photo_url=None):
    user = User(
        uid=uid,
        username=username or uid,
        email=f"{uid}@example.com",
        role=role,
        profile={"photoURL": photo_url} if photo_url else None,
    )
    store.add("users", user.model_dump(by_alias=True, exclude_none=True), doc_id=uid)
    return user


@pytest.fixture
def customer(store):
    return make_user(store, "customer-1", "carla")


@pytest.fixture
def seller(store):
    return make_user(store, "seller-1", "sam_shop", role=UserRole.SHOP_OWNER, photo_url="https://img.test/sam.png")


@pytest.fixture
def admin(store):
    return make_user(store, "admin-1", "root", role=UserRole.ADMIN)


@pytest.fixture
def client(session_factory, images):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_store] = lambda: images
    yield TestClient(app)
    app.dependency_overrides.clear()


def register(client, username, role="customer"):
    response = client.post(
        "/auth/register",
        json={
            "username": username,
            "email": f"{username}@example.com",
            "password": "s3cret-password",
            "role": role,
        },
    )
    assert response.status_code == 201, response.text
    body = response.json()
    return body["user"]["uid"], {"Authorization": f"Bearer {body['accessToken']}"}
