# app/services/users.py
import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, List, Optional

from app.core.exceptions import Forbidden, NotFound, ValidationFailure, translate_errors
from app.db.store import DocumentStore
from app.schemas.admin_dashboard import BookingCounts, DashboardStats, ProductCounts, UserCounts
from app.schemas.user import PhotoUploadResponse, ProfileUpdate, User, UserRole
from app.services.image_store import ImageStore

logger = logging.getLogger(__name__)

USERS = "users"
PRODUCTS = "products"
BOOKINGS = "bookings"

PROFILE_PHOTO_FOLDER = "profile-photos"


class UserService:
    """User records: lookups, the owner's own profile edits and the admin dashboard counters."""

    def __init__(self, store: DocumentStore, images: Optional[ImageStore] = None):
        self.store = store
        self.images = images

    @translate_errors("Failed to fetch user")
    def get(self, uid: str) -> User:
        return self._to_user(self._get_doc(uid))

    @translate_errors("Failed to fetch user")
    def get_by_username(self, username: str) -> User:
        matches = self.store.find(USERS, where={"username": username}, limit=1)
        if not matches:
            raise NotFound("User not found")
        return self._to_user(matches[0])

    @translate_errors("Failed to fetch users")
    def list_all(self) -> List[User]:
        users = [self._to_user(d) for d in self.store.all(USERS)]
        logger.info("Found %d users", len(users))
        return users

    @translate_errors("Failed to fetch dashboard statistics")
    def dashboard_stats(self) -> DashboardStats:
        roles = Counter(d.get("role") for d in self.store.all(USERS))
        return DashboardStats(
            users=UserCounts(
                total=sum(roles.values()),
                admin_count=roles[UserRole.ADMIN.value],
                customer_count=roles[UserRole.CUSTOMER.value],
                shop_owner_count=roles[UserRole.SHOP_OWNER.value],
            ),
            products=ProductCounts(total=self.store.count(PRODUCTS)),
            bookings=BookingCounts(
                total=self.store.count(BOOKINGS),
                pending=self.store.count(BOOKINGS, where={"status": "pending"}),
            ),
        )

    # ---------- own profile ----------

    @translate_errors("Failed to update profile")
    def update_profile(self, uid: str, payload: ProfileUpdate) -> User:
        doc = self._get_doc(uid)
        changes: Dict = {}

        if payload.username and payload.username != doc.get("username"):
            if self._taken("username", payload.username, uid):
                raise ValidationFailure("Username already taken")
            changes["username"] = payload.username

        if payload.email and payload.email != doc.get("email"):
            if self._taken("email", payload.email, uid):
                raise ValidationFailure("Email already registered")
            changes["email"] = payload.email

        if payload.profile is not None:
            edits = payload.profile.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)
            profile = dict(doc.get("profile") or {})
            if "address" in edits:
                edits["address"] = {**(profile.get("address") or {}), **edits["address"]}
            profile.update(edits)
            changes["profile"] = profile

        if changes:
            changes["updatedAt"] = datetime.now(timezone.utc)
            self.store.update(USERS, uid, changes)
            logger.info("Profile of %s updated: %s", uid, ", ".join(sorted(changes)))
        return self.get(uid)

    @translate_errors("Failed to upload photo")
    def upload_photo(self, uid: str, content: bytes, file_name: str) -> PhotoUploadResponse:
        doc = self._get_doc(uid)
        previous = (doc.get("profile") or {}).get("photoFileId")

        uploaded = self.images.upload_image(content, file_name, PROFILE_PHOTO_FOLDER)
        profile = {**(doc.get("profile") or {}), "photoURL": uploaded["url"], "photoFileId": uploaded["fileId"]}
        self.store.update(USERS, uid, {"profile": profile, "updatedAt": datetime.now(timezone.utc)})
        logger.info("Profile photo of %s set to %s", uid, uploaded["fileId"])

        if previous and previous != uploaded["fileId"]:
            try:
                self.images.delete_image(previous)
            except Exception:
                logger.exception("Failed to delete previous photo %s of %s", previous, uid)

        return PhotoUploadResponse(photo_url=uploaded["url"], file_id=uploaded["fileId"])

    @translate_errors("Failed to delete photo")
    def delete_photo(self, uid: str, file_id: str) -> None:
        doc = self._get_doc(uid)
        profile = dict(doc.get("profile") or {})
        if profile.get("photoFileId") != file_id:
            raise Forbidden("You can only delete your own photo")

        self.images.delete_image(file_id)
        profile.pop("photoFileId", None)
        profile.pop("photoURL", None)
        self.store.update(USERS, uid, {"profile": profile, "updatedAt": datetime.now(timezone.utc)})
        logger.info("Profile photo %s of %s deleted", file_id, uid)

    # ---------- helpers ----------

    def _get_doc(self, uid: str) -> Dict:
        doc = self.store.get(USERS, uid)
        if doc is None:
            raise NotFound("User not found")
        return doc

    def _taken(self, field: str, value: str, uid: str) -> bool:
        return any(d["id"] != uid for d in self.store.find(USERS, where={field: value}))

    @staticmethod
    def _to_user(doc: dict) -> User:
        data = {k: v for k, v in doc.items() if k != "id"}
        data.setdefault("uid", doc["id"])
        return User.model_validate(data)
