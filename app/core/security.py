# app/core/security.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import Settings, get_settings
from app.core.exceptions import Forbidden, Unauthorized, ValidationFailure
from app.db.store import DocumentStore, get_store
from app.schemas.user import User, UserCreate

logger = logging.getLogger(__name__)

USERS = "users"
# stored next to the user document, never returned by the API
CREDENTIALS = "credentials"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


class IdentityProvider:
    """
    Credential checks, token issuance/verification and user records.
    """

    def __init__(self, store: DocumentStore, settings: Settings):
        self.store = store
        self.settings = settings

    # ---------- users ----------

    def create_user(self, payload: UserCreate) -> User:
        if self.store.find(USERS, where={"email": payload.email}, limit=1):
            raise ValidationFailure("Email already registered")
        if self.store.find(USERS, where={"username": payload.username}, limit=1):
            raise ValidationFailure("Username already taken")

        uid = self.store.new_id()
        now = datetime.now(timezone.utc)
        profile = {}
        if payload.first_name:
            profile["firstName"] = payload.first_name
        if payload.last_name:
            profile["lastName"] = payload.last_name

        user = User(
            uid=uid,
            username=payload.username,
            email=payload.email,
            role=payload.role,
            shop_name=payload.shop_name,
            location=payload.location,
            profile=profile or None,
            created_at=now,
            updated_at=now,
        )
        with self.store.batch():
            self.store.add(USERS, user.model_dump(by_alias=True, exclude_none=True), doc_id=uid)
            self.store.add(CREDENTIALS, {"passwordHash": hash_password(payload.password)}, doc_id=uid)

        logger.info("Created user %s with role %s", uid, user.role.value)
        return user

    def get_user_by_uid(self, uid: str) -> Optional[User]:
        data = self.store.get(USERS, uid)
        if data is None:
            return None
        data.pop("id", None)
        return User.model_validate(data)

    def authenticate(self, email: str, password: str) -> User:
        matches = self.store.find(USERS, where={"email": email}, limit=1)
        if not matches:
            raise Unauthorized("Invalid credentials")
        uid = matches[0]["uid"]
        credentials = self.store.get(CREDENTIALS, uid)
        if not credentials or not verify_password(password, credentials["passwordHash"]):
            raise Unauthorized("Invalid credentials")
        return self.get_user_by_uid(uid)

    def change_password(self, uid: str, current_password: str, new_password: str) -> None:
        credentials = self.store.get(CREDENTIALS, uid)
        if not credentials or not verify_password(current_password, credentials["passwordHash"]):
            raise ValidationFailure("Current password is incorrect")
        self.store.update(CREDENTIALS, uid, {"passwordHash": hash_password(new_password)})
        logger.info("Password changed for user %s", uid)

    # ---------- tokens ----------

    def issue_token(self, uid: str, expires_delta: Optional[timedelta] = None) -> str:
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=self.settings.access_token_expire_minutes)
        )
        return jwt.encode(
            {"sub": uid, "exp": expire},
            self.settings.secret_key,
            algorithm=self.settings.algorithm,
        )

    def verify_token(self, token: str) -> str:
        try:
            claims = jwt.decode(token, self.settings.secret_key, algorithms=[self.settings.algorithm])
        except JWTError:
            raise Unauthorized("Invalid token")
        uid = claims.get("sub")
        if not uid:
            raise Unauthorized("Invalid token format")
        return uid


# ---------- FastAPI dependencies ----------

def get_identity_provider(
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> IdentityProvider:
    return IdentityProvider(store, settings)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> User:
    if credentials is None or not credentials.credentials:
        raise Unauthorized("No authorization header")

    uid = identity.verify_token(credentials.credentials)
    user = identity.get_user_by_uid(uid)
    if user is None:
        raise Unauthorized("User not found")
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise Forbidden("Admin only")
    return current_user
