from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import EmailStr, Field

from app.schemas.common import CamelModel


class UserRole(str, Enum):
    ADMIN = "admin"
    CUSTOMER = "customer"
    SHOP_OWNER = "shop_owner"


class Address(CamelModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    phone_number: Optional[str] = None


class Profile(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    bio: Optional[str] = None
    photo_url: Optional[str] = Field(default=None, alias="photoURL")
    photo_file_id: Optional[str] = None
    address: Optional[Address] = None


class UserCreate(CamelModel):
    username: str = Field(..., min_length=3)
    email: EmailStr
    password: str = Field(..., min_length=8)
    role: UserRole = UserRole.CUSTOMER
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    shop_name: Optional[str] = None
    location: Optional[str] = None


class UserLogin(CamelModel):
    email: EmailStr
    password: str


class User(CamelModel):
    uid: str
    username: str
    email: EmailStr
    role: UserRole = UserRole.CUSTOMER
    shop_name: Optional[str] = None
    location: Optional[str] = None
    profile: Optional[Profile] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


# --- profile edits (owner) ---
class ProfileFields(CamelModel):
    bio: Optional[str] = None
    photo_url: Optional[str] = Field(default=None, alias="photoURL")
    address: Optional[Address] = None


class ProfileUpdate(CamelModel):
    username: Optional[str] = Field(default=None, min_length=3)
    email: Optional[EmailStr] = None
    profile: Optional[ProfileFields] = None
    current_password: Optional[str] = None
    new_password: Optional[str] = Field(default=None, min_length=8)


class PhotoUploadResponse(CamelModel):
    photo_url: str
    file_id: str


class AuthResponse(CamelModel):
    user: User
    access_token: str
    token_type: str = "bearer"
