from fastapi import APIRouter, Depends, File, UploadFile, status

from app.api.deps import get_user_service, read_image_upload
from app.core.exceptions import ValidationFailure
from app.core.security import IdentityProvider, get_current_user, get_identity_provider
from app.schemas.common import MessageResponse
from app.schemas.user import AuthResponse, PhotoUploadResponse, ProfileUpdate, User, UserCreate, UserLogin
from app.services.users import UserService

router = APIRouter(prefix="/auth", tags=["auth"])

PROFILE_PHOTO_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user: UserCreate, identity: IdentityProvider = Depends(get_identity_provider)):
    new_user = identity.create_user(user)
    return AuthResponse(user=new_user, access_token=identity.issue_token(new_user.uid))


@router.post("/login", response_model=AuthResponse)
def login(credentials: UserLogin, identity: IdentityProvider = Depends(get_identity_provider)):
    user = identity.authenticate(credentials.email, credentials.password)
    return AuthResponse(user=user, access_token=identity.issue_token(user.uid))


# The caller's own profile

@router.get("/me", response_model=User)
def me(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/profile", response_model=User)
def update_profile(
    payload: ProfileUpdate,
    users: UserService = Depends(get_user_service),
    identity: IdentityProvider = Depends(get_identity_provider),
    current_user: User = Depends(get_current_user),
):
    # password first, so a wrong current password leaves the profile untouched
    if payload.new_password:
        if not payload.current_password:
            raise ValidationFailure("Current password is required to set a new password")
        identity.change_password(current_user.uid, payload.current_password, payload.new_password)
    return users.update_profile(current_user.uid, payload)


@router.post("/upload-photo", response_model=PhotoUploadResponse)
def upload_photo(
    photo: UploadFile = File(...),
    users: UserService = Depends(get_user_service),
    current_user: User = Depends(get_current_user),
):
    content = read_image_upload(photo, PROFILE_PHOTO_TYPES)
    return users.upload_photo(current_user.uid, content, photo.filename or "profile-photo")


@router.delete("/photos/{file_id}", response_model=MessageResponse)
def delete_photo(
    file_id: str,
    users: UserService = Depends(get_user_service),
    current_user: User = Depends(get_current_user),
):
    users.delete_photo(current_user.uid, file_id)
    return {"message": "Photo deleted successfully"}
