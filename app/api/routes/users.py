# app/api/routes/users.py
from typing import List

from fastapi import APIRouter, Depends

from app.api.deps import get_user_service
from app.core.security import get_current_user, require_admin
from app.schemas.admin_dashboard import DashboardStats
from app.schemas.user import User
from app.services.users import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=User)
def me(current_user: User = Depends(get_current_user)):
    return current_user


# Admin only

@router.get("", response_model=List[User])
def list_users(
    users: UserService = Depends(get_user_service),
    admin: User = Depends(require_admin),
):
    return users.list_all()


@router.get("/dashboard/stats", response_model=DashboardStats)
def dashboard_stats(
    users: UserService = Depends(get_user_service),
    admin: User = Depends(require_admin),
):
    return users.dashboard_stats()


# Profile lookups

@router.get("/username/{username}", response_model=User)
def get_user_by_username(
    username: str,
    users: UserService = Depends(get_user_service),
    current_user: User = Depends(get_current_user),
):
    return users.get_by_username(username)


@router.get("/{uid}", response_model=User)
def get_user(
    uid: str,
    users: UserService = Depends(get_user_service),
    current_user: User = Depends(get_current_user),
):
    return users.get(uid)
