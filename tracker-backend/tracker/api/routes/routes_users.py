# File: tracker/api/routes/routes_users.py

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tracker.api.deps import get_current_user, require_admin
from tracker.db.session import get_db
from tracker.models.user import User
from tracker.schemas.user import ProfileUpdate, UserRead, UserSummary
from tracker.services import user_service

router = APIRouter()


@router.get(
    "",
    response_model=List[UserSummary],
    summary="List users (admin, for picking project members)",
)
def list_users(
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
):
    return [UserSummary.model_validate(user) for user in user_service.list_users(db)]


@router.put("/profile", response_model=UserRead, summary="Update own profile")
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = user_service.update_profile(
        db,
        current_user,
        name=payload.name,
        email=payload.email,
        current_password=payload.current_password,
        new_password=payload.new_password,
    )
    return UserRead.model_validate(user)
