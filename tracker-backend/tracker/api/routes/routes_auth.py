# File: tracker/api/routes/routes_auth.py

"""
Auth API routes: register, login, and the current user's profile.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tracker.api.deps import get_current_user
from tracker.db.session import get_db
from tracker.models.user import User
from tracker.schemas.user import TokenResponse, UserCreate, UserLogin, UserRead
from tracker.services import auth_service

router = APIRouter()


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new member account",
)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    token, user = auth_service.register(
        db,
        name=payload.name,
        email=payload.email,
        password=payload.password,
    )
    return TokenResponse(token=token, user=UserRead.model_validate(user))


@router.post("/login", response_model=TokenResponse, summary="Exchange credentials for a token")
def login(payload: UserLogin, db: Session = Depends(get_db)):
    token, user = auth_service.login(db, email=payload.email, password=payload.password)
    return TokenResponse(token=token, user=UserRead.model_validate(user))


@router.get("/me", response_model=UserRead, summary="Current user")
def me(current_user: User = Depends(get_current_user)):
    return UserRead.model_validate(current_user)
