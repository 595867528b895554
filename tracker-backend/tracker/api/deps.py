# File: tracker/api/deps.py

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from tracker.db.session import get_db
from tracker.models.user import User
from tracker.services import access_service, auth_service

# A missing header is reported by auth_service.authenticate_token.
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    FastAPI dependency resolving the caller from ``Authorization: Bearer``.

    Usage in route functions:
        current_user: User = Depends(get_current_user)
    """
    token = credentials.credentials if credentials else None
    return auth_service.authenticate_token(db, token)


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    access_service.require_admin(current_user)
    return current_user


def require_project_member(
    project_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> User:
    """
    Admins pass; anyone else needs a membership row for ``project_id``
    (taken from the route path).
    """
    access_service.require_project_member(db, current_user, project_id)
    return current_user
