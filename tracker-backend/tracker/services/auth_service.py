# File: tracker/services/auth_service.py

"""
Authentication service.

  - Resolving a bearer token to a User
  - Password verification
  - Token issuing on register / login
"""

import logging
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from tracker.core.exceptions import AuthenticationError, UserNotFoundError
from tracker.core.security import create_access_token, decode_access_token, verify_password
from tracker.models.user import User
from tracker.services import user_service

logger = logging.getLogger(__name__)


def authenticate_token(db: Session, token: Optional[str]) -> User:
    """
    Return the user a bearer token was issued for.

    Fails with AuthenticationError when the token is missing, malformed,
    expired, or names a user that no longer exists.
    """
    if not token:
        raise AuthenticationError("Authentication required")

    user_id = decode_access_token(token)
    try:
        return user_service.get_user(db, user_id)
    except UserNotFoundError:
        logger.warning("Token subject not found: user_id=%s", user_id)
        raise AuthenticationError("User not found")


def authenticate_user(
    db: Session,
    *,
    email: str,
    password: str,
) -> Optional[User]:
    """
    Look up a user by email and check the password. None on any mismatch.
    """
    user = user_service.get_user_by_email(db, email)
    if user is None:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def issue_token(user: User) -> str:
    return create_access_token(user.id)


def login(db: Session, *, email: str, password: str) -> Tuple[str, User]:
    user = authenticate_user(db, email=email, password=password)
    if user is None:
        logger.warning("Login failed: email=%s", email)
        raise AuthenticationError("Invalid credentials")
    logger.info("Login: user_id=%s", user.id)
    return issue_token(user), user


def register(db: Session, *, name: str, email: str, password: str) -> Tuple[str, User]:
    user = user_service.create_user(db, name=name, email=email, password=password)
    return issue_token(user), user
