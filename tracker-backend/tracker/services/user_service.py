# File: tracker/services/user_service.py
"""
User accounts: creation, lookup, listing and profile edits.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tracker.core.exceptions import UserNotFoundError, ValidationError
from tracker.core.security import get_password_hash, verify_password
from tracker.db.session import transaction
from tracker.models.user import User, UserRole

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.name, User.email).all()


def _ensure_email_free(db: Session, email: str, exclude_user_id: Optional[str] = None) -> None:
    query = db.query(User.id).filter(User.email == email)
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    if query.first() is not None:
        raise ValidationError("Email is already registered", field="email")


def _flush_email_unique(db: Session) -> None:
    # Another request may have taken the address since _ensure_email_free ran
    try:
        db.flush()
    except IntegrityError as exc:
        raise ValidationError("Email is already registered", field="email") from exc


def create_user(
    db: Session,
    *,
    name: str,
    email: str,
    password: str,
    role: UserRole = UserRole.member,
) -> User:
    name = name.strip()
    if not name:
        raise ValidationError("Name is required", field="name")
    email = normalize_email(email)
    _ensure_email_free(db, email)

    user = User(
        name=name,
        email=email,
        password_hash=get_password_hash(password),
        role=role,
    )
    with transaction(db):
        db.add(user)
        _flush_email_unique(db)

    logger.info("User created: user_id=%s role=%s", user.id, user.role.value)
    return user


def update_profile(
    db: Session,
    user: User,
    *,
    name: Optional[str] = None,
    email: Optional[str] = None,
    current_password: Optional[str] = None,
    new_password: Optional[str] = None,
) -> User:
    """
    Change the caller's own name, email and/or password. Arguments left
    as None are not touched. A password change needs the current password.
    """
    if name is not None and not name.strip():
        raise ValidationError("Name may not be empty", field="name")

    if email is not None:
        email = normalize_email(email)
        _ensure_email_free(db, email, exclude_user_id=user.id)

    if new_password is not None:
        if not current_password or not verify_password(current_password, user.password_hash):
            raise ValidationError("Current password is incorrect", field="currentPassword")

    with transaction(db):
        if name is not None:
            user.name = name.strip()
        if email is not None:
            user.email = email
        if new_password is not None:
            user.password_hash = get_password_hash(new_password)
        _flush_email_unique(db)

    logger.info("Profile updated: user_id=%s", user.id)
    return user


def ensure_admin(db: Session, *, name: str, email: str, password: str) -> User:
    """
    Create an admin account, or promote the existing account with this email.
    """
    user = get_user_by_email(db, email)
    if user is None:
        return create_user(db, name=name, email=email, password=password, role=UserRole.admin)

    with transaction(db):
        user.role = UserRole.admin
    logger.info("User promoted to admin: user_id=%s", user.id)
    return user
