"""Staff accounts: registration, credential checks, refresh-token rotation."""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.errors import Conflict, NotFound
from ..core.security import (
    REFRESH_TOKEN,
    InvalidToken,
    create_access_token,
    create_refresh_token,
    hash_password,
    verify_password,
    verify_token,
)
from ..models.base import generate_uuid
from ..models.user import User
from .pagination import Pagination, paginate

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "A user with this email already exists"


class AuthenticationFailed(Exception):
    """Credentials or refresh token rejected; rendered as 401 by the router."""


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def register_user(db: Session, data: Dict[str, Any]) -> User:
    email = _normalize_email(data["email"])
    if db.query(User.id).filter(User.email == email).first():
        raise Conflict(DUPLICATE_EMAIL_MESSAGE)

    user = User(
        id=generate_uuid(),
        email=email,
        hashed_password=hash_password(data["password"]),
        name=data["name"],
        role=data["role"],
        professional_license=data.get("professional_license"),
        specialty=data.get("specialty"),
        phone=data.get("phone"),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict(DUPLICATE_EMAIL_MESSAGE)
    db.refresh(user)
    logger.info("User %s registered with role %s", user.id, user.role)
    return user


def _issue_pair(user: User) -> Tuple[str, str]:
    access = create_access_token(user)
    refresh = create_refresh_token(user)
    user.refresh_token = refresh
    return access, refresh


def authenticate(db: Session, email: str, password: str) -> Tuple[User, str, str]:
    """Check credentials; returns the user with a fresh access/refresh pair."""
    user = db.query(User).filter(User.email == _normalize_email(email)).first()
    if not user or not verify_password(password, user.hashed_password):
        logger.warning("Failed login for %s", email)
        raise AuthenticationFailed("Invalid credentials")
    if not user.is_active:
        logger.warning("Login attempt on disabled account %s", email)
        raise AuthenticationFailed("Account is disabled")

    access, refresh = _issue_pair(user)
    user.last_login = datetime.utcnow()
    db.commit()
    db.refresh(user)
    return user, access, refresh


def rotate_refresh_token(db: Session, token: Optional[str]) -> Tuple[User, str, str]:
    """Exchange a stored refresh token for a new pair; the old one stops working."""
    try:
        claims = verify_token(token or "", expected_type=REFRESH_TOKEN)
    except InvalidToken as exc:
        raise AuthenticationFailed("Invalid refresh token") from exc

    user = db.query(User).filter(User.id == claims.get("user_id")).first()
    if not user or not user.is_active or user.refresh_token != token:
        raise AuthenticationFailed("Refresh token revoked or invalid")

    access, refresh = _issue_pair(user)
    db.commit()
    db.refresh(user)
    return user, access, refresh


def revoke_refresh_token(db: Session, user_id: str) -> None:
    user = db.query(User).filter(User.id == user_id).first()
    if user and user.refresh_token:
        user.refresh_token = None
        db.commit()


def get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User")
    return user


def list_users(
    db: Session,
    role: Optional[str] = None,
    is_active: Optional[bool] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[User], Pagination]:
    q = db.query(User)
    if role:
        q = q.filter(User.role == role)
    if is_active is not None:
        q = q.filter(User.is_active == is_active)
    return paginate(q.order_by(User.created_at.desc()), page, limit)


def set_active(db: Session, user_id: str, is_active: bool) -> User:
    """Enable or disable an account; disabling also revokes its refresh token."""
    user = get_user(db, user_id)
    user.is_active = is_active
    if not is_active:
        user.refresh_token = None
    db.commit()
    db.refresh(user)
    logger.info("User %s %s", user.id, "activated" if is_active else "deactivated")
    return user
