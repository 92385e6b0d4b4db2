"""Authentication endpoints: register, login, refresh, logout, me."""
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from ..models.base import get_db
from ..models.user import User, UserRole
from ..core.config import settings
from ..core.permissions import PERM_USER_MANAGE, permissions_for
from ..core.security import (
    InvalidToken,
    SessionContext,
    extract_token,
    get_current_user,
    require_permission,
    verify_token,
)
from ..services import users as user_service
from ..services.validation import password_feedback, validate_phone
from .common import MessageResponse, one_of

router = APIRouter(prefix="/auth", tags=["auth"])


# ── Request / Response schemas ──────────────────────────────────────────────

class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=200)
    email: EmailStr
    password: str
    role: str = UserRole.NURSE
    specialty: Optional[str] = Field(None, max_length=100)
    professional_license: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = None

    @field_validator("password")
    @classmethod
    def _password(cls, v):
        problems = password_feedback(v)
        if problems:
            raise ValueError("; ".join(problems))
        return v

    @field_validator("role")
    @classmethod
    def _role(cls, v):
        return one_of(v, UserRole.ALL, "role")

    @field_validator("phone")
    @classmethod
    def _phone(cls, v):
        if v and not validate_phone(v):
            raise ValueError("Phone must have 10 or 11 digits including area code")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: Optional[str] = None


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    role: str
    is_active: bool
    specialty: Optional[str]
    professional_license: Optional[str]
    phone: Optional[str]
    last_login: Optional[datetime]
    created_at: datetime


class ProfileResponse(UserResponse):
    permissions: list


class TokenResponse(BaseModel):
    user: UserResponse
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


# ── Cookies ──────────────────────────────────────────────────────────────────

def _set_session_cookies(response: Response, access: str, refresh: str) -> None:
    response.set_cookie(
        settings.ACCESS_COOKIE_NAME,
        access,
        max_age=settings.ACCESS_TOKEN_EXPIRE_DAYS * 24 * 3600,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        path="/",
    )
    response.set_cookie(
        settings.REFRESH_COOKIE_NAME,
        refresh,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 3600,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


def _clear_session_cookies(response: Response) -> None:
    response.delete_cookie(settings.ACCESS_COOKIE_NAME, path="/")
    response.delete_cookie(settings.REFRESH_COOKIE_NAME, path="/")


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


# ── Endpoints ────────────────────────────────────────────────────────────────

@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    req: RegisterRequest,
    db: Session = Depends(get_db),
    _admin: SessionContext = Depends(require_permission(PERM_USER_MANAGE)),
):
    """Admin-only: create a new staff account."""
    return user_service.register_user(db, req.model_dump())


@router.post("/login", response_model=TokenResponse)
def login(req: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """Authenticate; tokens come back in the body and as httpOnly cookies."""
    try:
        user, access, refresh = user_service.authenticate(db, req.email, req.password)
    except user_service.AuthenticationFailed as exc:
        raise _unauthorized(str(exc))
    _set_session_cookies(response, access, refresh)
    return TokenResponse(user=UserResponse.model_validate(user), access_token=access, refresh_token=refresh)


@router.post("/refresh", response_model=TokenResponse)
def refresh_token(
    request: Request,
    response: Response,
    req: Optional[RefreshRequest] = None,
    db: Session = Depends(get_db),
):
    """Exchange a valid refresh token (body or cookie) for a new pair."""
    token = (req.refresh_token if req else None) or request.cookies.get(settings.REFRESH_COOKIE_NAME)
    if not token:
        raise _unauthorized("Refresh token required")
    try:
        user, access, refresh = user_service.rotate_refresh_token(db, token)
    except user_service.AuthenticationFailed as exc:
        raise _unauthorized(str(exc))
    _set_session_cookies(response, access, refresh)
    return TokenResponse(user=UserResponse.model_validate(user), access_token=access, refresh_token=refresh)


@router.post("/logout", response_model=MessageResponse)
def logout(request: Request, response: Response, db: Session = Depends(get_db)):
    """Clear the session cookies; a known caller also loses its stored refresh token."""
    token = extract_token(request)
    if token:
        try:
            claims = verify_token(token)
        except InvalidToken:
            claims = None
        if claims and claims.get("user_id"):
            user_service.revoke_refresh_token(db, claims["user_id"])
    _clear_session_cookies(response)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=ProfileResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Return the currently authenticated user's profile."""
    profile = UserResponse.model_validate(current_user).model_dump()
    return ProfileResponse(**profile, permissions=sorted(permissions_for(current_user.role)))
