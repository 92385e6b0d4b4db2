"""
Session/identity: password hashing, signed session tokens, and the
request gate that turns a bearer token into a ``SessionContext``.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from .config import settings
from .permissions import has_permission
from ..models.base import generate_uuid, get_db
from ..models.user import User

logger = logging.getLogger(__name__)

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"

# bcrypt only looks at the first 72 bytes of a secret
_BCRYPT_MAX_BYTES = 72


class InvalidToken(Exception):
    """Token signature is wrong, the token expired, or it is malformed."""


@dataclass(frozen=True)
class SessionContext:
    """Verified identity of the caller for the current request."""

    user_id: str
    email: str
    role: str
    name: str

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "SessionContext":
        try:
            return cls(
                user_id=claims["user_id"],
                email=claims["email"],
                role=claims["role"],
                name=claims["name"],
            )
        except KeyError as exc:
            raise InvalidToken(f"Missing claim {exc.args[0]!r}") from exc

    def can(self, permission: str) -> bool:
        return has_permission(self.role, permission)


# ── Passwords ────────────────────────────────────────────────────────────────

def _secret_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("Password must not be empty")
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_secret_bytes(password), salt).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    if not password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(_secret_bytes(password), hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


# ── Tokens ───────────────────────────────────────────────────────────────────

def issue_token(claims: Dict[str, Any], ttl: timedelta, token_type: str = ACCESS_TOKEN) -> str:
    """Sign ``claims`` into a JWT that expires after ``ttl``."""
    now = datetime.now(timezone.utc)
    payload = dict(claims)
    payload.update({"type": token_type, "iat": now, "exp": now + ttl})
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str, expected_type: str = ACCESS_TOKEN) -> Dict[str, Any]:
    """Return the token's claims or raise ``InvalidToken``."""
    if not token:
        raise InvalidToken("Empty token")
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise InvalidToken("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise InvalidToken(str(exc)) from exc
    if claims.get("type") != expected_type:
        raise InvalidToken(f"Expected a {expected_type} token")
    return claims


def create_access_token(user: User) -> str:
    return issue_token(
        {"user_id": user.id, "email": user.email, "role": user.role, "name": user.name},
        timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS),
        ACCESS_TOKEN,
    )


def create_refresh_token(user: User) -> str:
    return issue_token(
        {"user_id": user.id, "jti": generate_uuid()},
        timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        REFRESH_TOKEN,
    )


def extract_token(request: Request) -> Optional[str]:
    """Token from ``Authorization: Bearer``, else from the ``auth-token`` cookie."""
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header[7:].strip()
        if token:
            return token
    return request.cookies.get(settings.ACCESS_COOKIE_NAME) or None


# ── Request gate ─────────────────────────────────────────────────────────────

# Paths that need a verified session
PROTECTED_PATH_PREFIXES = (
    "/api/patients",
    "/api/wounds",
    "/api/treatments",
    "/api/images",
    "/api/reports",
    "/api/users",
    "/api/auth/me",
    "/api/auth/register",
)


class SessionGateMiddleware(BaseHTTPMiddleware):
    """Rejects unauthenticated calls to protected paths and attaches the session."""

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if request.method == "OPTIONS" or not any(path.startswith(p) for p in PROTECTED_PATH_PREFIXES):
            return await call_next(request)

        token = extract_token(request)
        if not token:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"message": "Access token required"},
                headers={"WWW-Authenticate": "Bearer"},
            )
        try:
            request.state.session = SessionContext.from_claims(verify_token(token))
        except InvalidToken as exc:
            logger.info("Rejected token on %s %s: %s", request.method, path, exc)
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"message": "Invalid or expired token"},
                headers={"WWW-Authenticate": "Bearer"},
            )
        return await call_next(request)


def get_current_session(request: Request) -> SessionContext:
    """FastAPI dependency returning the verified caller identity."""
    session = getattr(request.state, "session", None)
    if session is not None:
        return session
    token = extract_token(request)
    if token:
        try:
            session = SessionContext.from_claims(verify_token(token))
        except InvalidToken:
            session = None
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    request.state.session = session
    return session


def get_current_user(
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
) -> User:
    user = db.query(User).filter(User.id == session.user_id).first()
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or disabled")
    return user


def require_permission(permission: str):
    """Dependency factory: the caller's role must hold ``permission``."""

    def checker(
        session: SessionContext = Depends(get_current_session),
        db: Session = Depends(get_db),
    ) -> SessionContext:
        # Access tokens outlive a deactivation; the account is rechecked on every call
        active = db.query(User.id).filter(User.id == session.user_id, User.is_active.is_(True)).first()
        if not active:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or disabled")
        if not session.can(permission):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
        return session

    return checker
