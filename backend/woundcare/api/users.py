from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from pydantic import BaseModel

from ..models.base import get_db
from ..core.permissions import PERM_USER_MANAGE
from ..core.security import SessionContext, require_permission
from ..services import users as user_service
from ..services.pagination import Pagination
from .auth import UserResponse
from .common import limit_param, page_param

router = APIRouter(prefix="/users", tags=["users"])


class UserListResponse(BaseModel):
    users: List[UserResponse]
    pagination: Pagination


class UserStatusUpdate(BaseModel):
    is_active: bool


@router.get("", response_model=UserListResponse)
def list_users(
    role: Optional[str] = None,
    is_active: Optional[bool] = None,
    page: int = page_param(),
    limit: int = limit_param(),
    db: Session = Depends(get_db),
    _admin: SessionContext = Depends(require_permission(PERM_USER_MANAGE)),
):
    users, pagination = user_service.list_users(db, role=role, is_active=is_active, page=page, limit=limit)
    return UserListResponse(users=[UserResponse.model_validate(u) for u in users], pagination=pagination)


@router.put("/{user_id}/status", response_model=UserResponse)
def update_user_status(
    user_id: str,
    req: UserStatusUpdate,
    db: Session = Depends(get_db),
    admin: SessionContext = Depends(require_permission(PERM_USER_MANAGE)),
):
    """Activate or deactivate an account. Admins cannot disable themselves."""
    if user_id == admin.user_id and not req.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot deactivate your own account")
    return user_service.set_active(db, user_id, req.is_active)
