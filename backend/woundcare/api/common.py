"""Schema pieces shared by the routers."""
from datetime import datetime
from typing import Iterable, Optional

from fastapi import Query
from pydantic import BaseModel, ConfigDict, Field

from ..core.config import settings
from ..services.validation import MAX_TEXT_LENGTH, sanitize_text, to_naive_utc


def one_of(value: Optional[str], allowed: Iterable[str], label: str) -> Optional[str]:
    """Validator body for string enums; ``None`` passes through."""
    if value is None:
        return value
    allowed = list(allowed)
    if value not in allowed:
        raise ValueError(f"Invalid {label}. Choose from: {', '.join(allowed)}")
    return value


def clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    return sanitize_text(value) or None


def utc(value: Optional[datetime]) -> Optional[datetime]:
    return to_naive_utc(value)


def text_field(default=None):
    """Free-text note; longer input is rejected, never cut."""
    return Field(default, max_length=MAX_TEXT_LENGTH)


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    role: str


class PatientSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    cpf: str
    status: str


class MessageResponse(BaseModel):
    message: str


def page_param(default: int = 1):
    return Query(default, ge=1, description="1-based page number")


def limit_param(default: Optional[int] = None):
    return Query(default or settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE)


def changes(payload: BaseModel, required: Iterable[str] = ()) -> dict:
    """Fields the client actually sent; an explicit null on a required column is ignored."""
    data = payload.model_dump(exclude_unset=True)
    for field in required:
        if field in data and data[field] is None:
            del data[field]
    return data
