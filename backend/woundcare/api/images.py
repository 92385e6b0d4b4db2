from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from datetime import datetime
from ..core.config import settings
from ..models.base import get_db
from ..models.image import BeforeAfterType
from ..core.errors import ValidationFailed, validation_errors
from ..core.security import SessionContext, require_permission
from ..core.permissions import (
    PERM_IMAGE_CREATE,
    PERM_IMAGE_READ,
    PERM_IMAGE_UPDATE,
    PERM_IMAGE_DELETE,
)
from ..services import images as image_service
from ..services.pagination import Pagination
from .common import MessageResponse, changes, clean_text, limit_param, one_of, page_param, text_field, utc

router = APIRouter(prefix="/images", tags=["images"])


class ImageMetadata(BaseModel):
    description: Optional[str] = text_field()
    captured_at: Optional[datetime] = None
    is_before_after: Optional[bool] = None
    before_after_type: Optional[str] = None

    @field_validator("description")
    @classmethod
    def _text(cls, v):
        return clean_text(v)

    @field_validator("captured_at")
    @classmethod
    def _captured_at(cls, v):
        return utc(v)

    @field_validator("before_after_type")
    @classmethod
    def _before_after(cls, v):
        return one_of(v, BeforeAfterType.ALL, "before/after type")


class ImageUpload(ImageMetadata):
    wound_id: str = Field(..., min_length=1)
    is_before_after: bool = False


class ImageWound(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    patient_id: str
    location: str
    type: str


class ImageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    wound_id: str
    uploaded_by_id: Optional[str]
    url: str
    filename: str
    file_size: int
    mime_type: str
    description: Optional[str]
    captured_at: datetime
    is_before_after: bool
    before_after_type: Optional[str]
    created_at: datetime
    updated_at: datetime


class ImageDetail(ImageResponse):
    wound: ImageWound


class ImageListResponse(BaseModel):
    images: List[ImageDetail]
    pagination: Pagination
    statistics: Dict[str, int]


@router.post("", response_model=ImageResponse, status_code=status.HTTP_201_CREATED)
async def upload_image(
    file: Optional[UploadFile] = File(None),
    wound_id: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    captured_at: Optional[str] = Form(None),
    is_before_after: bool = Form(False),
    before_after_type: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_permission(PERM_IMAGE_CREATE)),
):
    """
    Multipart upload of a single wound photo.

    Form fields are validated with the same schema rules as JSON bodies,
    so a bad field answers 400 with field-level errors.
    """
    try:
        meta = ImageUpload(
            wound_id=wound_id or "",
            description=description,
            captured_at=captured_at or None,
            is_before_after=is_before_after,
            before_after_type=before_after_type or None,
        )
    except ValidationError as exc:
        raise ValidationFailed(errors=validation_errors(exc))

    # One byte past the limit is enough for the size check to reject it
    content = await file.read(settings.MAX_UPLOAD_BYTES + 1) if file is not None else b""
    return image_service.upload_image(
        db,
        content,
        file.filename if file is not None else "",
        file.content_type if file is not None else None,
        meta.model_dump(),
        session,
    )


@router.get("", response_model=ImageListResponse)
def list_images(
    wound_id: Optional[str] = None,
    patient_id: Optional[str] = None,
    is_before_after: Optional[bool] = None,
    page: int = page_param(),
    limit: int = limit_param(20),
    db: Session = Depends(get_db),
    _session: SessionContext = Depends(require_permission(PERM_IMAGE_READ)),
):
    images, pagination, statistics = image_service.list_images(
        db,
        wound_id=wound_id,
        patient_id=patient_id,
        is_before_after=is_before_after,
        page=page,
        limit=limit,
    )
    return ImageListResponse(
        images=[ImageDetail.model_validate(i) for i in images],
        pagination=pagination,
        statistics=statistics,
    )


@router.get("/{image_id}", response_model=ImageDetail)
def get_image(
    image_id: str,
    db: Session = Depends(get_db),
    _session: SessionContext = Depends(require_permission(PERM_IMAGE_READ)),
):
    return ImageDetail.model_validate(image_service.get_image(db, image_id))


@router.put("/{image_id}", response_model=ImageResponse)
def update_image(
    image_id: str,
    image_in: ImageMetadata,
    db: Session = Depends(get_db),
    _session: SessionContext = Depends(require_permission(PERM_IMAGE_UPDATE)),
):
    data = changes(image_in, required=("captured_at", "is_before_after"))
    return image_service.update_image(db, image_id, data)


@router.delete("/{image_id}", response_model=MessageResponse)
def delete_image(
    image_id: str,
    db: Session = Depends(get_db),
    _session: SessionContext = Depends(require_permission(PERM_IMAGE_DELETE)),
):
    image_service.delete_image(db, image_id)
    return MessageResponse(message="Image deleted")
