"""Wound photo documentation: upload, metadata edits, listing and removal."""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from ..core.config import settings
from ..core.errors import NotFound, ValidationFailed
from ..core.security import SessionContext
from ..models.base import generate_uuid
from ..models.image import WoundImage
from ..models.wound import Wound
from .image_storage import image_storage
from .pagination import Pagination, paginate

logger = logging.getLogger(__name__)


def _file_error(message: str) -> ValidationFailed:
    return ValidationFailed(message, [{"field": "file", "message": message}])


def check_upload(content: bytes, mime_type: Optional[str]) -> None:
    """Reject empty, oversized, or non-image uploads."""
    if not content:
        raise _file_error("File is required")
    if mime_type not in settings.ALLOWED_IMAGE_TYPES:
        raise _file_error("Unsupported file type. Use JPEG, PNG or WebP")
    if len(content) > settings.MAX_UPLOAD_BYTES:
        max_mb = settings.MAX_UPLOAD_BYTES // (1024 * 1024)
        raise _file_error(f"File too large. Maximum {max_mb}MB")


def upload_image(
    db: Session,
    content: bytes,
    original_name: str,
    mime_type: Optional[str],
    data: Dict[str, Any],
    session: SessionContext,
) -> WoundImage:
    wound = db.query(Wound.id).filter(Wound.id == data["wound_id"]).first()
    if not wound:
        raise NotFound("Wound")
    check_upload(content, mime_type)

    stored = image_storage.store(content, data["wound_id"], original_name, mime_type)
    image = WoundImage(
        id=generate_uuid(),
        wound_id=data["wound_id"],
        uploaded_by_id=session.user_id,
        url=stored["url"],
        filename=stored["filename"],
        file_size=len(content),
        mime_type=mime_type,
        description=data.get("description"),
        captured_at=data.get("captured_at") or datetime.utcnow(),
        is_before_after=data.get("is_before_after", False),
        before_after_type=data.get("before_after_type"),
    )
    db.add(image)
    try:
        db.commit()
    except Exception:
        db.rollback()
        image_storage.delete(stored["url"])
        raise
    db.refresh(image)
    logger.info("Image %s stored for wound %s (%d bytes)", image.id, image.wound_id, image.file_size)
    return image


def list_images(
    db: Session,
    wound_id: Optional[str] = None,
    patient_id: Optional[str] = None,
    is_before_after: Optional[bool] = None,
    page: int = 1,
    limit: int = 20,
) -> Tuple[List[WoundImage], Pagination, Dict[str, int]]:
    q = db.query(WoundImage)
    if patient_id:
        q = q.join(Wound, WoundImage.wound_id == Wound.id).filter(Wound.patient_id == patient_id)
    if wound_id:
        q = q.filter(WoundImage.wound_id == wound_id)
    if is_before_after is not None:
        q = q.filter(WoundImage.is_before_after == is_before_after)

    images, pagination = paginate(
        q.options(selectinload(WoundImage.wound)).order_by(WoundImage.captured_at.desc()), page, limit
    )

    # Same filters as the page itself
    counts = dict(
        q.with_entities(WoundImage.is_before_after, func.count(WoundImage.id))
        .group_by(WoundImage.is_before_after)
        .all()
    )
    statistics = {
        "total": pagination.total,
        "before_after": counts.get(True, 0),
        "regular": counts.get(False, 0),
    }
    return images, pagination, statistics


def get_image(db: Session, image_id: str) -> WoundImage:
    image = (
        db.query(WoundImage)
        .options(selectinload(WoundImage.wound))
        .filter(WoundImage.id == image_id)
        .first()
    )
    if not image:
        raise NotFound("Image")
    return image


def update_image(db: Session, image_id: str, data: Dict[str, Any]) -> WoundImage:
    image = db.query(WoundImage).filter(WoundImage.id == image_id).first()
    if not image:
        raise NotFound("Image")
    for field, value in data.items():
        setattr(image, field, value)
    db.commit()
    db.refresh(image)
    return image


def delete_image(db: Session, image_id: str) -> None:
    """Drop the row; the backing file goes too when it can (failure is only logged)."""
    image = db.query(WoundImage).filter(WoundImage.id == image_id).first()
    if not image:
        raise NotFound("Image")
    url = image.url
    db.delete(image)
    db.commit()
    image_storage.delete(url)
    logger.info("Image %s deleted", image_id)
