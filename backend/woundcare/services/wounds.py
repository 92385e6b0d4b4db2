"""
Wound assessment records.

Creating or editing a wound derives ``area`` (cm²) from length x width when
the caller does not send an explicit area. A wound can only be removed once
its treatments and images are gone.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, selectinload

from ..core.errors import Conflict, NotFound
from ..core.security import SessionContext
from ..models.base import generate_uuid
from ..models.image import WoundImage
from ..models.patient import Patient
from ..models.treatment import Treatment
from ..models.wound import Wound, WoundStatus
from .pagination import Pagination, paginate

logger = logging.getLogger(__name__)

RECENT_TREATMENTS = 5
RECENT_IMAGES = 10
PREVIEW_IMAGES = 4


def derive_area(length: Optional[float], width: Optional[float], area: Optional[float]) -> Optional[float]:
    """Explicit ``area`` wins; otherwise length x width when both are known."""
    if area is not None:
        return area
    if length is not None and width is not None:
        return length * width
    return None


def status_statistics(db: Session, patient_id: Optional[str] = None) -> Dict[str, int]:
    q = db.query(Wound.status, func.count(Wound.id))
    if patient_id:
        q = q.filter(Wound.patient_id == patient_id)
    counts = dict(q.group_by(Wound.status).all())
    stats = {status.lower(): counts.get(status, 0) for status in WoundStatus.ALL}
    stats["total"] = sum(counts.values())
    return stats


def dependent_counts(db: Session, wound_id: str) -> Dict[str, int]:
    return {
        "treatments": db.query(func.count(Treatment.id)).filter(Treatment.wound_id == wound_id).scalar() or 0,
        "images": db.query(func.count(WoundImage.id)).filter(WoundImage.wound_id == wound_id).scalar() or 0,
    }


def list_wounds(
    db: Session,
    search: Optional[str] = None,
    patient_id: Optional[str] = None,
    status: Optional[str] = None,
    wound_type: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Wound], Pagination, Dict[str, int]]:
    q = db.query(Wound).options(selectinload(Wound.patient))
    if search:
        term = f"%{search.strip()}%"
        q = q.join(Patient, Wound.patient_id == Patient.id).filter(
            or_(
                Wound.location.ilike(term),
                Wound.description.ilike(term),
                Patient.name.ilike(term),
            )
        )
    if patient_id:
        q = q.filter(Wound.patient_id == patient_id)
    if status:
        q = q.filter(Wound.status == status)
    if wound_type:
        q = q.filter(Wound.type == wound_type)

    wounds, pagination = paginate(q.order_by(Wound.created_at.desc()), page, limit)
    return wounds, pagination, status_statistics(db, patient_id)


def get_wound(db: Session, wound_id: str) -> Wound:
    wound = (
        db.query(Wound)
        .options(selectinload(Wound.patient))
        .filter(Wound.id == wound_id)
        .first()
    )
    if not wound:
        raise NotFound("Wound")
    return wound


def wound_detail(db: Session, wound_id: str) -> Dict[str, Any]:
    """Wound plus its latest treatments and images, for the detail view."""
    wound = get_wound(db, wound_id)
    treatments = (
        db.query(Treatment)
        .options(selectinload(Treatment.user))
        .filter(Treatment.wound_id == wound.id)
        .order_by(Treatment.created_at.desc())
        .limit(RECENT_TREATMENTS)
        .all()
    )
    images = (
        db.query(WoundImage)
        .filter(WoundImage.wound_id == wound.id)
        .order_by(WoundImage.created_at.desc())
        .limit(RECENT_IMAGES)
        .all()
    )
    return {
        "wound": wound,
        "treatments": treatments,
        "images": images,
        "recent_images": images[:PREVIEW_IMAGES],
        "counts": dependent_counts(db, wound.id),
    }


def create_wound(db: Session, data: Dict[str, Any], session: SessionContext) -> Wound:
    if not db.query(Patient.id).filter(Patient.id == data["patient_id"]).first():
        raise NotFound("Patient")

    data = dict(data)
    data["area"] = derive_area(data.get("length"), data.get("width"), data.get("area"))
    wound = Wound(
        id=generate_uuid(),
        status=WoundStatus.ACTIVE,  # every new wound starts active
        created_by_id=session.user_id,
        **data,
    )
    db.add(wound)
    db.commit()
    db.refresh(wound)
    logger.info("Wound %s created for patient %s", wound.id, wound.patient_id)
    return wound


def update_wound(db: Session, wound_id: str, data: Dict[str, Any]) -> Wound:
    wound = db.query(Wound).filter(Wound.id == wound_id).first()
    if not wound:
        raise NotFound("Wound")

    dimensions_changed = "length" in data or "width" in data
    for field, value in data.items():
        setattr(wound, field, value)
    if data.get("area") is None and dimensions_changed and wound.length is not None and wound.width is not None:
        wound.area = derive_area(wound.length, wound.width, None)

    db.commit()
    db.refresh(wound)
    return wound


def delete_wound(db: Session, wound_id: str) -> None:
    wound = db.query(Wound).filter(Wound.id == wound_id).first()
    if not wound:
        raise NotFound("Wound")

    counts = dependent_counts(db, wound.id)
    if counts["treatments"] or counts["images"]:
        raise Conflict(
            "Cannot delete a wound with associated treatments or images",
            details=counts,
        )
    db.delete(wound)
    db.commit()
    logger.info("Wound %s deleted", wound_id)
