"""Treatment (dressing change / care protocol) scheduling records."""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, selectinload

from ..core.errors import NotFound
from ..core.security import SessionContext
from ..models.base import generate_uuid
from ..models.treatment import Treatment, TreatmentStatus
from ..models.wound import Wound
from .pagination import Pagination, paginate

logger = logging.getLogger(__name__)


def initial_status(next_change_date: Optional[datetime], now: Optional[datetime] = None) -> str:
    """A treatment whose next change is already past starts OVERDUE."""
    now = now or datetime.utcnow()
    if next_change_date is not None and next_change_date < now:
        return TreatmentStatus.OVERDUE
    return TreatmentStatus.SCHEDULED


def status_statistics(db: Session, wound_id: Optional[str] = None) -> Dict[str, int]:
    q = db.query(Treatment.status, func.count(Treatment.id))
    if wound_id:
        q = q.filter(Treatment.wound_id == wound_id)
    counts = dict(q.group_by(Treatment.status).all())
    stats = {status.lower(): counts.get(status, 0) for status in TreatmentStatus.ALL}
    stats["total"] = sum(counts.values())
    return stats


def list_treatments(
    db: Session,
    search: Optional[str] = None,
    wound_id: Optional[str] = None,
    patient_id: Optional[str] = None,
    treatment_type: Optional[str] = None,
    status: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Treatment], Pagination, Dict[str, int]]:
    q = db.query(Treatment).options(
        selectinload(Treatment.wound),
        selectinload(Treatment.patient),
        selectinload(Treatment.user),
    )
    if search:
        term = f"%{search.strip()}%"
        q = q.filter(
            or_(
                Treatment.protocol.ilike(term),
                Treatment.technique.ilike(term),
                Treatment.observations.ilike(term),
                Treatment.dressing.ilike(term),
            )
        )
    if wound_id:
        q = q.filter(Treatment.wound_id == wound_id)
    if patient_id:
        q = q.filter(Treatment.patient_id == patient_id)
    if treatment_type:
        q = q.filter(Treatment.type == treatment_type)
    if status:
        q = q.filter(Treatment.status == status)
    if date_from:
        q = q.filter(Treatment.created_at >= date_from)
    if date_to:
        q = q.filter(Treatment.created_at <= date_to)

    treatments, pagination = paginate(q.order_by(Treatment.created_at.desc()), page, limit)
    return treatments, pagination, status_statistics(db, wound_id)


def get_treatment(db: Session, treatment_id: str) -> Treatment:
    treatment = (
        db.query(Treatment)
        .options(
            selectinload(Treatment.wound),
            selectinload(Treatment.patient),
            selectinload(Treatment.user),
        )
        .filter(Treatment.id == treatment_id)
        .first()
    )
    if not treatment:
        raise NotFound("Treatment")
    return treatment


def create_treatment(db: Session, data: Dict[str, Any], session: SessionContext) -> Treatment:
    wound = db.query(Wound).filter(Wound.id == data["wound_id"]).first()
    if not wound:
        raise NotFound("Wound")

    treatment = Treatment(
        id=generate_uuid(),
        patient_id=wound.patient_id,
        user_id=session.user_id,
        status=initial_status(data.get("next_change_date")),
        **data,
    )
    db.add(treatment)
    db.commit()
    db.refresh(treatment)
    logger.info("Treatment %s scheduled for wound %s", treatment.id, wound.id)
    return treatment


def update_treatment(db: Session, treatment_id: str, data: Dict[str, Any]) -> Treatment:
    treatment = db.query(Treatment).filter(Treatment.id == treatment_id).first()
    if not treatment:
        raise NotFound("Treatment")
    for field, value in data.items():
        setattr(treatment, field, value)
    db.commit()
    db.refresh(treatment)
    return treatment


def delete_treatment(db: Session, treatment_id: str) -> None:
    treatment = db.query(Treatment).filter(Treatment.id == treatment_id).first()
    if not treatment:
        raise NotFound("Treatment")
    db.delete(treatment)
    db.commit()
    logger.info("Treatment %s deleted", treatment_id)
