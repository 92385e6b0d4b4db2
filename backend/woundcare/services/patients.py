"""Patient records: registration, lookup, update and discharge (soft delete)."""
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from ..core.errors import NotFound, ValidationFailed
from ..core.security import SessionContext
from ..models.base import generate_uuid
from ..models.patient import Patient, PatientStatus
from ..models.wound import Wound
from .pagination import Pagination, paginate

logger = logging.getLogger(__name__)

DUPLICATE_CPF_MESSAGE = "A patient with this CPF already exists"


def _cpf_taken(db: Session, cpf: str, exclude_id: Optional[str] = None) -> bool:
    q = db.query(Patient.id).filter(Patient.cpf == cpf)
    if exclude_id:
        q = q.filter(Patient.id != exclude_id)
    return q.first() is not None


def _commit(db: Session) -> None:
    # The unique index is the final arbiter for concurrent registrations
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationFailed(DUPLICATE_CPF_MESSAGE, [{"field": "cpf", "message": DUPLICATE_CPF_MESSAGE}])


def get_patient(db: Session, patient_id: str) -> Patient:
    patient = (
        db.query(Patient)
        .options(selectinload(Patient.responsible), selectinload(Patient.wounds))
        .filter(Patient.id == patient_id)
        .first()
    )
    if not patient:
        raise NotFound("Patient")
    return patient


def list_patients(
    db: Session,
    search: Optional[str] = None,
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Tuple[Patient, int]], Pagination]:
    """Page of ``(patient, wound_count)`` pairs, newest first."""
    q = db.query(Patient)
    if search:
        term = f"%{search.strip()}%"
        q = q.filter(
            or_(
                Patient.name.ilike(term),
                Patient.cpf.ilike(term),
                Patient.email.ilike(term),
            )
        )
    if status:
        q = q.filter(Patient.status == status)
    patients, pagination = paginate(q.order_by(Patient.created_at.desc()), page, limit)

    counts: Dict[str, int] = {}
    if patients:
        rows = (
            db.query(Wound.patient_id, func.count(Wound.id))
            .filter(Wound.patient_id.in_([p.id for p in patients]))
            .group_by(Wound.patient_id)
            .all()
        )
        counts = dict(rows)
    return [(p, counts.get(p.id, 0)) for p in patients], pagination


def create_patient(db: Session, data: Dict[str, Any], session: SessionContext) -> Patient:
    if _cpf_taken(db, data["cpf"]):
        raise ValidationFailed(DUPLICATE_CPF_MESSAGE, [{"field": "cpf", "message": DUPLICATE_CPF_MESSAGE}])

    patient = Patient(
        id=generate_uuid(),
        status=PatientStatus.ACTIVE,
        responsible_id=session.user_id,
        **data,
    )
    db.add(patient)
    _commit(db)
    db.refresh(patient)
    logger.info("Patient %s registered by %s", patient.id, session.user_id)
    return patient


def update_patient(db: Session, patient_id: str, data: Dict[str, Any]) -> Patient:
    patient = db.query(Patient).filter(Patient.id == patient_id).first()
    if not patient:
        raise NotFound("Patient")

    new_cpf = data.get("cpf")
    if new_cpf and new_cpf != patient.cpf and _cpf_taken(db, new_cpf, exclude_id=patient.id):
        raise ValidationFailed(DUPLICATE_CPF_MESSAGE, [{"field": "cpf", "message": DUPLICATE_CPF_MESSAGE}])

    for field, value in data.items():
        setattr(patient, field, value)
    _commit(db)
    db.refresh(patient)
    return patient


def discharge_patient(db: Session, patient_id: str) -> Patient:
    """Soft delete: the record stays, its status becomes DISCHARGED."""
    patient = db.query(Patient).filter(Patient.id == patient_id).first()
    if not patient:
        raise NotFound("Patient")
    patient.status = PatientStatus.DISCHARGED
    db.commit()
    db.refresh(patient)
    logger.info("Patient %s discharged", patient.id)
    return patient
