from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from datetime import date, datetime
from ..models.base import get_db
from ..models.patient import PatientStatus, Gender
from ..core.security import SessionContext, require_permission
from ..core.permissions import (
    PERM_PATIENT_CREATE,
    PERM_PATIENT_READ,
    PERM_PATIENT_UPDATE,
    PERM_PATIENT_DELETE,
)
from ..services import patients as patient_service
from ..services.pagination import Pagination
from ..services.validation import normalize_cpf, validate_cpf, validate_phone
from .common import UserSummary, changes, clean_text, limit_param, one_of, page_param, text_field

router = APIRouter(prefix="/patients", tags=["patients"])


class PatientFields(BaseModel):
    cns: Optional[str] = Field(None, max_length=15)
    blood_type: Optional[str] = Field(None, max_length=5)
    allergies: Optional[str] = text_field()
    comorbidities: Optional[str] = text_field()
    medications: Optional[str] = text_field()
    mobility: Optional[str] = Field(None, max_length=50)
    consciousness: Optional[str] = Field(None, max_length=50)
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(None, max_length=300)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=2)
    zip_code: Optional[str] = Field(None, max_length=10)
    emergency_contact: Optional[str] = Field(None, max_length=200)
    emergency_phone: Optional[str] = None
    observations: Optional[str] = text_field()

    @field_validator("phone", "emergency_phone")
    @classmethod
    def _phone(cls, v):
        if v and not validate_phone(v):
            raise ValueError("Phone must have 10 or 11 digits including area code")
        return v

    @field_validator("allergies", "comorbidities", "medications", "observations")
    @classmethod
    def _text(cls, v):
        return clean_text(v)


def _check_cpf(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not validate_cpf(v):
        raise ValueError("Invalid CPF")
    return normalize_cpf(v)


class PatientCreate(PatientFields):
    name: str = Field(..., min_length=2, max_length=200)
    cpf: str
    birth_date: date
    gender: str

    @field_validator("cpf")
    @classmethod
    def _cpf(cls, v):
        return _check_cpf(v)

    @field_validator("gender")
    @classmethod
    def _gender(cls, v):
        return one_of(v, Gender.ALL, "gender")

    @field_validator("birth_date")
    @classmethod
    def _birth_date(cls, v):
        if v > date.today():
            raise ValueError("Birth date cannot be in the future")
        return v


class PatientUpdate(PatientFields):
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    cpf: Optional[str] = None
    birth_date: Optional[date] = None
    gender: Optional[str] = None
    status: Optional[str] = None

    @field_validator("cpf")
    @classmethod
    def _cpf(cls, v):
        return _check_cpf(v)

    @field_validator("gender")
    @classmethod
    def _gender(cls, v):
        return one_of(v, Gender.ALL, "gender")

    @field_validator("status")
    @classmethod
    def _status(cls, v):
        return one_of(v, PatientStatus.ALL, "status")


class PatientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    cpf: str
    cns: Optional[str]
    birth_date: date
    gender: str
    status: str
    blood_type: Optional[str]
    allergies: Optional[str]
    comorbidities: Optional[str]
    medications: Optional[str]
    mobility: Optional[str]
    consciousness: Optional[str]
    phone: Optional[str]
    email: Optional[str]
    address: Optional[str]
    city: Optional[str]
    state: Optional[str]
    zip_code: Optional[str]
    emergency_contact: Optional[str]
    emergency_phone: Optional[str]
    observations: Optional[str]
    responsible_id: Optional[str]
    created_at: datetime
    updated_at: datetime


class PatientListItem(PatientResponse):
    wound_count: int = 0


class PatientWound(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    location: str
    type: str
    stage: Optional[str]
    status: str
    area: Optional[float]
    created_at: datetime


class PatientDetailResponse(PatientResponse):
    responsible: Optional[UserSummary]
    wounds: List[PatientWound]
    wound_count: int


class PatientListResponse(BaseModel):
    patients: List[PatientListItem]
    pagination: Pagination


class PatientDischargeResponse(BaseModel):
    message: str
    patient: PatientResponse


@router.get("", response_model=PatientListResponse)
def list_patients(
    search: Optional[str] = None,
    status: Optional[str] = None,
    page: int = page_param(),
    limit: int = limit_param(),
    db: Session = Depends(get_db),
    _session: SessionContext = Depends(require_permission(PERM_PATIENT_READ)),
):
    """List patients; ``search`` matches name, CPF or email (case-insensitive)."""
    rows, pagination = patient_service.list_patients(db, search=search, status=status, page=page, limit=limit)
    items = [
        PatientListItem.model_validate(patient).model_copy(update={"wound_count": count})
        for patient, count in rows
    ]
    return PatientListResponse(patients=items, pagination=pagination)


@router.post("", response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
def create_patient(
    patient_in: PatientCreate,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_permission(PERM_PATIENT_CREATE)),
):
    return patient_service.create_patient(db, patient_in.model_dump(), session)


@router.get("/{patient_id}", response_model=PatientDetailResponse)
def get_patient(
    patient_id: str,
    db: Session = Depends(get_db),
    _session: SessionContext = Depends(require_permission(PERM_PATIENT_READ)),
):
    patient = patient_service.get_patient(db, patient_id)
    detail = PatientResponse.model_validate(patient).model_dump()
    return PatientDetailResponse(
        **detail,
        responsible=UserSummary.model_validate(patient.responsible) if patient.responsible else None,
        wounds=[PatientWound.model_validate(w) for w in patient.wounds],
        wound_count=len(patient.wounds),
    )


@router.put("/{patient_id}", response_model=PatientResponse)
def update_patient(
    patient_id: str,
    patient_in: PatientUpdate,
    db: Session = Depends(get_db),
    _session: SessionContext = Depends(require_permission(PERM_PATIENT_UPDATE)),
):
    return patient_service.update_patient(
        db, patient_id, changes(patient_in, required=("name", "cpf", "birth_date", "gender", "status"))
    )


@router.delete("/{patient_id}", response_model=PatientDischargeResponse)
def discharge_patient(
    patient_id: str,
    db: Session = Depends(get_db),
    _session: SessionContext = Depends(require_permission(PERM_PATIENT_DELETE)),
):
    """Soft delete: the patient is marked DISCHARGED, records are kept."""
    patient = patient_service.discharge_patient(db, patient_id)
    return PatientDischargeResponse(message="Patient discharged", patient=PatientResponse.model_validate(patient))
