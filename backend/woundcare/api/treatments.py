from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from ..models.base import get_db
from ..models.treatment import TreatmentType, TreatmentStatus
from ..core.security import SessionContext, require_permission
from ..core.permissions import (
    PERM_TREATMENT_CREATE,
    PERM_TREATMENT_READ,
    PERM_TREATMENT_UPDATE,
    PERM_TREATMENT_DELETE,
)
from ..services import treatments as treatment_service
from ..services.pagination import Pagination
from ..services.validation import MAX_TEXT_LENGTH
from .common import (
    MessageResponse,
    PatientSummary,
    UserSummary,
    changes,
    clean_text,
    limit_param,
    one_of,
    page_param,
    text_field,
    utc,
)

router = APIRouter(prefix="/treatments", tags=["treatments"])


class TreatmentFields(BaseModel):
    dressing: Optional[str] = Field(None, max_length=200)
    frequency: Optional[str] = Field(None, max_length=100)
    technique: Optional[str] = text_field()
    materials: Optional[str] = text_field()
    observations: Optional[str] = text_field()
    next_change_date: Optional[datetime] = None
    debridement_type: Optional[str] = Field(None, max_length=50)
    debridement_date: Optional[datetime] = None

    @field_validator("technique", "materials", "observations")
    @classmethod
    def _text(cls, v):
        return clean_text(v)

    @field_validator("next_change_date", "debridement_date")
    @classmethod
    def _dates(cls, v):
        return utc(v)


class TreatmentCreate(TreatmentFields):
    wound_id: str = Field(..., min_length=1)
    type: str = TreatmentType.DRESSING
    protocol: str = Field(..., min_length=1, max_length=MAX_TEXT_LENGTH)

    @field_validator("type")
    @classmethod
    def _type(cls, v):
        return one_of(v, TreatmentType.ALL, "treatment type")

    @field_validator("protocol")
    @classmethod
    def _protocol(cls, v):
        cleaned = clean_text(v)
        if not cleaned:
            raise ValueError("Protocol is required")
        return cleaned


class TreatmentUpdate(TreatmentFields):
    type: Optional[str] = None
    status: Optional[str] = None
    protocol: Optional[str] = Field(None, min_length=1, max_length=MAX_TEXT_LENGTH)

    @field_validator("type")
    @classmethod
    def _type(cls, v):
        return one_of(v, TreatmentType.ALL, "treatment type")

    @field_validator("status")
    @classmethod
    def _status(cls, v):
        return one_of(v, TreatmentStatus.ALL, "treatment status")

    @field_validator("protocol")
    @classmethod
    def _protocol(cls, v):
        return clean_text(v)


class TreatmentWound(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    location: str
    type: str
    status: str


class TreatmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    wound_id: Optional[str]
    patient_id: str
    user_id: str
    type: str
    status: str
    protocol: str
    dressing: Optional[str]
    frequency: Optional[str]
    technique: Optional[str]
    materials: Optional[str]
    observations: Optional[str]
    next_change_date: Optional[datetime]
    debridement_type: Optional[str]
    debridement_date: Optional[datetime]
    created_at: datetime
    updated_at: datetime


class TreatmentDetail(TreatmentResponse):
    wound: Optional[TreatmentWound]
    patient: PatientSummary
    user: UserSummary


class TreatmentListResponse(BaseModel):
    treatments: List[TreatmentDetail]
    pagination: Pagination
    statistics: Dict[str, int]


@router.get("", response_model=TreatmentListResponse)
def list_treatments(
    search: Optional[str] = None,
    wound_id: Optional[str] = None,
    patient_id: Optional[str] = None,
    type: Optional[str] = None,
    status: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    page: int = page_param(),
    limit: int = limit_param(),
    db: Session = Depends(get_db),
    _session: SessionContext = Depends(require_permission(PERM_TREATMENT_READ)),
):
    """Treatments, newest first; ``date_from``/``date_to`` bound the creation time."""
    treatments, pagination, statistics = treatment_service.list_treatments(
        db,
        search=search,
        wound_id=wound_id,
        patient_id=patient_id,
        treatment_type=type,
        status=status,
        date_from=utc(date_from),
        date_to=utc(date_to),
        page=page,
        limit=limit,
    )
    return TreatmentListResponse(
        treatments=[TreatmentDetail.model_validate(t) for t in treatments],
        pagination=pagination,
        statistics=statistics,
    )


@router.post("", response_model=TreatmentResponse, status_code=status.HTTP_201_CREATED)
def create_treatment(
    treatment_in: TreatmentCreate,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_permission(PERM_TREATMENT_CREATE)),
):
    return treatment_service.create_treatment(db, treatment_in.model_dump(), session)


@router.get("/{treatment_id}", response_model=TreatmentDetail)
def get_treatment(
    treatment_id: str,
    db: Session = Depends(get_db),
    _session: SessionContext = Depends(require_permission(PERM_TREATMENT_READ)),
):
    return TreatmentDetail.model_validate(treatment_service.get_treatment(db, treatment_id))


@router.put("/{treatment_id}", response_model=TreatmentResponse)
def update_treatment(
    treatment_id: str,
    treatment_in: TreatmentUpdate,
    db: Session = Depends(get_db),
    _session: SessionContext = Depends(require_permission(PERM_TREATMENT_UPDATE)),
):
    data = changes(treatment_in, required=("type", "status", "protocol"))
    return treatment_service.update_treatment(db, treatment_id, data)


@router.delete("/{treatment_id}", response_model=MessageResponse)
def delete_treatment(
    treatment_id: str,
    db: Session = Depends(get_db),
    _session: SessionContext = Depends(require_permission(PERM_TREATMENT_DELETE)),
):
    treatment_service.delete_treatment(db, treatment_id)
    return MessageResponse(message="Treatment deleted")
