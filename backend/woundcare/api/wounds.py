from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from ..models.base import get_db
from ..models.wound import (
    WoundType,
    WoundStage,
    WoundStatus,
    TissueType,
    ExudateAmount,
    ExudateType,
    Odor,
    SkinTemperature,
    PeriwoundSkin,
)
from ..core.security import SessionContext, require_permission
from ..core.permissions import (
    PERM_WOUND_CREATE,
    PERM_WOUND_READ,
    PERM_WOUND_UPDATE,
    PERM_WOUND_DELETE,
)
from ..services import wounds as wound_service
from ..services.pagination import Pagination
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
)

router = APIRouter(prefix="/wounds", tags=["wounds"])

_ENUM_FIELDS = {
    "type": (WoundType.ALL, "wound type"),
    "stage": (WoundStage.ALL, "wound stage"),
    "status": (WoundStatus.ALL, "wound status"),
    "tissue_type": (TissueType.ALL, "tissue type"),
    "exudate": (ExudateAmount.ALL, "exudate amount"),
    "exudate_type": (ExudateType.ALL, "exudate type"),
    "odor": (Odor.ALL, "odor intensity"),
    "temperature": (SkinTemperature.ALL, "temperature"),
    "periwound_skin": (PeriwoundSkin.ALL, "periwound skin condition"),
}


class WoundAssessment(BaseModel):
    """Clinical measurement fields shared by create and update."""

    stage: Optional[str] = None
    length: Optional[float] = Field(None, gt=0, description="cm")
    width: Optional[float] = Field(None, gt=0, description="cm")
    depth: Optional[float] = Field(None, gt=0, description="cm")
    area: Optional[float] = Field(None, gt=0, description="cm²; derived from length x width when omitted")
    tissue_type: Optional[str] = None
    exudate: Optional[str] = None
    exudate_type: Optional[str] = None
    odor: Optional[str] = None
    pain: Optional[int] = Field(None, ge=0, le=10)
    edema: Optional[bool] = None
    infection: Optional[bool] = None
    temperature: Optional[str] = None
    periwound_skin: Optional[str] = None
    description: Optional[str] = text_field()
    risk_factors: Optional[str] = text_field()
    previous_treatments: Optional[str] = text_field()

    @field_validator(
        "stage", "tissue_type", "exudate", "exudate_type", "odor", "temperature", "periwound_skin",
        check_fields=False,
    )
    @classmethod
    def _enum(cls, v, info):
        allowed, label = _ENUM_FIELDS[info.field_name]
        return one_of(v, allowed, label)

    @field_validator("description", "risk_factors", "previous_treatments")
    @classmethod
    def _text(cls, v):
        return clean_text(v)


class WoundCreate(WoundAssessment):
    patient_id: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1, max_length=200)
    type: str

    @field_validator("type")
    @classmethod
    def _type(cls, v):
        return one_of(v, WoundType.ALL, "wound type")


class WoundUpdate(WoundAssessment):
    location: Optional[str] = Field(None, min_length=1, max_length=200)
    type: Optional[str] = None
    status: Optional[str] = None

    @field_validator("type", "status")
    @classmethod
    def _type_status(cls, v, info):
        allowed, label = _ENUM_FIELDS[info.field_name]
        return one_of(v, allowed, label)


class WoundResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    patient_id: str
    created_by_id: Optional[str]
    location: str
    type: str
    stage: Optional[str]
    status: str
    length: Optional[float]
    width: Optional[float]
    depth: Optional[float]
    area: Optional[float]
    tissue_type: Optional[str]
    exudate: Optional[str]
    exudate_type: Optional[str]
    odor: Optional[str]
    pain: Optional[int]
    edema: bool
    infection: bool
    temperature: Optional[str]
    periwound_skin: Optional[str]
    description: Optional[str]
    risk_factors: Optional[str]
    previous_treatments: Optional[str]
    created_at: datetime
    updated_at: datetime


class WoundListItem(WoundResponse):
    patient: PatientSummary


class WoundTreatment(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    type: str
    status: str
    protocol: str
    next_change_date: Optional[datetime]
    created_at: datetime
    user: Optional[UserSummary]


class WoundImageItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    url: str
    description: Optional[str]
    captured_at: datetime
    is_before_after: bool
    before_after_type: Optional[str]


class WoundDetailResponse(WoundListItem):
    treatments: List[WoundTreatment]
    images: List[WoundImageItem]
    recent_images: List[WoundImageItem]
    counts: Dict[str, int]


class WoundListResponse(BaseModel):
    wounds: List[WoundListItem]
    pagination: Pagination
    statistics: Dict[str, int]


@router.get("", response_model=WoundListResponse)
def list_wounds(
    search: Optional[str] = None,
    patient_id: Optional[str] = None,
    status: Optional[str] = None,
    type: Optional[str] = None,
    page: int = page_param(),
    limit: int = limit_param(),
    db: Session = Depends(get_db),
    _session: SessionContext = Depends(require_permission(PERM_WOUND_READ)),
):
    """Paged wounds plus a count-by-status breakdown (scoped to ``patient_id`` when given)."""
    wounds, pagination, statistics = wound_service.list_wounds(
        db,
        search=search,
        patient_id=patient_id,
        status=status,
        wound_type=type,
        page=page,
        limit=limit,
    )
    return WoundListResponse(
        wounds=[WoundListItem.model_validate(w) for w in wounds],
        pagination=pagination,
        statistics=statistics,
    )


@router.post("", response_model=WoundResponse, status_code=status.HTTP_201_CREATED)
def create_wound(
    wound_in: WoundCreate,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_permission(PERM_WOUND_CREATE)),
):
    data = wound_in.model_dump(exclude_unset=True)
    return wound_service.create_wound(db, data, session)


@router.get("/{wound_id}", response_model=WoundDetailResponse)
def get_wound(
    wound_id: str,
    db: Session = Depends(get_db),
    _session: SessionContext = Depends(require_permission(PERM_WOUND_READ)),
):
    detail = wound_service.wound_detail(db, wound_id)
    base = WoundListItem.model_validate(detail["wound"])
    return WoundDetailResponse(
        **base.model_dump(),
        treatments=[WoundTreatment.model_validate(t) for t in detail["treatments"]],
        images=[WoundImageItem.model_validate(i) for i in detail["images"]],
        recent_images=[WoundImageItem.model_validate(i) for i in detail["recent_images"]],
        counts=detail["counts"],
    )


@router.put("/{wound_id}", response_model=WoundResponse)
def update_wound(
    wound_id: str,
    wound_in: WoundUpdate,
    db: Session = Depends(get_db),
    _session: SessionContext = Depends(require_permission(PERM_WOUND_UPDATE)),
):
    data = changes(wound_in, required=("location", "type", "status", "edema", "infection"))
    return wound_service.update_wound(db, wound_id, data)


@router.delete("/{wound_id}", response_model=MessageResponse)
def delete_wound(
    wound_id: str,
    db: Session = Depends(get_db),
    _session: SessionContext = Depends(require_permission(PERM_WOUND_DELETE)),
):
    """Hard delete; 409 while treatments or images still reference the wound."""
    wound_service.delete_wound(db, wound_id)
    return MessageResponse(message="Wound deleted")
