from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Dict, Optional
from pydantic import BaseModel
from datetime import datetime

from ..models.base import get_db
from ..core.permissions import PERM_REPORTS_READ
from ..core.security import SessionContext, require_permission
from ..services.reports import report_service

router = APIRouter(prefix="/reports", tags=["reports"])


class PatientTotals(BaseModel):
    total: int
    by_status: Dict[str, int]


class WoundTotals(BaseModel):
    total: int
    by_status: Dict[str, int]
    by_type: Dict[str, int]
    average_open_area: Optional[float]


class TreatmentTotals(BaseModel):
    total: int
    by_status: Dict[str, int]
    due_within_days: int
    due_soon: int
    overdue: int


class SummaryReport(BaseModel):
    generated_at: datetime
    patients: PatientTotals
    wounds: WoundTotals
    treatments: TreatmentTotals


@router.get("/summary", response_model=SummaryReport)
def summary(
    upcoming_days: int = Query(7, ge=1, le=90),
    db: Session = Depends(get_db),
    _session: SessionContext = Depends(require_permission(PERM_REPORTS_READ)),
):
    """Dashboard totals and the dressing-change workload for the next ``upcoming_days``."""
    return report_service.summary(db, upcoming_days=upcoming_days)
