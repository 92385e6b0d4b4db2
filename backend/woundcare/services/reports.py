"""
Reporting service for the clinical dashboard.

Aggregates run in the database; nothing here is cached.
"""
from datetime import datetime, timedelta
from typing import Dict, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.patient import Patient, PatientStatus
from ..models.treatment import Treatment, TreatmentStatus
from ..models.wound import Wound, WoundStatus, WoundType


class ReportService:
    def _count_by(self, db: Session, column, keys) -> Dict[str, int]:
        counts = dict(db.query(column, func.count()).group_by(column).all())
        return {key.lower(): counts.get(key, 0) for key in keys}

    def summary(self, db: Session, upcoming_days: int = 7, now: Optional[datetime] = None) -> dict:
        """
        Totals per status/type plus the dressing-change workload:
        scheduled changes due within ``upcoming_days`` and changes already overdue.
        """
        now = now or datetime.utcnow()
        horizon = now + timedelta(days=upcoming_days)

        open_area = (
            db.query(func.avg(Wound.area))
            .filter(Wound.status.in_(WoundStatus.OPEN), Wound.area.isnot(None))
            .scalar()
        )

        due_soon = (
            db.query(func.count(Treatment.id))
            .filter(
                Treatment.status == TreatmentStatus.SCHEDULED,
                Treatment.next_change_date.isnot(None),
                Treatment.next_change_date >= now,
                Treatment.next_change_date <= horizon,
            )
            .scalar()
        )
        overdue = (
            db.query(func.count(Treatment.id))
            .filter(
                Treatment.status.in_([TreatmentStatus.SCHEDULED, TreatmentStatus.OVERDUE]),
                Treatment.next_change_date.isnot(None),
                Treatment.next_change_date < now,
            )
            .scalar()
        )

        return {
            "generated_at": now,
            "patients": {
                "total": db.query(func.count(Patient.id)).scalar() or 0,
                "by_status": self._count_by(db, Patient.status, PatientStatus.ALL),
            },
            "wounds": {
                "total": db.query(func.count(Wound.id)).scalar() or 0,
                "by_status": self._count_by(db, Wound.status, WoundStatus.ALL),
                "by_type": self._count_by(db, Wound.type, WoundType.ALL),
                "average_open_area": round(open_area, 2) if open_area is not None else None,
            },
            "treatments": {
                "total": db.query(func.count(Treatment.id)).scalar() or 0,
                "by_status": self._count_by(db, Treatment.status, TreatmentStatus.ALL),
                "due_within_days": upcoming_days,
                "due_soon": due_soon or 0,
                "overdue": overdue or 0,
            },
        }


report_service = ReportService()
