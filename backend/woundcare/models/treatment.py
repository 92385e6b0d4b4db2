from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, generate_uuid


class TreatmentType:
    DRESSING = "DRESSING"
    MEDICATION = "MEDICATION"
    DEBRIDEMENT = "DEBRIDEMENT"
    THERAPY = "THERAPY"
    OTHER = "OTHER"

    ALL = [DRESSING, MEDICATION, DEBRIDEMENT, THERAPY, OTHER]


class TreatmentStatus:
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    OVERDUE = "OVERDUE"

    ALL = [SCHEDULED, COMPLETED, CANCELLED, OVERDUE]


class Treatment(Base, TimestampMixin):
    __tablename__ = "treatments"

    id = Column(String, primary_key=True, default=generate_uuid)
    wound_id = Column(String, ForeignKey("wounds.id", ondelete="SET NULL"), nullable=True, index=True)
    patient_id = Column(String, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)

    type = Column(String(20), nullable=False, default=TreatmentType.DRESSING)
    status = Column(String(20), nullable=False, default=TreatmentStatus.SCHEDULED, index=True)

    # Care protocol
    protocol = Column(Text, nullable=False)
    dressing = Column(String(200), nullable=True)
    frequency = Column(String(100), nullable=True)
    technique = Column(Text, nullable=True)
    materials = Column(Text, nullable=True)
    observations = Column(Text, nullable=True)

    next_change_date = Column(DateTime, nullable=True, index=True)
    debridement_type = Column(String(50), nullable=True)
    debridement_date = Column(DateTime, nullable=True)

    wound = relationship("Wound", back_populates="treatments")
    patient = relationship("Patient", back_populates="treatments")
    user = relationship("User")
