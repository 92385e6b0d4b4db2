from sqlalchemy import Column, String, Boolean, DateTime, Text
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, generate_uuid


class UserRole:
    ADMIN = "ADMIN"
    DOCTOR = "DOCTOR"
    NURSE = "NURSE"
    PHYSIOTHERAPIST = "PHYSIOTHERAPIST"
    NUTRITIONIST = "NUTRITIONIST"
    PATIENT = "PATIENT"

    ALL = [ADMIN, DOCTOR, NURSE, PHYSIOTHERAPIST, NUTRITIONIST, PATIENT]


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    name = Column(String(200), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.NURSE)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    # Professional registry (COREN / CRM etc.)
    professional_license = Column(String(100), nullable=True)
    specialty = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)

    last_login = Column(DateTime, nullable=True)
    refresh_token = Column(Text, nullable=True)

    patients = relationship("Patient", back_populates="responsible")
