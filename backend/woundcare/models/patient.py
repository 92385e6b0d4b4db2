from sqlalchemy import Column, String, Date, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, generate_uuid


class PatientStatus:
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    DISCHARGED = "DISCHARGED"
    DECEASED = "DECEASED"

    ALL = [ACTIVE, INACTIVE, DISCHARGED, DECEASED]


class Gender:
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"

    ALL = [MALE, FEMALE, OTHER]


class Patient(Base, TimestampMixin):
    __tablename__ = "patients"
    __table_args__ = (
        Index("ix_patients_status_created_at", "status", "created_at"),
    )

    id = Column(String, primary_key=True, default=generate_uuid)
    # PHI fields
    name = Column(String(200), nullable=False, index=True)
    cpf = Column(String(11), unique=True, nullable=False, index=True)  # digits only
    cns = Column(String(15), nullable=True)  # Cartão Nacional de Saúde
    birth_date = Column(Date, nullable=False)
    gender = Column(String(10), nullable=False)
    status = Column(String(20), nullable=False, default=PatientStatus.ACTIVE)

    # Clinical background
    blood_type = Column(String(5), nullable=True)
    allergies = Column(Text, nullable=True)
    comorbidities = Column(Text, nullable=True)
    medications = Column(Text, nullable=True)
    mobility = Column(String(50), nullable=True)
    consciousness = Column(String(50), nullable=True)

    # Contact
    phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    address = Column(String(300), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(2), nullable=True)
    zip_code = Column(String(10), nullable=True)
    emergency_contact = Column(String(200), nullable=True)
    emergency_phone = Column(String(20), nullable=True)
    observations = Column(Text, nullable=True)

    responsible_id = Column(String, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    responsible = relationship("User", back_populates="patients")
    wounds = relationship(
        "Wound", back_populates="patient", cascade="all, delete-orphan", order_by="Wound.created_at.desc()"
    )
    treatments = relationship("Treatment", back_populates="patient", cascade="all, delete-orphan")
