"""
Demo data seeder.

Creates an admin, a doctor and a nurse with known credentials, plus a sample
patient and wound record so a fresh install can be explored immediately.

Credentials:
  Admin : admin@woundcare.demo  / Admin#2024x
  Doctor: doctor@woundcare.demo / Doctor#2024x
  Nurse : nurse@woundcare.demo  / Nurse#2024x

This seeder is idempotent; it is safe to call on every startup.
"""
import logging
from datetime import date

from .models.base import SessionLocal, Base, engine, generate_uuid
from .models.user import User, UserRole
from .models.patient import Patient, PatientStatus, Gender
from .models.wound import Wound, WoundType, WoundStage, WoundStatus
from .core.security import hash_password

logger = logging.getLogger(__name__)

DEMO_ADMIN_EMAIL = "admin@woundcare.demo"
DEMO_ADMIN_PASSWORD = "Admin#2024x"

DEMO_DOCTOR_EMAIL = "doctor@woundcare.demo"
DEMO_DOCTOR_PASSWORD = "Doctor#2024x"

DEMO_NURSE_EMAIL = "nurse@woundcare.demo"
DEMO_NURSE_PASSWORD = "Nurse#2024x"

DEMO_PATIENT_CPF = "52998224725"

DEMO_USERS = (
    (DEMO_ADMIN_EMAIL, DEMO_ADMIN_PASSWORD, "Demo Admin", UserRole.ADMIN, None, None),
    (DEMO_DOCTOR_EMAIL, DEMO_DOCTOR_PASSWORD, "Demo Doctor", UserRole.DOCTOR, "CRM-SP 000001", "Dermatology"),
    (DEMO_NURSE_EMAIL, DEMO_NURSE_PASSWORD, "Demo Nurse", UserRole.NURSE, "COREN-SP 000001", "Wound care"),
)


def seed_demo_data() -> None:
    """Create demo users, patient, and wound if they do not already exist."""
    # Ensure tables exist (no-op when already created at startup)
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        _seed_users(db)
        doctor = db.query(User).filter(User.email == DEMO_DOCTOR_EMAIL).first()
        patient = _seed_patient(db, doctor.id)
        _seed_wound(db, patient.id, doctor.id)
    finally:
        db.close()


# ── helpers ──────────────────────────────────────────────────────────────────

def _seed_users(db) -> None:
    for email, password, name, role, license_number, specialty in DEMO_USERS:
        if db.query(User).filter(User.email == email).first():
            continue
        db.add(User(
            id=generate_uuid(),
            email=email,
            hashed_password=hash_password(password),
            name=name,
            role=role,
            professional_license=license_number,
            specialty=specialty,
        ))
        db.commit()
        logger.info("Created demo %s: %s", role.lower(), email)


def _seed_patient(db, responsible_id: str) -> Patient:
    patient = db.query(Patient).filter(Patient.cpf == DEMO_PATIENT_CPF).first()
    if not patient:
        patient = Patient(
            id=generate_uuid(),
            name="Maria Demo da Silva",
            cpf=DEMO_PATIENT_CPF,
            birth_date=date(1948, 3, 12),
            gender=Gender.FEMALE,
            status=PatientStatus.ACTIVE,
            comorbidities="Type 2 diabetes; hypertension",
            mobility="Bedridden",
            consciousness="Alert",
            city="São Paulo",
            state="SP",
            responsible_id=responsible_id,
            observations="Pre-seeded demo patient.",
        )
        db.add(patient)
        db.commit()
        db.refresh(patient)
        logger.info("Created demo patient %s", patient.id)
    return patient


def _seed_wound(db, patient_id: str, created_by_id: str) -> None:
    existing = db.query(Wound).filter(Wound.patient_id == patient_id).first()
    if not existing:
        wound = Wound(
            id=generate_uuid(),
            patient_id=patient_id,
            created_by_id=created_by_id,
            location="Sacral region",
            type=WoundType.PRESSURE_ULCER,
            stage=WoundStage.STAGE_3,
            status=WoundStatus.ACTIVE,
            length=4.0,
            width=3.0,
            depth=0.5,
            area=12.0,
            description="Pre-seeded demo wound: sacral pressure ulcer.",
        )
        db.add(wound)
        db.commit()
        logger.info("Created demo wound %s for patient %s", wound.id, patient_id)
