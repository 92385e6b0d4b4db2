"""Shared fixtures: in-memory database, API client, users per role."""
import os
import tempfile
from datetime import date

# Settings are read at import time; keep tests fast and off the real database
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SEED_DEMO_DATA", "false")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="woundcare-uploads-"))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from woundcare.core.security import create_access_token, hash_password  # noqa: E402
from woundcare.main import app  # noqa: E402
from woundcare.models import Base, Patient, User, UserRole, Wound  # noqa: E402
from woundcare.models.base import generate_uuid, get_db  # noqa: E402
from woundcare.services.image_storage import image_storage  # noqa: E402

TEST_PASSWORD = "Wound#Care9x"

VALID_CPFS = ("52998224725", "11144477735", "12345678909")


@pytest.fixture()
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def client(db, tmp_path, monkeypatch):
    """TestClient bound to the test database; uploads go to ``tmp_path``."""
    monkeypatch.setattr(image_storage, "base_dir", str(tmp_path))

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture()
def make_user(db):
    def _make(role=UserRole.NURSE, email=None, is_active=True, password=TEST_PASSWORD):
        user = User(
            id=generate_uuid(),
            email=email or f"{role.lower()}-{generate_uuid()[:8]}@clinic.com.br",
            hashed_password=hash_password(password),
            name=f"Test {role.title()}",
            role=role,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture()
def admin(make_user):
    return make_user(UserRole.ADMIN)


@pytest.fixture()
def doctor(make_user):
    return make_user(UserRole.DOCTOR)


@pytest.fixture()
def nurse(make_user):
    return make_user(UserRole.NURSE)


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture()
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture()
def doctor_headers(doctor):
    return auth_headers(doctor)


@pytest.fixture()
def nurse_headers(nurse):
    return auth_headers(nurse)


@pytest.fixture()
def patient(db, doctor):
    record = Patient(
        id=generate_uuid(),
        name="Ana Paula Souza",
        cpf=VALID_CPFS[0],
        birth_date=date(1955, 4, 2),
        gender="FEMALE",
        status="ACTIVE",
        responsible_id=doctor.id,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.fixture()
def wound(db, patient, doctor):
    record = Wound(
        id=generate_uuid(),
        patient_id=patient.id,
        created_by_id=doctor.id,
        location="Left heel",
        type="PRESSURE_ULCER",
        stage="STAGE_2",
        status="ACTIVE",
        length=3.0,
        width=2.0,
        area=6.0,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record
