"""Dashboard summary report."""
from datetime import datetime, timedelta

from woundcare.models import Treatment, Wound, WoundStatus
from woundcare.models.base import generate_uuid
from woundcare.services.reports import report_service


def _treatment(wound, user, **fields):
    return Treatment(
        id=generate_uuid(), wound_id=wound.id, patient_id=wound.patient_id,
        user_id=user.id, protocol="Alginate", **fields,
    )


def test_summary_counts(db, patient, wound, doctor):
    now = datetime(2024, 5, 1, 12, 0)
    db.add(Wound(
        id=generate_uuid(), patient_id=patient.id, location="Right heel", type="DIABETIC_ULCER",
        status=WoundStatus.HEALED, area=2.0,
    ))
    db.add(Wound(
        id=generate_uuid(), patient_id=patient.id, location="Sacrum", type="PRESSURE_ULCER",
        status=WoundStatus.INFECTED, area=10.0,
    ))
    db.add(_treatment(wound, doctor, status="SCHEDULED", next_change_date=now + timedelta(days=2)))
    db.add(_treatment(wound, doctor, status="SCHEDULED", next_change_date=now + timedelta(days=30)))
    db.add(_treatment(wound, doctor, status="SCHEDULED", next_change_date=now - timedelta(days=1)))
    db.add(_treatment(wound, doctor, status="COMPLETED", next_change_date=now - timedelta(days=1)))
    db.commit()

    report = report_service.summary(db, upcoming_days=7, now=now)

    assert report["patients"]["total"] == 1
    assert report["patients"]["by_status"]["active"] == 1
    assert report["wounds"]["total"] == 3
    assert report["wounds"]["by_type"]["pressure_ulcer"] == 2
    assert report["wounds"]["by_status"]["healed"] == 1
    # open wounds only: 6.0 (fixture) and 10.0
    assert report["wounds"]["average_open_area"] == 8.0
    assert report["treatments"]["total"] == 4
    assert report["treatments"]["by_status"]["scheduled"] == 3
    assert report["treatments"]["due_soon"] == 1
    assert report["treatments"]["overdue"] == 1


def test_summary_endpoint_permissions(client, wound, doctor_headers, nurse_headers):
    resp = client.get("/api/reports/summary", headers=doctor_headers)
    assert resp.status_code == 200
    assert resp.json()["wounds"]["total"] == 1
    assert client.get("/api/reports/summary", headers=nurse_headers).status_code == 403


def test_empty_database(db):
    report = report_service.summary(db)
    assert report["wounds"]["average_open_area"] is None
    assert report["treatments"]["due_soon"] == 0
