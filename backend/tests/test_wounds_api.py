"""Wound assessment endpoints."""
import pytest

from conftest import auth_headers
from woundcare.models import Treatment, WoundImage, WoundStatus
from woundcare.models.base import generate_uuid
from woundcare.services.wounds import derive_area


def _payload(patient_id, **overrides):
    body = {"patient_id": patient_id, "location": "Sacrum", "type": "PRESSURE_ULCER"}
    body.update(overrides)
    return body


@pytest.mark.parametrize("length,width,area,expected", [
    (4.0, 2.5, None, 10.0),
    (3.3, 1.7, None, 3.3 * 1.7),
    (4.0, None, None, None),
    (4.0, 2.5, 7.0, 7.0),
])
def test_derive_area(length, width, area, expected):
    assert derive_area(length, width, area) == expected


class TestCreateWound:
    def test_area_derived_from_dimensions(self, client, patient, nurse, nurse_headers):
        resp = client.post(
            "/api/wounds",
            json=_payload(patient.id, length=4.2, width=3.1, pain=6, tissue_type="SLOUGH"),
            headers=nurse_headers,
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["area"] == 4.2 * 3.1
        assert body["status"] == WoundStatus.ACTIVE
        assert body["created_by_id"] == nurse.id

    def test_explicit_area_kept(self, client, patient, nurse_headers):
        resp = client.post("/api/wounds", json=_payload(patient.id, length=4, width=3, area=9.5), headers=nurse_headers)
        assert resp.json()["area"] == 9.5

    def test_status_always_starts_active(self, client, patient, nurse_headers):
        resp = client.post("/api/wounds", json=_payload(patient.id, status="HEALED"), headers=nurse_headers)
        assert resp.status_code == 201
        assert resp.json()["status"] == WoundStatus.ACTIVE

    def test_unknown_patient(self, client, nurse_headers):
        resp = client.post("/api/wounds", json=_payload("missing"), headers=nurse_headers)
        assert resp.status_code == 404
        assert resp.json()["message"] == "Patient not found"

    @pytest.mark.parametrize("override,field", [
        ({"type": "PAPERCUT"}, "type"),
        ({"length": -1}, "length"),
        ({"width": 0}, "width"),
        ({"pain": 11}, "pain"),
        ({"exudate": "LOTS"}, "exudate"),
        ({"location": ""}, "location"),
        ({"description": "x" * 1500}, "description"),
        ({"risk_factors": "x" * 1001}, "risk_factors"),
    ])
    def test_invalid_fields(self, client, patient, nurse_headers, override, field):
        resp = client.post("/api/wounds", json=_payload(patient.id, **override), headers=nurse_headers)
        assert resp.status_code == 400
        assert field in {err["field"] for err in resp.json()["errors"]}

    def test_long_note_kept_whole(self, client, patient, nurse_headers):
        note = "Granulating bed, " * 58
        resp = client.post("/api/wounds", json=_payload(patient.id, description=note), headers=nurse_headers)
        assert resp.status_code == 201
        assert resp.json()["description"] == note.strip()

    def test_nutritionist_cannot_create(self, client, make_user, patient):
        resp = client.post("/api/wounds", json=_payload(patient.id), headers=auth_headers(make_user("NUTRITIONIST")))
        assert resp.status_code == 403


class TestListAndGet:
    def test_list_with_statistics(self, client, db, patient, wound, nurse_headers):
        client.post("/api/wounds", json=_payload(patient.id, location="Right heel"), headers=nurse_headers)
        wound.status = WoundStatus.HEALING
        db.commit()

        body = client.get("/api/wounds", params={"patient_id": patient.id}, headers=nurse_headers).json()
        assert body["pagination"]["total"] == 2
        assert body["statistics"]["total"] == 2
        assert body["statistics"]["active"] == 1
        assert body["statistics"]["healing"] == 1
        assert body["statistics"]["healed"] == 0
        assert body["wounds"][0]["patient"]["name"] == patient.name

    def test_search_matches_patient_name(self, client, wound, nurse_headers):
        body = client.get("/api/wounds", params={"search": "souza"}, headers=nurse_headers).json()
        assert [w["id"] for w in body["wounds"]] == [wound.id]
        body = client.get("/api/wounds", params={"search": "heel"}, headers=nurse_headers).json()
        assert len(body["wounds"]) == 1
        body = client.get("/api/wounds", params={"search": "elbow"}, headers=nurse_headers).json()
        assert body["wounds"] == []

    def test_detail_includes_recent_records(self, client, db, wound, doctor, nurse_headers):
        for i in range(6):
            db.add(Treatment(
                id=generate_uuid(), wound_id=wound.id, patient_id=wound.patient_id,
                user_id=doctor.id, protocol=f"Protocol {i}",
            ))
        for i in range(5):
            db.add(WoundImage(
                id=generate_uuid(), wound_id=wound.id, url=f"/uploads/wounds/{i}.jpg",
                filename=f"{i}.jpg", file_size=10, mime_type="image/jpeg",
            ))
        db.commit()

        body = client.get(f"/api/wounds/{wound.id}", headers=nurse_headers).json()
        assert len(body["treatments"]) == 5
        assert len(body["images"]) == 5
        assert len(body["recent_images"]) == 4
        assert body["counts"] == {"treatments": 6, "images": 5}
        assert body["patient"]["id"] == wound.patient_id

    def test_unknown_wound(self, client, nurse_headers):
        resp = client.get("/api/wounds/nope", headers=nurse_headers)
        assert resp.status_code == 404
        assert resp.json()["message"] == "Wound not found"


class TestUpdateWound:
    def test_area_recomputed_when_dimension_changes(self, client, wound, nurse_headers):
        resp = client.put(f"/api/wounds/{wound.id}", json={"length": 5.0}, headers=nurse_headers)
        assert resp.status_code == 200
        assert resp.json()["area"] == 5.0 * 2.0

    def test_explicit_area_wins_on_update(self, client, wound, nurse_headers):
        resp = client.put(f"/api/wounds/{wound.id}", json={"length": 5.0, "area": 8.0}, headers=nurse_headers)
        assert resp.json()["area"] == 8.0

    def test_area_untouched_without_dimension_change(self, client, wound, nurse_headers):
        resp = client.put(f"/api/wounds/{wound.id}", json={"status": "HEALING"}, headers=nurse_headers)
        assert resp.json()["status"] == "HEALING"
        assert resp.json()["area"] == 6.0

    def test_invalid_status(self, client, wound, nurse_headers):
        resp = client.put(f"/api/wounds/{wound.id}", json={"status": "GONE"}, headers=nurse_headers)
        assert resp.status_code == 400


class TestDeleteWound:
    def test_delete_without_dependents(self, client, wound, admin_headers):
        resp = client.delete(f"/api/wounds/{wound.id}", headers=admin_headers)
        assert resp.status_code == 200
        assert client.get(f"/api/wounds/{wound.id}", headers=admin_headers).status_code == 404

    def test_delete_blocked_by_treatment(self, client, db, wound, doctor, admin_headers):
        db.add(Treatment(
            id=generate_uuid(), wound_id=wound.id, patient_id=wound.patient_id,
            user_id=doctor.id, protocol="Hydrocolloid dressing",
        ))
        db.commit()
        resp = client.delete(f"/api/wounds/{wound.id}", headers=admin_headers)
        assert resp.status_code == 409
        body = resp.json()
        assert body["message"] == "Cannot delete a wound with associated treatments or images"
        assert body["details"] == {"treatments": 1, "images": 0}

    def test_delete_blocked_by_image(self, client, db, wound, admin_headers):
        db.add(WoundImage(
            id=generate_uuid(), wound_id=wound.id, url="/uploads/wounds/a.jpg",
            filename="a.jpg", file_size=10, mime_type="image/jpeg",
        ))
        db.commit()
        resp = client.delete(f"/api/wounds/{wound.id}", headers=admin_headers)
        assert resp.status_code == 409
        assert resp.json()["details"] == {"treatments": 0, "images": 1}

    def test_nurse_cannot_delete(self, client, wound, nurse_headers):
        assert client.delete(f"/api/wounds/{wound.id}", headers=nurse_headers).status_code == 403
