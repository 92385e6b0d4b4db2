"""Account administration endpoints."""
from conftest import TEST_PASSWORD
from woundcare.models import UserRole


def test_list_users_filters(client, admin, make_user, admin_headers):
    make_user(UserRole.NURSE)
    make_user(UserRole.NURSE, is_active=False)
    make_user(UserRole.DOCTOR)

    body = client.get("/api/users", params={"role": "NURSE"}, headers=admin_headers).json()
    assert body["pagination"]["total"] == 2
    assert all(u["role"] == "NURSE" for u in body["users"])

    body = client.get("/api/users", params={"is_active": "false"}, headers=admin_headers).json()
    assert [u["is_active"] for u in body["users"]] == [False]

    body = client.get("/api/users", params={"limit": 2, "page": 9}, headers=admin_headers).json()
    assert body["pagination"] == {"page": 2, "limit": 2, "total": 4, "pages": 2}


def test_deactivate_blocks_login(client, nurse, admin_headers):
    resp = client.put(f"/api/users/{nurse.id}/status", json={"is_active": False}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["is_active"] is False

    login = client.post("/api/auth/login", json={"email": nurse.email, "password": TEST_PASSWORD})
    assert login.status_code == 401

    client.put(f"/api/users/{nurse.id}/status", json={"is_active": True}, headers=admin_headers)
    login = client.post("/api/auth/login", json={"email": nurse.email, "password": TEST_PASSWORD})
    assert login.status_code == 200


def test_deactivate_revokes_existing_access_token(client, nurse, nurse_headers, admin_headers, patient):
    assert client.get("/api/patients", headers=nurse_headers).status_code == 200

    client.put(f"/api/users/{nurse.id}/status", json={"is_active": False}, headers=admin_headers)
    resp = client.get("/api/patients", headers=nurse_headers)
    assert resp.status_code == 401
    assert client.get("/api/wounds", headers=nurse_headers).status_code == 401

    client.put(f"/api/users/{nurse.id}/status", json={"is_active": True}, headers=admin_headers)
    assert client.get("/api/patients", headers=nurse_headers).status_code == 200


def test_admin_cannot_deactivate_self(client, admin, admin_headers):
    resp = client.put(f"/api/users/{admin.id}/status", json={"is_active": False}, headers=admin_headers)
    assert resp.status_code == 400


def test_unknown_user(client, admin_headers):
    resp = client.put("/api/users/nobody/status", json={"is_active": False}, headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "User not found"


def test_requires_user_manage(client, doctor_headers):
    assert client.get("/api/users", headers=doctor_headers).status_code == 403
