"""Login, token refresh, logout, profile and registration."""
from datetime import timedelta

from conftest import TEST_PASSWORD, auth_headers
from woundcare.core.config import settings
from woundcare.core.security import issue_token
from woundcare.models import User, UserRole


def _login(client, email, password=TEST_PASSWORD):
    return client.post("/api/auth/login", json={"email": email, "password": password})


class TestLogin:
    def test_success_sets_cookies(self, client, db, nurse):
        resp = _login(client, nurse.email)
        assert resp.status_code == 200
        body = resp.json()
        assert body["user"]["id"] == nurse.id
        assert body["access_token"]
        assert resp.cookies.get(settings.ACCESS_COOKIE_NAME) == body["access_token"]
        assert resp.cookies.get(settings.REFRESH_COOKIE_NAME) == body["refresh_token"]
        db.refresh(nurse)
        assert nurse.last_login is not None
        assert nurse.refresh_token == body["refresh_token"]

    def test_cookie_authenticates_followup_requests(self, client, nurse):
        _login(client, nurse.email)
        resp = client.get("/api/auth/me")
        assert resp.status_code == 200
        assert resp.json()["email"] == nurse.email

    def test_wrong_password(self, client, nurse):
        resp = _login(client, nurse.email, "Wrong#Pass1x")
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid credentials"

    def test_unknown_email(self, client):
        resp = _login(client, "ghost@clinic.com.br")
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid credentials"

    def test_disabled_account(self, client, make_user):
        user = make_user(UserRole.NURSE, is_active=False)
        assert _login(client, user.email).status_code == 401

    def test_malformed_body(self, client):
        resp = client.post("/api/auth/login", json={"email": "not-an-email"})
        assert resp.status_code == 400
        fields = {err["field"] for err in resp.json()["errors"]}
        assert {"email", "password"} <= fields


class TestRefreshAndLogout:
    def test_refresh_rotates_token(self, client, nurse):
        first = _login(client, nurse.email).json()
        resp = client.post("/api/auth/refresh", json={"refresh_token": first["refresh_token"]})
        assert resp.status_code == 200
        second = resp.json()
        assert second["refresh_token"] != first["refresh_token"]

        reused = client.post("/api/auth/refresh", json={"refresh_token": first["refresh_token"]})
        assert reused.status_code == 401

    def test_refresh_from_cookie(self, client, nurse):
        _login(client, nurse.email)
        assert client.post("/api/auth/refresh").status_code == 200

    def test_access_token_is_not_a_refresh_token(self, client, nurse):
        resp = client.post("/api/auth/refresh", json={"refresh_token": auth_headers(nurse)["Authorization"][7:]})
        assert resp.status_code == 401

    def test_refresh_without_token(self, client):
        assert client.post("/api/auth/refresh").status_code == 401

    def test_logout_clears_session(self, client, db, nurse):
        tokens = _login(client, nurse.email).json()
        resp = client.post("/api/auth/logout")
        assert resp.status_code == 200
        db.refresh(nurse)
        assert nurse.refresh_token is None
        assert client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]}).status_code == 401


class TestGate:
    def test_missing_token(self, client):
        resp = client.get("/api/auth/me")
        assert resp.status_code == 401
        assert resp.json()["message"] == "Access token required"

    def test_expired_token(self, client, nurse):
        expired = issue_token(
            {"user_id": nurse.id, "email": nurse.email, "role": nurse.role, "name": nurse.name},
            timedelta(seconds=-5),
        )
        resp = client.get("/api/wounds", headers={"Authorization": f"Bearer {expired}"})
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid or expired token"

    def test_public_paths_open(self, client):
        assert client.get("/health").json()["status"] == "healthy"

    def test_me_lists_permissions(self, client, nurse, nurse_headers):
        body = client.get("/api/auth/me", headers=nurse_headers).json()
        assert body["role"] == UserRole.NURSE
        assert "wound:create" in body["permissions"]
        assert "patient:create" not in body["permissions"]


class TestRegister:
    def _payload(self, **overrides):
        body = {
            "name": "Carla Mendes",
            "email": "Carla.Mendes@Clinic.com.br",
            "password": "Wound#Care9x",
            "role": "PHYSIOTHERAPIST",
            "phone": "11987654321",
        }
        body.update(overrides)
        return body

    def test_admin_registers_user(self, client, db, admin_headers):
        resp = client.post("/api/auth/register", json=self._payload(), headers=admin_headers)
        assert resp.status_code == 201
        assert resp.json()["email"] == "carla.mendes@clinic.com.br"
        assert resp.json()["role"] == "PHYSIOTHERAPIST"
        assert "hashed_password" not in resp.json()
        user = db.query(User).filter(User.email == "carla.mendes@clinic.com.br").one()
        assert _login(client, user.email, "Wound#Care9x").status_code == 200

    def test_duplicate_email(self, client, admin_headers):
        client.post("/api/auth/register", json=self._payload(), headers=admin_headers)
        resp = client.post("/api/auth/register", json=self._payload(), headers=admin_headers)
        assert resp.status_code == 409

    def test_weak_password(self, client, admin_headers):
        resp = client.post("/api/auth/register", json=self._payload(password="password"), headers=admin_headers)
        assert resp.status_code == 400
        assert "password" in {err["field"] for err in resp.json()["errors"]}

    def test_unknown_role(self, client, admin_headers):
        resp = client.post("/api/auth/register", json=self._payload(role="WIZARD"), headers=admin_headers)
        assert resp.status_code == 400

    def test_doctor_cannot_register(self, client, doctor_headers):
        resp = client.post("/api/auth/register", json=self._payload(), headers=doctor_headers)
        assert resp.status_code == 403

    def test_register_requires_token(self, client):
        assert client.post("/api/auth/register", json=self._payload()).status_code == 401
