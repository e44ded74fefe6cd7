import pytest
from conftest import PASSWORD, auth_headers, make_user
from fastapi.testclient import TestClient

from medibook.create_admin import create_admin
from medibook.domain.doctors.service import DoctorService
from medibook.main import app
from medibook.models import Doctor, User
from medibook.security_utils import create_access_token, verify_access_token

DOCTOR_PROFILE = {
    "specialization": "Pediatrics",
    "experienceYears": 4,
    "qualification": ["MBBS"],
    "clinicName": "Little Steps",
    "consultationFee": 400,
    "availableDays": ["monday", "friday"],
    "timeSlots": [{"start": "09:00", "end": "13:00"}],
}


class TestSignup:
    def test_patient_signup(self, client):
        response = client.post(
            "/api/auth/signup",
            json={"name": "Carol", "email": "Carol@Example.com", "password": "secret1", "age": 30},
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["user"]["role"] == "patient"
        assert data["user"]["email"] == "carol@example.com"
        assert verify_access_token(data["token"])["sub"] == str(data["user"]["id"])

    def test_doctor_signup_creates_unverified_profile(self, client, db):
        response = client.post(
            "/api/auth/signup",
            json={
                "name": "Dr. Ross",
                "email": "ross@example.com",
                "password": "secret1",
                "role": "doctor",
                "doctorProfile": DOCTOR_PROFILE,
            },
        )

        assert response.status_code == 201
        profile = response.json()["data"]["doctorProfile"]
        assert profile["isVerified"] is False
        assert profile["clinicName"] == "Little Steps"
        assert db.query(Doctor).count() == 1

    def test_cannot_sign_up_as_admin(self, client):
        response = client.post(
            "/api/auth/signup",
            json={"name": "Eve", "email": "eve@example.com", "password": "secret1", "role": "admin"},
        )
        assert response.status_code == 400

    def test_duplicate_email(self, client, patient):
        response = client.post(
            "/api/auth/signup",
            json={"name": "Alice", "email": "alice@example.com", "password": "secret1"},
        )

        assert response.status_code == 409
        assert response.json()["kind"] == "conflict"

    def test_short_password(self, client):
        response = client.post(
            "/api/auth/signup", json={"name": "Dan", "email": "dan@example.com", "password": "123"}
        )
        assert response.status_code == 400

    def test_invalid_email(self, client, db):
        response = client.post(
            "/api/auth/signup", json={"name": "Dan", "email": "not-an-email", "password": "secret1"}
        )

        assert response.status_code == 400
        assert db.query(User).count() == 0


class TestLogin:
    def test_login(self, client, patient):
        response = client.post("/api/auth/login", json={"email": "ALICE@example.com", "password": PASSWORD})

        assert response.status_code == 200
        assert response.json()["data"]["user"]["id"] == patient.id
        assert response.json()["data"]["token"]

    def test_wrong_password(self, client, patient):
        response = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "nope"})

        assert response.status_code == 401
        assert response.json()["kind"] == "unauthorized"

    def test_unknown_email(self, client):
        response = client.post("/api/auth/login", json={"email": "who@example.com", "password": PASSWORD})
        assert response.status_code == 401

    def test_inactive_user(self, client, db):
        make_user(db, "gone@example.com", is_active=False)
        response = client.post("/api/auth/login", json={"email": "gone@example.com", "password": PASSWORD})
        assert response.status_code == 401


class TestCurrentUser:
    def test_me(self, client, patient):
        response = client.get("/api/auth/me", headers=auth_headers(patient))

        assert response.status_code == 200
        assert response.json()["data"]["user"]["email"] == "alice@example.com"
        assert response.json()["data"]["token"] is None

    def test_me_includes_doctor_profile(self, client, doctor):
        response = client.get("/api/auth/me", headers=auth_headers(doctor.user))
        assert response.json()["data"]["doctorProfile"]["id"] == doctor.id

    def test_missing_token(self, client):
        assert client.get("/api/auth/me").status_code == 401

    def test_garbage_token(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_token_for_missing_user(self, client):
        headers = {"Authorization": f"Bearer {create_access_token(12345)}"}
        assert client.get("/api/auth/me", headers=headers).status_code == 401

    def test_logout(self, client, patient):
        response = client.post("/api/auth/logout", headers=auth_headers(patient))
        assert response.json() == {"success": True, "message": "Logged out successfully"}


class TestPatientProfile:
    def test_update_profile(self, client, patient):
        response = client.put(
            "/api/patient/me",
            json={"phone": "+91 98765 43210", "age": 31, "gender": "Female"},
            headers=auth_headers(patient),
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["phone"] == "+91 98765 43210"
        assert data["age"] == 31
        assert data["gender"] == "female"

    def test_get_profile(self, client, patient):
        response = client.get("/api/patient/me", headers=auth_headers(patient))
        assert response.json()["data"]["name"] == "Alice"

    def test_doctors_cannot_use_patient_profile(self, client, doctor):
        assert client.get("/api/patient/me", headers=auth_headers(doctor.user)).status_code == 403


def test_security_headers(client):
    response = client.get("/api/doctors")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["Cache-Control"] == "no-store"


def test_health(client):
    response = client.get("/health")
    assert response.json() == {"status": "healthy"}


class TestCreateAdmin:
    def test_creates_admin_once(self, db):
        first = create_admin(db, "root@example.com", "secret123", "Root")
        second = create_admin(db, "root@example.com", "other", "Root")

        assert first.id == second.id
        assert first.role == "admin"
        assert db.query(User).filter(User.role == "admin").count() == 1

    def test_refuses_to_promote_existing_user(self, db, patient):
        with pytest.raises(ValueError):
            create_admin(db, "alice@example.com", "secret123", "Alice")

    def test_admin_can_log_in(self, client, db):
        create_admin(db, "root@example.com", "secret123", "Root")

        response = client.post("/api/auth/login", json={"email": "root@example.com", "password": "secret123"})

        assert response.status_code == 200
        assert response.json()["data"]["user"]["role"] == "admin"


def test_unexpected_errors_render_as_internal(client, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("connection reset by peer")

    monkeypatch.setattr(DoctorService, "search_doctors", explode)
    unguarded = TestClient(app, raise_server_exceptions=False)

    response = unguarded.get("/api/doctors")

    assert response.status_code == 500
    assert response.json() == {"success": False, "kind": "internal", "message": "Internal server error"}
