from datetime import date, datetime

from conftest import MONDAY, TUESDAY, auth_headers, book, make_doctor, make_user

from medibook.constants import NotificationType
from medibook.models import Appointment, Notification, User

NEW_DOCTOR = {
    "userData": {"name": "Dr. Grey", "email": "Grey@Example.com", "password": "secret123"},
    "doctorProfile": {
        "specialization": "Surgery",
        "experienceYears": 8,
        "qualification": ["MBBS", "MS"],
        "clinicName": "Grey Sloan",
        "consultationFee": 900,
        "availableDays": ["monday"],
        "timeSlots": [{"start": "09:00", "end": "11:00"}],
    },
}


def test_non_admins_are_forbidden(client, patient, doctor):
    for user in (patient, doctor.user):
        assert client.get("/api/admin/dashboard/stats", headers=auth_headers(user)).status_code == 403


def test_dashboard_stats(client, db, admin, patient, other_patient, doctor):
    # Clock is 2030-01-07; two bookings made this week, one long ago
    for created_at, status, slot in (
        (datetime(2030, 1, 5), "pending", "10:00-10:30"),
        (datetime(2030, 1, 6), "pending", "10:30-11:00"),
        (datetime(2029, 11, 20), "completed", "11:00-11:30"),
    ):
        db.add(
            Appointment(
                patient_id=patient.id,
                doctor_id=doctor.id,
                date=date(2030, 1, 14),
                slot=slot,
                reason="Checkup",
                status=status,
                created_at=created_at,
            )
        )
    db.commit()

    response = client.get("/api/admin/dashboard/stats", headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.json()["data"] == {
        "totalDoctors": 1,
        "totalPatients": 2,
        "totalAppointments": 3,
        "pendingAppointments": 2,
        "completedAppointments": 1,
        "recentAppointments": 2,
    }


class TestDoctors:
    def test_create_doctor_is_verified_and_notified(self, client, db, admin):
        response = client.post("/api/admin/doctors", json=NEW_DOCTOR, headers=auth_headers(admin))

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["isVerified"] is True
        assert data["user"]["email"] == "grey@example.com"

        user = db.query(User).filter(User.email == "grey@example.com").one()
        assert user.role == "doctor"
        note = db.query(Notification).filter(Notification.user_id == user.id).one()
        assert note.type == NotificationType.DOCTOR_VERIFIED

    def test_created_doctor_can_log_in(self, client, admin):
        client.post("/api/admin/doctors", json=NEW_DOCTOR, headers=auth_headers(admin))

        response = client.post(
            "/api/auth/login", json={"email": "grey@example.com", "password": "secret123"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["doctorProfile"]["clinicName"] == "Grey Sloan"

    def test_duplicate_email(self, client, db, admin):
        make_user(db, "grey@example.com")
        response = client.post("/api/admin/doctors", json=NEW_DOCTOR, headers=auth_headers(admin))
        assert response.status_code == 409

    def test_verify_doctor(self, client, db, admin):
        doctor = make_doctor(db, "new@example.com", is_verified=False)

        response = client.patch(f"/api/admin/doctors/{doctor.id}/verify", headers=auth_headers(admin))

        assert response.status_code == 200
        assert response.json()["data"]["isVerified"] is True
        notes = (
            db.query(Notification)
            .filter(
                Notification.user_id == doctor.user_id,
                Notification.type == NotificationType.DOCTOR_VERIFIED,
            )
            .all()
        )
        assert len(notes) == 1

    def test_verified_doctor_becomes_bookable(self, client, db, admin, patient):
        doctor = make_doctor(db, "new@example.com", is_verified=False)
        assert book(client, patient, doctor).json()["kind"] == "unavailable"

        client.patch(f"/api/admin/doctors/{doctor.id}/verify", headers=auth_headers(admin))

        assert book(client, patient, doctor).status_code == 201

    def test_list_doctors_filters(self, client, db, admin, doctor):
        pending = make_doctor(db, "new@example.com", is_verified=False)

        response = client.get("/api/admin/doctors?isVerified=false", headers=auth_headers(admin))

        assert [d["id"] for d in response.json()["data"]] == [pending.id]
        everyone = client.get("/api/admin/doctors", headers=auth_headers(admin)).json()
        assert everyone["pagination"]["total"] == 2

    def test_update_doctor(self, client, admin, doctor):
        response = client.put(
            f"/api/admin/doctors/{doctor.id}",
            json={"isActive": False, "clinicName": "New Clinic"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["isActive"] is False
        assert data["clinicName"] == "New Clinic"

    def test_get_unknown_doctor(self, client, admin):
        assert client.get("/api/admin/doctors/999", headers=auth_headers(admin)).status_code == 404


class TestPatients:
    def test_list_patients(self, client, db, admin, patient):
        make_user(db, "gone@example.com", is_active=False)

        active = client.get("/api/admin/patients?isActive=true", headers=auth_headers(admin)).json()

        assert [p["email"] for p in active["data"]] == ["alice@example.com"]

    def test_deactivate_patient(self, client, admin, patient):
        response = client.patch(f"/api/admin/patients/{patient.id}/deactivate", headers=auth_headers(admin))

        assert response.status_code == 200
        assert response.json()["data"]["isActive"] is False
        # Deactivated users can no longer authenticate
        assert client.get("/api/patient/me", headers=auth_headers(patient)).status_code == 401

    def test_deactivate_requires_a_patient(self, client, admin, doctor):
        response = client.patch(
            f"/api/admin/patients/{doctor.user_id}/deactivate", headers=auth_headers(admin)
        )
        assert response.status_code == 404


class TestAppointments:
    def test_paginated_listing_with_filters(self, client, admin, patient, other_patient, doctor):
        book(client, patient, doctor, date=MONDAY)
        book(client, patient, doctor, date=TUESDAY)
        bob = book(client, other_patient, doctor, date=MONDAY, slot="11:00-11:30").json()["data"]["id"]
        headers = auth_headers(admin)

        page = client.get("/api/admin/appointments?page=1&limit=2", headers=headers).json()
        assert len(page["data"]) == 2
        assert page["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}

        filtered = client.get(
            f"/api/admin/appointments?patientId={other_patient.id}", headers=headers
        ).json()
        assert [a["id"] for a in filtered["data"]] == [bob]

        by_doctor = client.get(
            f"/api/admin/appointments?doctorId={doctor.id}&from={TUESDAY}", headers=headers
        ).json()
        assert by_doctor["pagination"]["total"] == 1
