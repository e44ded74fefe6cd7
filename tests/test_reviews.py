import pytest
from conftest import auth_headers, book

from medibook.constants import NotificationType
from medibook.models import Doctor, Notification


@pytest.fixture
def completed_id(client, patient, doctor):
    appointment_id = book(client, patient, doctor).json()["data"]["id"]
    headers = auth_headers(doctor.user)
    client.patch(f"/api/appointments/{appointment_id}/approve", headers=headers)
    client.patch(f"/api/appointments/{appointment_id}/complete", json={"notes": "ok"}, headers=headers)
    return appointment_id


def review(client, user, appointment_id, rating=5, comment="Great doctor"):
    return client.post(
        f"/api/appointments/{appointment_id}/review",
        json={"rating": rating, "comment": comment},
        headers=auth_headers(user),
    )


def test_review_updates_doctor_rating(client, db, patient, doctor, completed_id):
    response = review(client, patient, completed_id, rating=4)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["rating"] == 4
    assert data["doctorId"] == doctor.id
    assert data["patient"]["name"] == "Alice"

    db.expire_all()
    stored = db.get(Doctor, doctor.id)
    assert stored.rating == 4.0
    assert stored.total_reviews == 1

    note = db.query(Notification).filter(Notification.type == NotificationType.NEW_REVIEW).one()
    assert note.user_id == doctor.user_id
    assert "4-star" in note.message


def test_rating_is_the_mean(client, db, patient, other_patient, doctor, completed_id):
    review(client, patient, completed_id, rating=5)

    second = book(client, other_patient, doctor, slot="11:00-11:30").json()["data"]["id"]
    headers = auth_headers(doctor.user)
    client.patch(f"/api/appointments/{second}/approve", headers=headers)
    client.patch(f"/api/appointments/{second}/complete", headers=headers)
    review(client, other_patient, second, rating=2)

    db.expire_all()
    stored = db.get(Doctor, doctor.id)
    assert stored.rating == 3.5
    assert stored.total_reviews == 2


def test_one_review_per_appointment(client, patient, completed_id):
    assert review(client, patient, completed_id).status_code == 201

    response = review(client, patient, completed_id)

    assert response.status_code == 409
    assert response.json()["kind"] == "conflict"


def test_only_completed_appointments(client, patient, doctor):
    appointment_id = book(client, patient, doctor).json()["data"]["id"]

    response = review(client, patient, appointment_id)

    assert response.status_code == 400
    assert response.json()["kind"] == "invalid_state"


def test_only_the_owning_patient(client, other_patient, completed_id):
    assert review(client, other_patient, completed_id).status_code == 403


@pytest.mark.parametrize("rating", [0, 6])
def test_rating_range(client, patient, completed_id, rating):
    assert review(client, patient, completed_id, rating=rating).status_code == 400


def test_list_doctor_reviews(client, patient, doctor, completed_id):
    review(client, patient, completed_id, comment="Very thorough")

    response = client.get(f"/api/doctors/{doctor.id}/reviews")

    assert response.status_code == 200
    body = response.json()
    assert [r["comment"] for r in body["data"]] == ["Very thorough"]
    assert body["pagination"]["total"] == 1


def test_list_reviews_unknown_doctor(client):
    assert client.get("/api/doctors/999/reviews").status_code == 404


def test_comment_length_is_measured_before_escaping(client, patient, completed_id):
    comment = "Kind & patient " + "x" * 485

    response = review(client, patient, completed_id, comment=comment)

    assert response.status_code == 201
    assert response.json()["data"]["comment"] == "Kind &amp; patient " + "x" * 485
