import os

# Configure the app for tests before anything from medibook is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["NOTIFIER_BACKEND"] = "database"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from medibook.clock import FixedClock, get_clock
from medibook.constants import UserRole
from medibook.database import Base, get_db
from medibook.main import app
from medibook.models import Doctor, User
from medibook.security_utils import create_access_token, hash_password
from medibook.services.notification_service import DatabaseNotifier, get_notifier

PASSWORD = "password123"
PASSWORD_HASH = hash_password(PASSWORD)

# Monday 2030-01-07, 08:00 UTC
NOW = datetime(2030, 1, 7, 8, 0, tzinfo=timezone.utc)
MONDAY = "2030-01-07"
TUESDAY = "2030-01-08"
SATURDAY = "2030-01-12"
NEXT_MONDAY = "2030-01-14"

WEEKDAY_WINDOWS = [{"start": "09:00", "end": "12:00"}, {"start": "14:00", "end": "17:00"}]


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(test_engine, "connect")
    def enable_foreign_keys(dbapi_connection, _connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def notifier(session_factory):
    return DatabaseNotifier(session_factory)


@pytest.fixture
def client(session_factory, clock, notifier):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_notifier] = lambda: notifier

    yield TestClient(app)

    app.dependency_overrides.clear()


# ============================================================================
# SEED HELPERS
# ============================================================================


def make_user(db, email, role=UserRole.PATIENT, name=None, is_active=True):
    user = User(
        email=email,
        name=name or email.split("@")[0].title(),
        password_hash=PASSWORD_HASH,
        role=role,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_doctor(db, email, name=None, **overrides):
    user = make_user(db, email, role=UserRole.DOCTOR, name=name)
    values = {
        "specialization": "Cardiology",
        "experience_years": 10,
        "qualification": ["MBBS", "MD"],
        "clinic_name": "Heart Care Clinic",
        "address": {"city": "Pune", "country": "India"},
        "consultation_fee": 500,
        "available_days": ["monday", "tuesday", "wednesday", "thursday", "friday"],
        "time_slots": WEEKDAY_WINDOWS,
        "is_verified": True,
        "is_active": True,
    }
    values.update(overrides)
    doctor = Doctor(user_id=user.id, **values)
    db.add(doctor)
    db.commit()
    db.refresh(doctor)
    return doctor


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def patient(db):
    return make_user(db, "alice@example.com", name="Alice")


@pytest.fixture
def other_patient(db):
    return make_user(db, "bob@example.com", name="Bob")


@pytest.fixture
def doctor(db):
    return make_doctor(db, "dr.house@example.com", name="Dr. House")


@pytest.fixture
def other_doctor(db):
    return make_doctor(db, "dr.wilson@example.com", name="Dr. Wilson", specialization="Oncology")


@pytest.fixture
def admin(db):
    return make_user(db, "admin@example.com", role=UserRole.ADMIN, name="Admin")


def book(client, patient, doctor, date=MONDAY, slot="10:00-10:30", reason="Chest pain"):
    return client.post(
        "/api/appointments",
        json={"doctorId": doctor.id, "date": date, "slot": slot, "reason": reason},
        headers=auth_headers(patient),
    )
