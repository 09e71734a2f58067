"""
Shared fixtures for the API tests.

Every test gets its own SQLite database file and upload/certificate
directories under ``tmp_path``. Users are seeded straight into the
database; tokens are minted with the same helper the login route uses.
"""
from datetime import date, datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from passlib.hash import bcrypt

from main import create_app
from vaxcare import config, models
from vaxcare.auth import create_access_token
from vaxcare.patients import ensure_patient_profile

PASSWORD = "secret123"
FAST_BCRYPT = bcrypt.using(rounds=4)


@pytest.fixture
def app(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "UPLOAD_DIR", tmp_path / "uploads")
    monkeypatch.setattr(config, "CERT_DIR", tmp_path / "certificates")
    return create_app(f"sqlite:///{tmp_path / 'test.db'}")


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(client):
    """Session on the app's database; call ``expire_all()`` before re-reading rows."""
    session = client.app.state.db.session()
    yield session
    session.close()


# ============================================================================
# Seed helpers
# ============================================================================

def make_user(db, name, email, role, password=PASSWORD):
    user = models.User(name=name, email=email, role=role, password=FAST_BCRYPT.hash(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def headers_for(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}


def make_vaccine(db, name="MMR"):
    vaccine = models.Vaccine(name=name, required_age=0)
    db.add(vaccine)
    db.commit()
    db.refresh(vaccine)
    return vaccine


def make_batch(db, vaccine, quantity, expiry_date=None, batch_no=None):
    batch = models.InventoryBatch(
        vaccine_id=vaccine.id,
        batch_no=batch_no,
        quantity=quantity,
        expiry_date=expiry_date,
    )
    db.add(batch)
    db.commit()
    db.refresh(batch)
    return batch


def make_appointment(db, patient, vaccine, status="booked", dose_no=1):
    appt = models.Appointment(
        patient_id=patient.id,
        vaccine_id=vaccine.id,
        appointment_date=datetime(2030, 1, 15, 10, 0),
        status=status,
        dose_no=dose_no,
    )
    db.add(appt)
    db.commit()
    db.refresh(appt)
    return appt


def future(days=180):
    return date.today() + timedelta(days=days)


# ============================================================================
# Users
# ============================================================================

@pytest.fixture
def admin(db):
    return make_user(db, "Ada Admin", "admin@clinic.org", models.ROLE_ADMIN)


@pytest.fixture
def staff(db):
    return make_user(db, "Sam Staff", "staff@clinic.org", models.ROLE_STAFF)


@pytest.fixture
def patient_user(db):
    return make_user(db, "Pat Patient", "pat@clinic.org", models.ROLE_PATIENT)


@pytest.fixture
def patient(db, patient_user):
    return ensure_patient_profile(db, patient_user.id, patient_user.name)


@pytest.fixture
def admin_headers(admin):
    return headers_for(admin)


@pytest.fixture
def staff_headers(staff):
    return headers_for(staff)


@pytest.fixture
def patient_headers(patient_user, patient):
    return headers_for(patient_user)


@pytest.fixture
def vaccine(db):
    return make_vaccine(db)
