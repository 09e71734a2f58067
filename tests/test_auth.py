"""
Registration, login and bearer-token checks.
"""
from datetime import datetime, timedelta

from fastapi.testclient import TestClient
from jose import jwt

from vaxcare import auth, config, models
from conftest import PASSWORD, make_user


def _register(client, name="Nia Shah", email="nia@clinic.org", password="pw12345"):
    return client.post("/api/register", json={"name": name, "email": email, "password": password})


class TestRegister:
    def test_creates_patient_user_and_profile(self, client, db):
        resp = _register(client)
        assert resp.status_code == 200
        assert resp.json() == {"success": True}

        user = db.query(models.User).filter_by(email="nia@clinic.org").one()
        assert user.role == "patient"
        assert user.password != "pw12345"

        profiles = db.query(models.Patient).filter_by(user_id=user.id).all()
        assert len(profiles) == 1
        assert profiles[0].name == "Nia Shah"

    def test_duplicate_email(self, client, db):
        _register(client)
        resp = _register(client, name="Other")
        assert resp.json() == {"success": False, "msg": "Email already exists"}
        assert db.query(models.User).count() == 1

    def test_missing_fields(self, client, db):
        resp = client.post("/api/register", json={"email": "x@clinic.org"})
        assert resp.status_code == 200
        assert resp.json() == {"success": False, "msg": "Missing fields"}
        assert db.query(models.User).count() == 0

    def test_accepts_internal_email_domain(self, client, db):
        resp = _register(client, email="nurse@clinic.local")
        assert resp.json() == {"success": True}
        assert db.query(models.User).filter_by(email="nurse@clinic.local").count() == 1

    def test_profile_failure_leaves_no_user(self, app, db, monkeypatch):
        def broken_profile(session, user_id, name):
            raise RuntimeError("profile insert failed")

        quiet = TestClient(app, raise_server_exceptions=False)
        with monkeypatch.context() as m:
            m.setattr(auth, "ensure_patient_profile", broken_profile)
            resp = _register(quiet)

        assert resp.status_code == 500
        assert resp.json() == {"success": False, "msg": "Server error"}
        assert db.query(models.User).count() == 0
        assert db.query(models.Patient).count() == 0


class TestLogin:
    def test_success_returns_token_with_role(self, client, admin):
        resp = client.post("/api/login", json={"email": "admin@clinic.org", "password": PASSWORD})
        body = resp.json()
        assert body["success"] is True
        assert body["user"] == {
            "id": admin.id, "name": "Ada Admin", "email": "admin@clinic.org", "role": "admin",
        }
        claims = jwt.decode(body["token"], config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
        assert claims["sub"] == str(admin.id)
        assert claims["role"] == "admin"
        lifetime = datetime.utcfromtimestamp(claims["exp"]) - datetime.utcnow()
        assert timedelta(hours=11, minutes=55) < lifetime <= timedelta(hours=12)

    def test_wrong_password(self, client, admin):
        resp = client.post("/api/login", json={"email": "admin@clinic.org", "password": "nope"})
        assert resp.status_code == 200
        assert resp.json() == {"success": False, "msg": "Invalid credentials"}

    def test_unknown_email(self, client):
        resp = client.post("/api/login", json={"email": "ghost@clinic.org", "password": "x"})
        assert resp.json() == {"success": False, "msg": "Invalid credentials"}

    def test_missing(self, client):
        resp = client.post("/api/login", json={"email": "ghost@clinic.org"})
        assert resp.json() == {"success": False, "msg": "Missing"}

    def test_malformed_email_is_invalid_credentials(self, client):
        resp = client.post("/api/login", json={"email": "not-an-email", "password": "x"})
        assert resp.status_code == 200
        assert resp.json() == {"success": False, "msg": "Invalid credentials"}

    def test_patient_without_profile_gets_exactly_one(self, client, db, patient_user):
        assert db.query(models.Patient).filter_by(user_id=patient_user.id).count() == 0

        for _ in range(2):
            resp = client.post("/api/login", json={"email": "pat@clinic.org", "password": PASSWORD})
            assert resp.json()["success"] is True

        rows = db.query(models.Patient).filter_by(user_id=patient_user.id).all()
        assert len(rows) == 1
        assert rows[0].name == "Pat Patient"

    def test_admin_login_does_not_create_profile(self, client, db, admin):
        client.post("/api/login", json={"email": "admin@clinic.org", "password": PASSWORD})
        assert db.query(models.Patient).count() == 0


class TestBearerToken:
    def test_me(self, client, admin_headers):
        resp = client.get("/api/me", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["role"] == "admin"

    def test_no_token(self, client):
        resp = client.get("/api/vaccines")
        assert resp.status_code == 401
        assert resp.json() == {"msg": "No token"}

    def test_garbage_token(self, client):
        resp = client.get("/api/vaccines", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401
        assert resp.json() == {"msg": "Invalid token"}

    def test_expired_token(self, client, admin):
        token = jwt.encode(
            {"sub": str(admin.id), "role": "admin", "exp": datetime.utcnow() - timedelta(minutes=1)},
            config.JWT_SECRET,
            algorithm=config.JWT_ALGORITHM,
        )
        resp = client.get("/api/vaccines", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json() == {"msg": "Token expired"}

    def test_removed_user(self, client, db):
        user = make_user(db, "Gone", "gone@clinic.org", "staff")
        token = jwt.encode(
            {"sub": str(user.id), "role": "staff", "exp": datetime.utcnow() + timedelta(hours=1)},
            config.JWT_SECRET,
            algorithm=config.JWT_ALGORITHM,
        )
        db.delete(user)
        db.commit()
        resp = client.get("/api/vaccines", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json() == {"msg": "User not found"}
