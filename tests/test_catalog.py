"""
Vaccine and center catalog routes.
"""
import pytest

from vaxcare import models
from conftest import make_vaccine

VACCINE = {
    "name": "Hepatitis B",
    "dose_type": "3-dose",
    "required_age": 0,
    "description": "Birth dose",
    "side_effects": "Soreness",
    "manufacturer": "Acme Bio",
}


class TestVaccines:
    def test_admin_crud(self, client, db, admin_headers):
        assert client.post("/api/vaccines", json=VACCINE, headers=admin_headers).json() == {"success": True}
        vaccine = db.query(models.Vaccine).one()
        assert vaccine.manufacturer == "Acme Bio"

        client.put(f"/api/vaccines/{vaccine.id}", json={"name": "HepB"}, headers=admin_headers)
        db.expire_all()
        fresh = db.get(models.Vaccine, vaccine.id)
        assert (fresh.name, fresh.required_age, fresh.manufacturer) == ("HepB", 0, None)

        client.delete(f"/api/vaccines/{vaccine.id}", headers=admin_headers)
        assert db.query(models.Vaccine).count() == 0

    def test_list_newest_first(self, client, db, patient_headers):
        make_vaccine(db, "Older")
        make_vaccine(db, "Newer")
        names = [v["name"] for v in client.get("/api/vaccines", headers=patient_headers).json()]
        assert names == ["Newer", "Older"]

    def test_get_single(self, client, vaccine, patient_headers):
        body = client.get(f"/api/vaccines/{vaccine.id}", headers=patient_headers).json()
        assert body["name"] == "MMR"
        assert body["id"] == vaccine.id

    def test_get_missing_is_empty_object(self, client, patient_headers):
        resp = client.get("/api/vaccines/999", headers=patient_headers)
        assert resp.status_code == 200
        assert resp.json() == {}

    @pytest.mark.parametrize("role_fixture", ["staff_headers", "patient_headers"])
    def test_non_admin_cannot_mutate(self, request, client, db, vaccine, role_fixture):
        headers = request.getfixturevalue(role_fixture)
        for resp in (
            client.post("/api/vaccines", json=VACCINE, headers=headers),
            client.put(f"/api/vaccines/{vaccine.id}", json=VACCINE, headers=headers),
            client.delete(f"/api/vaccines/{vaccine.id}", headers=headers),
        ):
            assert resp.status_code == 403
            assert resp.json() == {"success": False, "msg": "Unauthorized"}
        db.expire_all()
        assert [v.name for v in db.query(models.Vaccine).all()] == ["MMR"]

    def test_malformed_body(self, client, db, admin_headers):
        resp = client.post("/api/vaccines", json={"dose_type": "x"}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json() == {"success": False, "msg": "Invalid request"}
        assert db.query(models.Vaccine).count() == 0


class TestCenters:
    def test_admin_crud(self, client, db, admin_headers):
        client.post("/api/centers", json={"name": "North Clinic", "address": "1 Elm St"}, headers=admin_headers)
        center = db.query(models.Center).one()
        assert center.address == "1 Elm St"

        body = client.get(f"/api/centers/{center.id}", headers=admin_headers).json()
        assert body == {"id": center.id, "name": "North Clinic", "address": "1 Elm St"}

        client.put(f"/api/centers/{center.id}", json={"name": "North"}, headers=admin_headers)
        db.expire_all()
        assert (db.get(models.Center, center.id).name, db.get(models.Center, center.id).address) == ("North", None)

        client.delete(f"/api/centers/{center.id}", headers=admin_headers)
        assert client.get("/api/centers", headers=admin_headers).json() == []

    def test_get_missing_is_empty_object(self, client, admin_headers):
        assert client.get("/api/centers/42", headers=admin_headers).json() == {}

    def test_staff_cannot_create(self, client, db, staff_headers):
        resp = client.post("/api/centers", json={"name": "Rogue"}, headers=staff_headers)
        assert resp.status_code == 403
        assert db.query(models.Center).count() == 0


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
