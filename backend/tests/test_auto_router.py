"""
Tests for the REST endpoints under /rest.
"""

import pytest
from sqlalchemy import func, select

from auto_api.models import Auto, Engine, Repair


class TestFindAutos:
    def test_first_page(self, client, seed_autos):
        response = client.get("/rest")

        assert response.status_code == 200
        data = response.json()
        assert [a["id"] for a in data["content"]] == [1, 2, 3, 4, 5]
        assert data["page"] == {"size": 5, "number": 0, "totalElements": 5, "totalPages": 1}

    def test_paging(self, client, seed_autos):
        response = client.get("/rest", params={"size": 2, "page": 1})

        data = response.json()
        assert [a["id"] for a in data["content"]] == [3, 4]
        assert data["page"]["totalPages"] == 3

    def test_camel_case_fields(self, client, seed_autos):
        auto = client.get("/rest", params={"chassisNumber": "WBA00000000000003"}).json()["content"][0]

        assert auto["chassisNumber"] == "WBA00000000000003"
        assert auto["modelYear"] == 2018
        assert auto["safetyFeatures"] == ["ABS", "AIRBAG"]
        assert auto["engine"]["ratedSpeed"] in ("5500", "5500.000")
        assert auto["repairs"] is None

    def test_search_criteria(self, client, seed_autos):
        response = client.get("/rest", params={"engineName": "ta", "abs": "true"})

        assert response.status_code == 200
        assert [a["engine"]["name"] for a in response.json()["content"]] == ["Delta", "Gamma"]

    def test_price_max(self, client, seed_autos):
        response = client.get("/rest", params={"priceMax": "25000"})
        assert [a["id"] for a in response.json()["content"]] == [1, 5]

    def test_nothing_found(self, client, seed_autos):
        response = client.get("/rest", params={"engineName": "Zeta"})

        assert response.status_code == 404
        assert response.json()["detail"] == "Keine Autos gefunden: engineName=Zeta, Seite 0"

    def test_unknown_criterion(self, client, seed_autos):
        response = client.get("/rest", params={"color": "rot"})

        assert response.status_code == 400
        assert "color" in response.json()["detail"]

    def test_unparseable_model_year_min_is_skipped(self, client, seed_autos):
        response = client.get("/rest", params={"modelYearMin": "neu"})

        assert response.status_code == 200
        assert response.json()["page"]["totalElements"] == 5

    def test_model_year_min_beyond_bigint_is_skipped(self, client, seed_autos):
        response = client.get("/rest", params={"modelYearMin": "99999999999999999999"})

        assert response.status_code == 200
        assert response.json()["page"]["totalElements"] == 5

    def test_model_year_beyond_bigint(self, client, seed_autos):
        response = client.get("/rest", params={"modelYear": "99999999999999999999"})

        assert response.status_code == 400
        assert "modelYear" in response.json()["detail"]


class TestGetAuto:
    def test_found_with_etag(self, client, seed_autos):
        response = client.get("/rest/1")

        assert response.status_code == 200
        assert response.headers["ETag"] == '"0"'
        data = response.json()
        assert data["make"] == "VW"
        assert data["engine"]["name"] == "Alpha"
        assert data["repairs"] is None

    def test_with_repairs(self, client, seed_autos):
        response = client.get("/rest/2", params={"repairs": "true"})

        repairs = response.json()["repairs"]
        assert [r["mechanic"] for r in repairs] == ["Jörg Schäfer", "Anna-Lena Groß"]
        assert repairs[0]["date"] == "2021-11-02"

    def test_not_modified(self, client, seed_autos):
        response = client.get("/rest/1", headers={"If-None-Match": '"0"'})

        assert response.status_code == 304
        assert response.headers["ETag"] == '"0"'
        assert response.content == b""

    def test_modified_since_cached_version(self, client, seed_autos):
        response = client.get("/rest/1", headers={"If-None-Match": '"7"'})
        assert response.status_code == 200

    def test_not_found(self, client, seed_autos):
        response = client.get("/rest/999")

        assert response.status_code == 404
        assert response.json()["detail"] == "Es gibt kein Auto mit der ID 999."

    @pytest.mark.parametrize("auto_id", ["9223372036854775808", "99999999999999999999"])
    def test_id_beyond_bigint(self, client, seed_autos, auto_id):
        response = client.get(f"/rest/{auto_id}")

        assert response.status_code == 404
        assert response.json()["detail"] == f"Es gibt kein Auto mit der ID {auto_id}."

    def test_security_headers(self, client, seed_autos):
        response = client.get("/rest/1")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert "X-Request-ID" in response.headers


class TestCreateAuto:
    def test_created(self, client, seed_autos, user_headers, auto_payload):
        response = client.post("/rest", json=auto_payload(), headers=user_headers)

        assert response.status_code == 201
        assert response.headers["Location"] == "http://testserver/rest/6"

        created = client.get("/rest/6", params={"repairs": "true"}).json()
        assert created["version"] == 0
        assert created["engine"]["name"] == "Beta"
        assert created["repairs"][0]["mechanic"] == "Uwe Kühn"

    def test_without_token(self, client, seed_autos, auto_payload):
        response = client.post("/rest", json=auto_payload())

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_invalid_token(self, client, seed_autos, auto_payload):
        response = client.post(
            "/rest", json=auto_payload(), headers={"Authorization": "Bearer kaputt"}
        )
        assert response.status_code == 401

    def test_role_missing(self, client, seed_autos, guest_headers, auto_payload):
        response = client.post("/rest", json=auto_payload(), headers=guest_headers)
        assert response.status_code == 403

    def test_duplicate_chassis_number(self, client, db_session, seed_autos, user_headers, auto_payload):
        response = client.post(
            "/rest",
            json=auto_payload(chassisNumber="WVWZZZ1JZXW000002"),
            headers=user_headers,
        )

        assert response.status_code == 422
        assert "WVWZZZ1JZXW000002" in response.json()["detail"]
        assert db_session.scalar(select(func.count()).select_from(Auto)) == 5

    def test_invalid_engine(self, client, seed_autos, user_headers, auto_payload):
        payload = auto_payload()
        payload["engine"]["horsepower"] = 2000

        response = client.post("/rest", json=payload, headers=user_headers)
        assert response.status_code == 400

    def test_invalid_mechanic(self, client, db_session, seed_autos, user_headers, auto_payload):
        payload = auto_payload(
            repairs=[{"cost": "10.00", "mechanic": "R2D2", "date": "2023-05-04"}]
        )

        response = client.post("/rest", json=payload, headers=user_headers)

        assert response.status_code == 400
        assert db_session.scalar(select(func.count()).select_from(Repair)) == 4

    def test_invalid_date(self, client, seed_autos, user_headers, auto_payload):
        payload = auto_payload(
            repairs=[{"cost": "10.00", "mechanic": "Uwe Kühn", "date": "04.05.2023"}]
        )

        response = client.post("/rest", json=payload, headers=user_headers)
        assert response.status_code == 400

    def test_unsupported_media_type(self, client, seed_autos, user_headers):
        response = client.post(
            "/rest",
            content="make=Audi",
            headers={**user_headers, "Content-Type": "text/plain"},
        )
        assert response.status_code == 415


class TestUpdateAuto:
    def update_body(self) -> dict:
        return {
            "make": "VW",
            "model": "Golf Variant",
            "modelYear": 2019,
            "category": "KOMBI",
            "price": "25990.00",
            "safetyFeatures": ["ABS", "AIRBAG", "ESB", "PARKASSISTENT"],
        }

    def test_updated(self, client, seed_autos, user_headers):
        response = client.put(
            "/rest/1", json=self.update_body(), headers={**user_headers, "If-Match": '"0"'}
        )

        assert response.status_code == 204
        assert response.headers["ETag"] == '"1"'

        data = client.get("/rest/1").json()
        assert data["model"] == "Golf Variant"
        assert data["version"] == 1
        assert data["chassisNumber"] == "WVWZZZ1JZXW000001"

    def test_missing_if_match(self, client, seed_autos, user_headers):
        response = client.put("/rest/1", json=self.update_body(), headers=user_headers)

        assert response.status_code == 428
        assert "If-Match" in response.json()["detail"]

    def test_outdated_version(self, client, seed_autos, user_headers):
        headers = {**user_headers, "If-Match": '"0"'}
        client.put("/rest/1", json=self.update_body(), headers=headers)

        response = client.put("/rest/1", json=self.update_body(), headers=headers)

        assert response.status_code == 412
        assert "Versionsnummer" in response.json()["detail"]

    def test_malformed_version(self, client, seed_autos, user_headers):
        response = client.put(
            "/rest/1", json=self.update_body(), headers={**user_headers, "If-Match": "0"}
        )

        assert response.status_code == 412
        assert "Versionsnummer" in response.json()["detail"]

    def test_not_found(self, client, seed_autos, user_headers):
        response = client.put(
            "/rest/999", json=self.update_body(), headers={**user_headers, "If-Match": '"0"'}
        )
        assert response.status_code == 404

    def test_id_beyond_bigint(self, client, seed_autos, user_headers):
        response = client.put(
            "/rest/99999999999999999999",
            json=self.update_body(),
            headers={**user_headers, "If-Match": '"0"'},
        )
        assert response.status_code == 404

    def test_without_token(self, client, seed_autos):
        response = client.put("/rest/1", json=self.update_body(), headers={"If-Match": '"0"'})
        assert response.status_code == 401


class TestDeleteAuto:
    def test_deleted_by_admin(self, client, db_session, seed_autos, admin_headers):
        response = client.delete("/rest/2", headers=admin_headers)

        assert response.status_code == 204
        assert client.get("/rest/2").status_code == 404
        assert db_session.scalar(select(func.count()).select_from(Engine)) == 4
        assert db_session.scalar(
            select(func.count()).select_from(Repair).where(Repair.auto_id == 2)
        ) == 0

    def test_forbidden_for_user(self, client, seed_autos, user_headers):
        response = client.delete("/rest/2", headers=user_headers)

        assert response.status_code == 403
        assert client.get("/rest/2").status_code == 200

    def test_not_found(self, client, seed_autos, admin_headers):
        response = client.delete("/rest/999", headers=admin_headers)
        assert response.status_code == 404

    def test_id_beyond_bigint(self, client, seed_autos, admin_headers):
        response = client.delete("/rest/99999999999999999999", headers=admin_headers)
        assert response.status_code == 404


class TestAutoFile:
    def test_upload_and_download(self, client, seed_autos, user_headers):
        response = client.post(
            "/rest/1/file",
            files={"file": ("rechnung.pdf", b"%PDF-1.7 demo", "application/pdf")},
            headers=user_headers,
        )

        assert response.status_code == 201
        assert response.headers["Location"] == "http://testserver/rest/file/1"
        assert response.json()["filename"] == "rechnung.pdf"
        assert response.json()["autoId"] == 1

        download = client.get("/rest/file/1")
        assert download.status_code == 200
        assert download.content == b"%PDF-1.7 demo"
        assert download.headers["content-type"] == "application/pdf"

    def test_upload_replaces_file(self, client, seed_autos, user_headers):
        for name, content in (("a.txt", b"alt"), ("b.txt", b"neu")):
            client.post(
                "/rest/1/file",
                files={"file": (name, content, "text/plain")},
                headers=user_headers,
            )

        assert client.get("/rest/file/1").content == b"neu"

    def test_upload_unknown_auto(self, client, seed_autos, user_headers):
        response = client.post(
            "/rest/999/file",
            files={"file": ("a.txt", b"x", "text/plain")},
            headers=user_headers,
        )
        assert response.status_code == 404

    def test_no_file(self, client, seed_autos):
        response = client.get("/rest/file/1")

        assert response.status_code == 404
        assert response.json()["detail"] == "Keine Datei zum Auto mit der ID 1 vorhanden."

    def test_download_id_beyond_bigint(self, client, seed_autos):
        response = client.get("/rest/file/99999999999999999999")
        assert response.status_code == 404
