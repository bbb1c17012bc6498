import pytest

from tasting.core.security import create_access_token


async def _enroll(client, headers, year=2024, first="Anna", last="Müller"):
    response = await client.post(
        f"/api/admin/years/{year}/persons", json={"first_name": first, "last_name": last}, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()


async def _praline(client, headers, year=2024, **fields):
    body = {"name": "Schokoladen-Trüffel", "description": "Cremig", "is_vegan": False} | fields
    response = await client.post(f"/api/admin/years/{year}/pralines", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_health_is_public(client):
    response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_admin_routes_require_credentials(client):
    response = await client.get("/api/admin/persons")

    assert response.status_code == 401
    assert response.json()["code"] == "unauthorized"


@pytest.mark.asyncio
async def test_admin_routes_require_admin_role(client):
    token = create_access_token("guest", claims={"role": "user"})

    response = await client.get("/api/admin/persons", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 403
    assert response.json()["code"] == "forbidden"


@pytest.mark.asyncio
async def test_garbage_token_is_unauthorized(client):
    response = await client.get("/api/admin/persons", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_api_key_grants_admin_access(client, api_key):
    assert (await client.get("/api/admin/persons", headers={"X-API-Key": api_key})).status_code == 200
    assert (await client.get("/api/admin/persons", headers={"X-API-Key": "wrong"})).status_code == 401


@pytest.mark.asyncio
async def test_anonymous_rating_flow(client, admin_headers):
    enrolled = await _enroll(client, admin_headers)
    signature = enrolled["person_year"]["signature"]
    praline = await _praline(client, admin_headers)
    await _praline(client, admin_headers, name="Kokos-Makronen", is_vegan=True)

    view = (await client.get(f"/api/rate/{signature}")).json()
    assert view["person"]["first_name"] == "Anna"
    assert [item["name"] for item in view["pralines"]] == ["Kokos-Makronen", "Schokoladen-Trüffel"]
    assert view["ratings"] == {}
    assert view["progress"] == {"total": 2, "rated": 0, "percentage": 0}

    created = await client.post(
        f"/api/rate/{signature}/ratings",
        json={"praline_id": praline["id"], "rating": 4, "comment": "Sehr lecker!"},
    )
    assert created.status_code == 200
    assert created.json()["action"] == "created"

    updated = await client.post(f"/api/rate/{signature}/ratings", json={"praline_id": praline["id"], "rating": 5})
    assert updated.json()["action"] == "updated"
    assert updated.json()["rating"]["id"] == created.json()["rating"]["id"]

    view = (await client.get(f"/api/rate/{signature}")).json()
    assert list(view["ratings"]) == [str(praline["id"])]
    assert view["ratings"][str(praline["id"])]["rating"] == 5
    assert view["progress"] == {"total": 2, "rated": 1, "percentage": 50}

    feedback = await client.patch(
        f"/api/rate/{signature}",
        json={"favorite_chocolate_id": praline["id"], "general_feedback": "Toll", "allergies": " "},
    )
    assert feedback.status_code == 200
    assert feedback.json()["favorite_chocolate_id"] == praline["id"]
    assert feedback.json()["allergies"] is None


@pytest.mark.asyncio
async def test_rating_errors_use_the_error_payload(client, admin_headers):
    enrolled = await _enroll(client, admin_headers)
    signature = enrolled["person_year"]["signature"]
    other_year = await _praline(client, admin_headers, year=2025)

    malformed = await client.post("/api/rate/abc/ratings", json={"praline_id": 1, "rating": 4})
    assert malformed.status_code == 400
    assert malformed.json()["code"] == "invalid_signature"

    unknown = await client.get("/api/rate/zzzzzz")
    assert unknown.status_code == 404

    out_of_range = await client.post(f"/api/rate/{signature}/ratings", json={"praline_id": other_year["id"], "rating": 7})
    assert out_of_range.status_code == 400
    assert out_of_range.json()["code"] == "invalid_rating"

    mismatch = await client.post(f"/api/rate/{signature}/ratings", json={"praline_id": other_year["id"], "rating": 3})
    body = mismatch.json()
    assert mismatch.status_code == 400
    assert body["code"] == "praline_year_mismatch"
    assert set(body) == {"detail", "code", "details"}


@pytest.mark.asyncio
async def test_year_range_is_enforced_on_admin_routes(client, admin_headers):
    response = await client.get("/api/admin/years/2020/pralines", headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["details"] == {"field": "year", "value": 2020, "min": 2021, "max": 2050}


@pytest.mark.asyncio
async def test_participation_toggle(client, admin_headers):
    person = (
        await client.post("/api/admin/persons", json={"first_name": "Max", "last_name": "Schmidt"}, headers=admin_headers)
    ).json()
    url = f"/api/admin/years/2024/persons/{person['id']}/participation"

    noop = await client.patch(url, json={"is_participating": False}, headers=admin_headers)
    assert noop.json() == {"message": "Person is already not participating"}

    enabled = (await client.patch(url, json={"is_participating": True}, headers=admin_headers)).json()
    disabled = (await client.patch(url, json={"is_participating": False}, headers=admin_headers)).json()
    assert disabled["id"] == enabled["id"]
    assert disabled["signature"] == enabled["signature"]
    assert disabled["is_participating"] is False

    listed = (await client.get("/api/admin/years/2024/persons", headers=admin_headers)).json()
    assert listed[0]["has_person_year"] is True
    assert listed[0]["person_year"]["is_participating"] is False


@pytest.mark.asyncio
async def test_duplicate_enrollment_conflicts(client, admin_headers):
    await _enroll(client, admin_headers)

    response = await client.post(
        "/api/admin/years/2024/persons", json={"first_name": "Anna", "last_name": "Müller"}, headers=admin_headers
    )

    assert response.status_code == 409
    assert response.json()["code"] == "conflict_unique"


@pytest.mark.asyncio
async def test_referenced_praline_cannot_be_deleted(client, admin_headers):
    signature = (await _enroll(client, admin_headers))["person_year"]["signature"]
    rated = await _praline(client, admin_headers)
    spare = await _praline(client, admin_headers, name="Nuss-Pralinen")
    await client.post(f"/api/rate/{signature}/ratings", json={"praline_id": rated["id"], "rating": 2})

    refused = await client.delete(f"/api/admin/pralines/{rated['id']}", headers=admin_headers)
    assert refused.status_code == 409
    assert refused.json()["code"] == "referenced_by_ratings"

    deleted = await client.delete(f"/api/admin/pralines/{spare['id']}", headers=admin_headers)
    assert deleted.status_code == 200
    remaining = (await client.get("/api/admin/years/2024/pralines", headers=admin_headers)).json()
    assert [item["id"] for item in remaining] == [rated["id"]]


@pytest.mark.asyncio
async def test_praline_patch(client, admin_headers):
    praline = await _praline(client, admin_headers)

    patched = await client.patch(
        f"/api/admin/pralines/{praline['id']}", json={"description": None, "is_vegan": True}, headers=admin_headers
    )
    assert patched.status_code == 200
    assert patched.json()["description"] is None
    assert patched.json()["is_vegan"] is True
    assert patched.json()["name"] == praline["name"]

    rejected = await client.patch(f"/api/admin/pralines/{praline['id']}", json={"name": None}, headers=admin_headers)
    assert rejected.status_code == 422


@pytest.mark.asyncio
async def test_available_years(client, admin_headers):
    await _praline(client, admin_headers, year=2024)

    public = (await client.get("/api/years/available")).json()
    admin = (await client.get("/api/admin/years/available", headers=admin_headers)).json()

    assert public["years"] == [2024, 2025]
    assert public["next_year"] == public["current_year"] + 1
    assert admin == [2024, 2025]


@pytest.mark.asyncio
async def test_metrics_endpoint(client):
    await client.get("/api/health")

    response = await client.get("/metrics")

    assert response.status_code == 200
    assert "tasting_http_requests_total" in response.text


@pytest.mark.asyncio
async def test_first_tasting_walkthrough(client, admin_headers):
    signature = (await _enroll(client, admin_headers))["person_year"]["signature"]
    assert (await client.get(f"/api/rate/{signature}")).json()["progress"] == {"total": 0, "rated": 0, "percentage": 0}

    praline = await _praline(client, admin_headers, name="Trüffel")
    assert (await client.get(f"/api/rate/{signature}")).json()["progress"] == {"total": 1, "rated": 0, "percentage": 0}

    rated = await client.post(f"/api/rate/{signature}/ratings", json={"praline_id": praline["id"], "rating": 4})
    assert rated.json()["action"] == "created"
    assert (await client.get(f"/api/rate/{signature}")).json()["progress"] == {"total": 1, "rated": 1, "percentage": 100}


@pytest.mark.asyncio
@pytest.mark.parametrize("value", [True, "4", 4.5, None])
async def test_non_integer_ratings_are_refused(client, admin_headers, value):
    signature = (await _enroll(client, admin_headers))["person_year"]["signature"]
    praline = await _praline(client, admin_headers)

    response = await client.post(f"/api/rate/{signature}/ratings", json={"praline_id": praline["id"], "rating": value})

    assert response.status_code == 400
    assert response.json()["code"] == "invalid_rating"
    assert (await client.get(f"/api/rate/{signature}")).json()["ratings"] == {}


@pytest.mark.asyncio
async def test_whole_float_rating_is_accepted(client, admin_headers):
    signature = (await _enroll(client, admin_headers))["person_year"]["signature"]
    praline = await _praline(client, admin_headers)

    response = await client.post(f"/api/rate/{signature}/ratings", json={"praline_id": praline["id"], "rating": 4.0})

    assert response.status_code == 200
    assert response.json()["rating"]["rating"] == 4


@pytest.mark.asyncio
async def test_year_is_checked_before_the_body(client, admin_headers):
    enroll = await client.post("/api/admin/years/2019/persons", json={}, headers=admin_headers)
    praline = await client.post("/api/admin/years/2051/pralines", json={"name": ""}, headers=admin_headers)
    participation = await client.patch("/api/admin/years/2020/persons/1/participation", json={}, headers=admin_headers)

    for response in (enroll, praline, participation):
        assert response.status_code == 400
        assert response.json()["code"] == "invalid_range"


@pytest.mark.asyncio
async def test_signature_is_checked_before_the_body(client):
    rating = await client.post("/api/rate/abc/ratings", json={"praline_id": 0, "rating": 4})
    feedback = await client.patch("/api/rate/abcdefg", json={"favorite_chocolate_id": 0})

    for response in (rating, feedback):
        assert response.status_code == 400
        assert response.json()["code"] == "invalid_signature"


@pytest.mark.asyncio
async def test_year_check_still_requires_credentials(client):
    response = await client.post("/api/admin/years/2019/persons", json={})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_no_configuration_snapshot_route(client, admin_headers):
    response = await client.get("/api/admin/config", headers=admin_headers)

    assert response.status_code == 404
