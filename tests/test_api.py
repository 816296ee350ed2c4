"""HTTP route tests - full request flow through FastAPI onto SQLite.

Verifies status-code mapping of domain errors:
    validation 400, not found 404, conflict 409, insufficient data 422
"""

import pytest

TOLERANCE = 1e-3


async def _create_session(client) -> str:
    resp = await client.post("/api/sessions")
    assert resp.status_code == 201, resp.text
    return resp.json()["token"]


async def _seed(client, token):
    """TEST01/TEST02 work packages, Tigger and Rabbit, two TEST01 estimates."""
    for wp in ({"id": "TEST01"}, {"id": "TEST02", "summary": "some test"}):
        resp = await client.post(f"/api/sessions/{token}/work-packages", json=wp)
        assert resp.status_code == 201, resp.text
    for name in ("Tigger", "Rabbit"):
        resp = await client.post(f"/api/sessions/{token}/users", json={"name": name})
        assert resp.status_code == 201, resp.text
    for user, b, m, w in (("Tigger", 0.5, 1.0, 2.0), ("Rabbit", 1.0, 1.2, 2.0)):
        resp = await client.post(
            f"/api/sessions/{token}/estimates",
            json={
                "work_package_id": "TEST01", "user_name": user,
                "best_case": b, "most_likely_case": m, "worst_case": w,
            },
        )
        assert resp.status_code == 201, resp.text


# =====================================================================
# Happy path
# =====================================================================


class TestSessionFlow:

    @pytest.mark.asyncio
    async def test_create_session(self, client):
        resp = await client.post("/api/sessions")
        body = resp.json()
        assert resp.status_code == 201
        assert len(body["token"]) == 32
        assert body["route"] == f"/sessions/{body['token']}"

    @pytest.mark.asyncio
    async def test_scenario(self, client):
        token = await _create_session(client)
        await _seed(client, token)

        users = (await client.get(f"/api/sessions/{token}/users")).json()
        assert users == ["Tigger", "Rabbit"]

        wps = (await client.get(f"/api/sessions/{token}/work-packages")).json()
        assert [wp["summary"] for wp in wps] == ["", "some test"]

        ests = (await client.get(f"/api/sessions/{token}/estimates")).json()
        assert [e["user_name"] for e in ests] == ["Tigger", "Rabbit"]

        resp = await client.get(
            f"/api/sessions/{token}/estimates/TEST01/users/distance"
        )
        assert resp.json() == {"first": "Rabbit", "last": "Tigger"}

    @pytest.mark.asyncio
    async def test_average_estimate(self, client):
        token = await _create_session(client)
        await _seed(client, token)

        body = (await client.get(f"/api/sessions/{token}/estimates/TEST01")).json()
        assert abs(body["effort"] - 1.1917) <= TOLERANCE
        assert abs(body["standard_deviation"] - 0.2083) <= TOLERANCE
        assert body["missing_users"] == []
        assert body["hint"] is None

    @pytest.mark.asyncio
    async def test_average_estimate_warns_about_missing_users(self, client):
        token = await _create_session(client)
        await _seed(client, token)
        await client.post(f"/api/sessions/{token}/users", json={"name": "Piglet"})

        body = (await client.get(f"/api/sessions/{token}/estimates/TEST01")).json()
        assert body["missing_users"] == ["Piglet"]
        assert body["hint"] == "not all users did provide estimates"

    @pytest.mark.asyncio
    async def test_set_and_reset_work_package_estimate(self, client):
        token = await _create_session(client)
        await _seed(client, token)
        url = f"/api/sessions/{token}/work-packages/TEST01/estimate"

        resp = await client.put(url, json={"effort": 1.19, "standard_deviation": 0.21})
        assert resp.status_code == 204
        wp = (await client.get(f"/api/sessions/{token}/work-packages")).json()[0]
        assert (wp["effort"], wp["standard_deviation"]) == (1.19, 0.21)

        assert (await client.delete(url)).status_code == 204
        wp = (await client.get(f"/api/sessions/{token}/work-packages")).json()[0]
        assert (wp["effort"], wp["standard_deviation"]) == (0, 0)

    @pytest.mark.asyncio
    async def test_removals(self, client):
        token = await _create_session(client)
        await _seed(client, token)

        resp = await client.delete(f"/api/sessions/{token}/estimates/Tigger/TEST01")
        assert resp.status_code == 204
        resp = await client.delete(f"/api/sessions/{token}/users/Tigger")
        assert resp.status_code == 204
        resp = await client.delete(f"/api/sessions/{token}/work-packages/TEST02")
        assert resp.status_code == 204
        resp = await client.delete(f"/api/sessions/{token}")
        assert resp.status_code == 204
        resp = await client.get(f"/api/sessions/{token}/users")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_docs_and_health(self, client):
        docs = (await client.get("/api/docs")).json()
        assert {"name": "Swagger", "url": "/api/swagger"} in docs
        assert (await client.get("/health")).json() == {"status": "ok"}


# =====================================================================
# Error mapping
# =====================================================================


class TestErrorMapping:

    @pytest.mark.asyncio
    async def test_short_token_is_400(self, client):
        resp = await client.get("/api/sessions/abcde/users")
        assert resp.status_code == 400
        assert "desired length" in resp.json()["detail"]

    @pytest.mark.asyncio
    async def test_unknown_session_is_404(self, client):
        resp = await client.get(f"/api/sessions/{'0' * 32}/estimates")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_duplicate_user_is_409(self, client):
        token = await _create_session(client)
        await _seed(client, token)
        resp = await client.post(f"/api/sessions/{token}/users", json={"name": "Tigger"})
        assert resp.status_code == 409

    @pytest.mark.asyncio
    async def test_invalid_triple_is_400(self, client):
        token = await _create_session(client)
        await _seed(client, token)
        resp = await client.post(
            f"/api/sessions/{token}/estimates",
            json={
                "work_package_id": "TEST02", "user_name": "Tigger",
                "best_case": 3, "most_likely_case": 2, "worst_case": 4,
            },
        )
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_estimate_for_unknown_user_is_404(self, client):
        token = await _create_session(client)
        await _seed(client, token)
        resp = await client.post(
            f"/api/sessions/{token}/estimates",
            json={
                "work_package_id": "TEST02", "user_name": "Piglet",
                "best_case": 1, "most_likely_case": 2, "worst_case": 3,
            },
        )
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_no_estimates_is_422(self, client):
        token = await _create_session(client)
        await _seed(client, token)
        resp = await client.get(
            f"/api/sessions/{token}/estimates/TEST02/users/distance"
        )
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_non_finite_numbers_are_422_and_not_stored(self, client):
        token = await _create_session(client)
        await _seed(client, token)
        # Bare NaN / Infinity literals, as Python json.dumps writes them
        resp = await client.post(
            f"/api/sessions/{token}/estimates",
            content=(
                '{"work_package_id": "TEST02", "user_name": "Tigger",'
                ' "best_case": NaN, "most_likely_case": NaN, "worst_case": NaN}'
            ),
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 422
        resp = await client.put(
            f"/api/sessions/{token}/work-packages/TEST02/estimate",
            content='{"effort": Infinity, "standard_deviation": 0}',
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 422

        ests = (await client.get(f"/api/sessions/{token}/estimates")).json()
        assert [e["work_package_id"] for e in ests] == ["TEST01", "TEST01"]
        wps = (await client.get(f"/api/sessions/{token}/work-packages")).json()
        assert wps[1]["effort"] == 0
