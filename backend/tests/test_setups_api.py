"""
Setups API - Endpoint Tests
=============================

What:  HTTP contract of the /setups endpoints, through the full app
       (middleware, dependencies, exception handlers) on in-memory SQLite.

What we test:
    ✅ Status codes and envelopes for all five endpoints
    ✅ 401 for missing / non-Bearer / unknown tokens, before any lookup
    ✅ 404 (never 403) for unknown or malformed ids
    ✅ 403 for non-owners, record left unchanged
    ✅ Owner forced on create, ignored on update
    ✅ Blank fields stripped on update
    ✅ 422 for malformed payloads, only after the auth, lookup and ownership gates
    ✅ 500 bodies don't leak exception text
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest

from setups_api.exceptions import DatabaseError


async def _create(client, auth, user="alice", **fields):
    fields.setdefault("title", "t")
    response = await client.post("/setups", json={"setup": fields}, headers=auth(user))
    assert response.status_code == 201, response.text
    return response.json()["setup"]


class TestListSetups:

    @pytest.mark.asyncio
    async def test_list_is_public_and_returns_all(self, client, auth):
        a = await _create(client, auth, "alice", title="a")
        b = await _create(client, auth, "bob", title="b")

        response = await client.get("/setups")

        assert response.status_code == 200
        setups = response.json()["setups"]
        assert sorted(s["id"] for s in setups) == sorted([a["id"], b["id"]])
        assert {s["title"] for s in setups} == {"a", "b"}

    @pytest.mark.asyncio
    async def test_list_empty(self, client):
        response = await client.get("/setups")
        assert response.status_code == 200
        assert response.json() == {"setups": []}


class TestGetSetup:

    @pytest.mark.asyncio
    async def test_get_returns_setup(self, client, auth, users):
        created = await _create(client, auth, title="Open G", tuning="DGDGBD")

        response = await client.get(f"/setups/{created['id']}", headers=auth("bob"))

        assert response.status_code == 200
        setup = response.json()["setup"]
        assert setup["id"] == created["id"]
        assert setup["title"] == "Open G"
        assert setup["tuning"] == "DGDGBD"
        assert setup["owner"] == str(users["alice"].id)

    @pytest.mark.asyncio
    async def test_get_requires_token(self, client, auth):
        created = await _create(client, auth)

        response = await client.get(f"/setups/{created['id']}")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["error"] == "unauthorized"

    @pytest.mark.asyncio
    async def test_get_rejects_unknown_token(self, client, auth):
        created = await _create(client, auth)

        response = await client.get(
            f"/setups/{created['id']}", headers={"Authorization": "Bearer not-a-real-token"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_get_rejects_non_bearer_scheme(self, client, auth):
        created = await _create(client, auth)

        response = await client.get(
            f"/setups/{created['id']}", headers={"Authorization": "Basic YWxpY2U6cHc="}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_get_unknown_id(self, client, auth):
        response = await client.get(f"/setups/{uuid.uuid4()}", headers=auth("alice"))

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_get_malformed_id(self, client, auth):
        response = await client.get("/setups/5a7db6c74d55bc51bdf39793", headers=auth("alice"))
        assert response.status_code == 404


class TestCreateSetup:

    @pytest.mark.asyncio
    async def test_create_returns_201_with_owner(self, client, auth, users, load_setup):
        response = await client.post(
            "/setups", json={"setup": {"title": "t", "pickups": "humbucker"}}, headers=auth("alice")
        )

        assert response.status_code == 201
        setup = response.json()["setup"]
        assert setup["owner"] == str(users["alice"].id)
        assert setup["title"] == "t"
        assert setup["pickups"] == "humbucker"
        assert {"id", "created_at", "updated_at"} <= set(setup)

        stored = await load_setup(setup["id"])
        assert stored.owner == str(users["alice"].id)

    @pytest.mark.asyncio
    async def test_create_ignores_client_owner(self, client, auth, users, load_setup):
        response = await client.post(
            "/setups",
            json={"setup": {"title": "t", "owner": str(users["bob"].id)}},
            headers=auth("alice"),
        )

        assert response.status_code == 201
        setup = response.json()["setup"]
        assert setup["owner"] == str(users["alice"].id)
        stored = await load_setup(setup["id"])
        assert stored.owner == str(users["alice"].id)
        assert "owner" not in stored.document

    @pytest.mark.asyncio
    async def test_create_requires_token(self, client):
        response = await client.post("/setups", json={"setup": {"title": "t"}})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_create_auth_checked_before_payload(self, client):
        response = await client.post("/setups", json={"nope": 1})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_create_auth_checked_before_json_parsing(self, client):
        response = await client.post(
            "/setups", content=b"{bad", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_create_invalid_json(self, client, auth):
        response = await client.post(
            "/setups",
            content=b"{bad",
            headers={**auth("alice"), "Content-Type": "application/json"},
        )
        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"setup": "not an object"},
            {"setup": {}},
            {"setup": {"title": ""}},
            {"setup": {"title": 42}},
        ],
    )
    async def test_create_malformed_payload(self, client, auth, body):
        response = await client.post("/setups", json=body, headers=auth("alice"))

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"


class TestUpdateSetup:

    @pytest.mark.asyncio
    async def test_owner_update_returns_204(self, client, auth, load_setup):
        created = await _create(client, auth, title="old", strings=6)

        response = await client.patch(
            f"/setups/{created['id']}", json={"setup": {"title": "x"}}, headers=auth("alice")
        )

        assert response.status_code == 204
        assert response.content == b""
        stored = await load_setup(created["id"])
        assert stored.document == {"title": "x", "strings": 6}

    @pytest.mark.asyncio
    async def test_blank_title_is_ignored(self, client, auth, load_setup):
        created = await _create(client, auth, title="keep me")

        response = await client.patch(
            f"/setups/{created['id']}", json={"setup": {"title": ""}}, headers=auth("alice")
        )

        assert response.status_code == 204
        stored = await load_setup(created["id"])
        assert stored.document["title"] == "keep me"

    @pytest.mark.asyncio
    async def test_falsy_values_are_not_blank(self, client, auth, load_setup):
        created = await _create(client, auth, title="t", capo=3, active=True)

        response = await client.patch(
            f"/setups/{created['id']}",
            json={"setup": {"capo": 0, "active": False}},
            headers=auth("alice"),
        )

        assert response.status_code == 204
        stored = await load_setup(created["id"])
        assert stored.document == {"title": "t", "capo": 0, "active": False}

    @pytest.mark.asyncio
    async def test_owner_field_is_discarded(self, client, auth, users, load_setup):
        created = await _create(client, auth)

        response = await client.patch(
            f"/setups/{created['id']}",
            json={"setup": {"owner": str(users["bob"].id), "title": "mine"}},
            headers=auth("alice"),
        )

        assert response.status_code == 204
        stored = await load_setup(created["id"])
        assert stored.owner == str(users["alice"].id)
        assert stored.document == {"title": "mine"}

    @pytest.mark.asyncio
    async def test_non_owner_gets_403_and_record_unchanged(self, client, auth, load_setup):
        created = await _create(client, auth, title="original")

        response = await client.patch(
            f"/setups/{created['id']}", json={"setup": {"title": "hijacked"}}, headers=auth("bob")
        )

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"
        stored = await load_setup(created["id"])
        assert stored.document["title"] == "original"

    @pytest.mark.asyncio
    async def test_unknown_id_is_404_not_403(self, client, auth):
        response = await client.patch(
            f"/setups/{uuid.uuid4()}", json={"setup": {"title": "x"}}, headers=auth("bob")
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_id_with_invalid_body_is_404(self, client, auth):
        response = await client.patch(
            f"/setups/{uuid.uuid4()}", json={"setup": {"title": None}}, headers=auth("bob")
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_non_owner_with_invalid_body_is_403(self, client, auth, load_setup):
        created = await _create(client, auth, title="original")

        response = await client.patch(
            f"/setups/{created['id']}", json={"setup": {"title": None}}, headers=auth("bob")
        )

        assert response.status_code == 403
        stored = await load_setup(created["id"])
        assert stored.document["title"] == "original"

    @pytest.mark.asyncio
    async def test_requires_token(self, client, auth):
        created = await _create(client, auth)

        response = await client.patch(f"/setups/{created['id']}", json={"setup": {"title": "x"}})
        assert response.status_code == 401

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"title": "x"},
            {"setup": ["x"]},
            {"setup": {"title": None}},
        ],
    )
    async def test_malformed_payload(self, client, auth, body):
        created = await _create(client, auth)

        response = await client.patch(f"/setups/{created['id']}", json=body, headers=auth("alice"))

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_invalid_json(self, client, auth):
        created = await _create(client, auth)

        response = await client.patch(
            f"/setups/{created['id']}",
            content=b"{not json",
            headers={**auth("alice"), "Content-Type": "application/json"},
        )
        assert response.status_code == 422


class TestDeleteSetup:

    @pytest.mark.asyncio
    async def test_owner_delete_returns_204(self, client, auth, load_setup):
        created = await _create(client, auth)

        response = await client.delete(f"/setups/{created['id']}", headers=auth("alice"))

        assert response.status_code == 204
        assert response.content == b""
        assert await load_setup(created["id"]) is None

    @pytest.mark.asyncio
    async def test_non_owner_gets_403_and_record_kept(self, client, auth, load_setup):
        created = await _create(client, auth)

        response = await client.delete(f"/setups/{created['id']}", headers=auth("bob"))

        assert response.status_code == 403
        assert await load_setup(created["id"]) is not None

    @pytest.mark.asyncio
    async def test_unknown_id_is_404_not_403(self, client, auth):
        response = await client.delete(f"/setups/{uuid.uuid4()}", headers=auth("bob"))
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_requires_token(self, client, auth):
        created = await _create(client, auth)

        response = await client.delete(f"/setups/{created['id']}")
        assert response.status_code == 401


class TestOwnershipScenario:

    @pytest.mark.asyncio
    async def test_create_delete_lifecycle(self, client, auth, users):
        response = await client.post("/setups", json={"setup": {"title": "t"}}, headers=auth("alice"))
        assert response.status_code == 201
        setup = response.json()["setup"]
        assert setup["owner"] == str(users["alice"].id)
        url = f"/setups/{setup['id']}"

        assert (await client.delete(url, headers=auth("bob"))).status_code == 403
        assert (await client.delete(url, headers=auth("alice"))).status_code == 204
        assert (await client.get(url, headers=auth("alice"))).status_code == 404


class TestErrorFunnel:

    @pytest.mark.asyncio
    async def test_unexpected_error_does_not_leak(self, client):
        with patch(
            "setups_api.routes.setups.setup_service.list_setups",
            new=AsyncMock(side_effect=RuntimeError("secret internal detail")),
        ):
            response = await client.get("/setups", headers={"X-Request-ID": "trace-500"})

        assert response.status_code == 500
        assert response.json()["error"] == "internal_server_error"
        assert response.headers["X-Request-ID"] == "trace-500"
        assert response.json()["request_id"] == "trace-500"
        assert "secret internal detail" not in response.text

    @pytest.mark.asyncio
    async def test_database_error_is_generic_500(self, client):
        with patch(
            "setups_api.routes.setups.setup_service.list_setups",
            new=AsyncMock(side_effect=DatabaseError(context={"sql": "SELECT password"})),
        ):
            response = await client.get("/setups")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "password" not in response.text

    @pytest.mark.asyncio
    async def test_error_body_carries_request_id(self, client, auth):
        response = await client.get(
            f"/setups/{uuid.uuid4()}",
            headers={**auth("alice"), "X-Request-ID": "trace-123"},
        )

        assert response.status_code == 404
        assert response.headers["X-Request-ID"] == "trace-123"
        assert response.json()["request_id"] == "trace-123"
