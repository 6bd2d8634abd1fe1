"""
Notes API — HTTP Endpoint Tests
=================================

What:  End-to-end tests of the /notes routes through the ASGI app.
How:   HTTPX AsyncClient + in-memory store (see conftest.py).

What we test:
    ✅ Create → get → delete → get walkthrough
    ✅ List is {} when empty and keyed by generated ids after creates
    ✅ PUT is a full replace and creates missing notes
    ✅ DELETE is idempotent
    ✅ Malformed bodies give 400 and leave the store untouched
    ✅ Store failures map to 500 with the store's message (404 for get)
    ✅ Access log lines carry the error code, level by status
"""

import logging

import pytest

from app import exceptions


async def _create(client, title="A", content="B"):
    response = await client.post("/notes", json={"title": title, "content": content})
    assert response.status_code == 201
    return response.json()


class TestCreateAndGet:

    @pytest.mark.asyncio
    async def test_create_get_delete_walkthrough(self, test_client):
        response = await test_client.post("/notes", json={"title": "A", "content": "B"})
        assert response.status_code == 201
        created = response.json()
        note_id = created["id"]
        assert note_id
        assert created == {"id": note_id, "title": "A", "content": "B"}

        response = await test_client.get(f"/notes/{note_id}")
        assert response.status_code == 200
        assert response.json() == created

        response = await test_client.delete(f"/notes/{note_id}")
        assert response.status_code == 204
        assert response.content == b""

        response = await test_client.get(f"/notes/{note_id}")
        assert response.status_code == 404
        assert response.json()["message"] == "Note not found"

    @pytest.mark.asyncio
    async def test_create_assigns_fresh_ids(self, test_client):
        ids = {(await _create(test_client, title=str(i)))["id"] for i in range(3)}
        assert len(ids) == 3

    @pytest.mark.asyncio
    async def test_create_ignores_client_id(self, test_client, memory_store):
        response = await test_client.post(
            "/notes", json={"id": "chosen", "title": "A", "content": "B"}
        )
        assert response.status_code == 201
        note_id = response.json()["id"]
        assert note_id != "chosen"
        assert "chosen" not in memory_store.tree["notes"]
        assert memory_store.tree["notes"][note_id]["id"] == note_id

    @pytest.mark.asyncio
    async def test_create_with_missing_fields_defaults_to_empty(self, test_client):
        response = await test_client.post("/notes", json={"title": "only"})
        assert response.status_code == 201
        assert response.json()["content"] == ""

    @pytest.mark.asyncio
    async def test_get_unknown_id(self, test_client):
        response = await test_client.get("/notes/-Nnope")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


class TestList:

    @pytest.mark.asyncio
    async def test_list_empty(self, test_client):
        response = await test_client.get("/notes")
        assert response.status_code == 200
        assert response.json() == {}

    @pytest.mark.asyncio
    async def test_list_after_creates(self, test_client):
        created = [await _create(test_client, title=f"n{i}") for i in range(3)]

        response = await test_client.get("/notes")
        assert response.status_code == 200
        body = response.json()
        assert set(body) == {note["id"] for note in created}
        for note in created:
            assert body[note["id"]] == note


class TestUpdate:

    @pytest.mark.asyncio
    async def test_update_replaces_all_fields(self, test_client):
        note = await _create(test_client, title="old", content="keep?")

        response = await test_client.put(f"/notes/{note['id']}", json={"title": "new"})
        assert response.status_code == 200
        assert response.json() == {"id": note["id"], "title": "new", "content": ""}

        response = await test_client.get(f"/notes/{note['id']}")
        assert response.json() == {"id": note["id"], "title": "new", "content": ""}

    @pytest.mark.asyncio
    async def test_update_missing_note_creates_it(self, test_client):
        response = await test_client.put("/notes/-Nfresh", json={"title": "t", "content": "c"})
        assert response.status_code == 200

        response = await test_client.get("/notes/-Nfresh")
        assert response.status_code == 200
        assert response.json() == {"id": "-Nfresh", "title": "t", "content": "c"}

    @pytest.mark.asyncio
    async def test_update_uses_path_id(self, test_client, memory_store):
        note = await _create(test_client)

        response = await test_client.put(
            f"/notes/{note['id']}", json={"id": "elsewhere", "title": "x", "content": "y"}
        )
        assert response.status_code == 200
        assert response.json()["id"] == note["id"]
        assert "elsewhere" not in memory_store.tree["notes"]


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, test_client):
        note = await _create(test_client)

        for _ in range(2):
            response = await test_client.delete(f"/notes/{note['id']}")
            assert response.status_code == 204
            response = await test_client.get(f"/notes/{note['id']}")
            assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_never_existing_note(self, test_client):
        response = await test_client.delete("/notes/-Nghost")
        assert response.status_code == 204


class TestMalformedBodies:

    @pytest.mark.asyncio
    async def test_create_with_invalid_json(self, test_client, memory_store):
        response = await test_client.post(
            "/notes", content=b'{"title": "A",', headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["message"]
        assert memory_store.tree == {}

    @pytest.mark.asyncio
    async def test_create_with_wrong_field_type(self, test_client, memory_store):
        response = await test_client.post("/notes", json={"title": ["not", "a", "string"]})
        assert response.status_code == 400
        assert "title" in response.json()["message"]
        assert memory_store.tree == {}

    @pytest.mark.asyncio
    async def test_update_with_invalid_json_leaves_note(self, test_client, memory_store):
        note = await _create(test_client, title="A", content="B")

        response = await test_client.put(
            f"/notes/{note['id']}", content=b"not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert memory_store.tree["notes"][note["id"]] == note

    @pytest.mark.asyncio
    async def test_create_with_undecodable_plain_text_body(self, test_client, memory_store):
        response = await test_client.post(
            "/notes", content=b"\xff\xfe", headers={"Content-Type": "text/plain"}
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert all("input" not in detail for detail in body["details"])
        assert memory_store.tree == {}


class TestStoreFailures:

    @pytest.mark.asyncio
    async def test_create_store_error_is_500_with_message(self, test_client, memory_store):
        memory_store.fail_with = "Permission denied"
        response = await test_client.post("/notes", json={"title": "A", "content": "B"})
        assert response.status_code == 500
        assert response.json()["error"] == "store_error"
        assert response.json()["message"] == "Permission denied"

    @pytest.mark.asyncio
    async def test_list_store_error_is_500(self, test_client, memory_store):
        memory_store.fail_with = "network unreachable"
        response = await test_client.get("/notes")
        assert response.status_code == 500
        assert response.json()["message"] == "network unreachable"

    @pytest.mark.asyncio
    async def test_get_store_error_is_404(self, test_client, memory_store):
        memory_store.fail_with = "timeout"
        response = await test_client.get("/notes/-Na")
        assert response.status_code == 404
        assert response.json()["message"] == "Note not found"

    @pytest.mark.asyncio
    async def test_update_and_delete_store_errors_are_500(self, test_client, memory_store):
        memory_store.fail_with = "write rejected"
        response = await test_client.put("/notes/-Na", json={"title": "x"})
        assert response.status_code == 500
        response = await test_client.delete("/notes/-Na")
        assert response.status_code == 500
        assert response.json()["message"] == "write rejected"


class TestHealthAndHeaders:

    @pytest.mark.asyncio
    async def test_health_reports_store_status(self, test_client, memory_store):
        response = await test_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

        memory_store.fail_with = "down"
        response = await test_client.get("/health")
        assert response.json()["status"] == "unhealthy"
        assert response.json()["database"] == "disconnected"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/notes", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_cors_preflight_allows_any_origin(self, test_client):
        response = await test_client.options(
            "/notes",
            headers={
                "Origin": "http://example.com",
                "Access-Control-Request-Method": "PUT",
            },
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        assert "PUT" in response.headers["access-control-allow-methods"]


class TestAccessLog:

    @pytest.mark.asyncio
    async def test_success_logged_at_info_without_error_code(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="notes_api.access")
        await test_client.get("/notes", headers={"X-Request-ID": "req-ok"})

        (record,) = [r for r in caplog.records if r.name == "notes_api.access"]
        assert record.levelno == logging.INFO
        assert record.getMessage().startswith("GET /notes -> 200 in ")
        assert "[req-ok]" in record.getMessage()

    @pytest.mark.asyncio
    async def test_store_failure_logged_as_store_error(self, test_client, memory_store, caplog):
        caplog.set_level(logging.INFO, logger="notes_api.access")
        memory_store.fail_with = "write rejected"
        await test_client.put("/notes/-Na", json={"title": "x"})

        (record,) = [r for r in caplog.records if r.name == "notes_api.access"]
        assert record.levelno == logging.ERROR
        assert record.getMessage().startswith("PUT /notes/-Na -> 500 store_error in ")

    @pytest.mark.asyncio
    async def test_missing_note_logged_as_not_found(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="notes_api.access")
        await test_client.get("/notes/-Nmissing")

        (record,) = [r for r in caplog.records if r.name == "notes_api.access"]
        assert record.levelno == logging.WARNING
        assert "404 not_found" in record.getMessage()

    @pytest.mark.asyncio
    async def test_bad_body_logged_as_validation_error(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="notes_api.access")
        await test_client.post("/notes", content=b"{", headers={"Content-Type": "application/json"})

        (record,) = [r for r in caplog.records if r.name == "notes_api.access"]
        assert "400 validation_error" in record.getMessage()

    @pytest.mark.asyncio
    async def test_health_not_logged(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="notes_api.access")
        await test_client.get("/health")
        assert not [r for r in caplog.records if r.name == "notes_api.access"]


class TestErrorTaxonomy:

    def test_every_app_error_class_has_a_handler(self):
        from app.main import create_app

        handlers = create_app().exception_handlers
        error_classes = {
            obj
            for obj in vars(exceptions).values()
            if isinstance(obj, type) and issubclass(obj, exceptions.NotesAPIError)
        }
        assert error_classes == {
            exceptions.NotesAPIError,
            exceptions.NotFoundError,
            exceptions.StoreError,
        }
        assert error_classes <= set(handlers)

    @pytest.mark.asyncio
    async def test_body_errors_use_the_request_validation_handler(self, test_client):
        response = await test_client.post("/notes", json={"content": 5})
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["details"][0]["loc"] == ["body", "content"]
