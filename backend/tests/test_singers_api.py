"""
Singers API — Embedded Model Endpoint Tests
=============================================

What:  HTTP behavior of /singers and /singer/{id} with embedded band members.
How:   HTTPX AsyncClient over ASGITransport against a per-test SQLite file.

What we test:
    ✅ Create → get round trip with identical fields
    ✅ Empty list answers 400 "No documents in database"
    ✅ Merge-patch, delete, and the 200 null answers for missing ids
    ✅ Validation errors, bad ids, database errors: exactly one 400 each
    ✅ Explicit nulls in create bodies are validation errors
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest

from app.database import DbResult
from app.services.singer_service import embedded_singer_service


async def _create(client, payload):
    response = await client.post("/singer", json=payload)
    assert response.status_code == 200, response.text
    return response.json()["document"]


class TestCreateSinger:

    @pytest.mark.asyncio
    async def test_create_returns_envelope(self, embedded_client):
        payload = {
            "artistname": "Queen",
            "band_members": [{"singer_name": "Freddie", "instruments": ["vocals"]}],
        }

        response = await embedded_client.post("/singer", json=payload)

        assert response.status_code == 200
        body = response.json()
        assert body["document"]["artistname"] == "Queen"
        assert body["document"]["band_members"] == payload["band_members"]
        assert body["msg"] == "Successfully inserted Data!!!"
        assert body["error"] is None
        assert body["result"] == {"acknowledged": True, "inserted_id": body["document"]["_id"]}

    @pytest.mark.asyncio
    async def test_created_document_is_retrievable(self, embedded_client, queen_payload):
        document = await _create(embedded_client, queen_payload)

        response = await embedded_client.get(f"/singer/{document['_id']}")

        assert response.status_code == 200
        assert response.json() == document

    @pytest.mark.asyncio
    async def test_missing_artistname_returns_validation_error(self, embedded_client):
        response = await embedded_client.post("/singer", json={"band_members": []})

        assert response.status_code == 400
        body = response.json()
        assert body["name"] == "ValidationError"
        assert body["details"][0]["path"] == ["artistname"]
        assert body["details"][0]["type"] == "missing"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "band_members",
        [None, [{"singer_name": None, "instruments": None}], [{"instruments": None}]],
    )
    async def test_null_band_members_rejected(self, embedded_client, band_members):
        response = await embedded_client.post(
            "/singer", json={"artistname": "Q", "band_members": band_members}
        )

        assert response.status_code == 400
        assert response.json()["name"] == "ValidationError"
        assert "may not be null" in response.json()["message"]
        assert (await embedded_client.get("/singers")).status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_field_rejected(self, embedded_client):
        response = await embedded_client.post("/singer", json={"artistname": "Queen", "label": "EMI"})

        assert response.status_code == 400
        assert response.json()["details"][0]["path"] == ["label"]

    @pytest.mark.asyncio
    async def test_malformed_json_is_400(self, embedded_client):
        response = await embedded_client.post(
            "/singer",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert "error" in response.json()

    @pytest.mark.asyncio
    async def test_insert_failure_forwarded_to_error_handler(self, embedded_client):
        failing = AsyncMock(return_value=DbResult(error="duplicate key"))
        with patch.object(embedded_singer_service, "create_singer", failing):
            response = await embedded_client.post("/singer", json={"artistname": "Queen"})

        assert response.status_code == 400
        assert response.json() == {"error": {"message": "Failed to insert Document"}}


class TestReadSingers:

    @pytest.mark.asyncio
    async def test_list_on_empty_collection_is_400(self, embedded_client):
        response = await embedded_client.get("/singers")

        assert response.status_code == 400
        assert response.json() == {"error": "No documents in database"}

    @pytest.mark.asyncio
    async def test_list_returns_all_documents(self, embedded_client, queen_payload):
        queen = await _create(embedded_client, queen_payload)
        abba = await _create(embedded_client, {"artistname": "ABBA"})

        response = await embedded_client.get("/singers")

        assert response.status_code == 200
        assert response.json() == [queen, abba]

    @pytest.mark.asyncio
    async def test_get_unknown_id_is_400(self, embedded_client):
        response = await embedded_client.get(f"/singer/{uuid.uuid4()}")

        assert response.status_code == 400
        assert response.json() == {"error": "No documents in database"}

    @pytest.mark.asyncio
    async def test_get_malformed_id_is_400(self, embedded_client):
        response = await embedded_client.get("/singer/not-an-id")

        assert response.status_code == 400
        assert response.json() == {"error": "'not-an-id' is not a valid document id"}

    @pytest.mark.asyncio
    async def test_database_error_sends_single_400(self, embedded_client):
        failing = AsyncMock(return_value=DbResult(error="connection lost"))
        with patch.object(embedded_singer_service, "list_singers", failing):
            response = await embedded_client.get("/singers")

        assert response.status_code == 400
        assert response.json() == {"error": "connection lost"}
        failing.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_refused_connection_is_400(self, unreachable_client):
        response = await unreachable_client.get("/singers")

        assert response.status_code == 400
        assert response.json() == {"error": "[Errno 111] Connection refused"}

    @pytest.mark.asyncio
    async def test_refused_connection_on_insert_is_insert_failure(self, unreachable_client):
        response = await unreachable_client.post("/singer", json={"artistname": "Queen"})

        assert response.status_code == 400
        assert response.json() == {"error": {"message": "Failed to insert Document"}}


class TestUpdateSinger:

    @pytest.mark.asyncio
    async def test_patch_overwrites_only_given_fields(self, embedded_client, queen_payload):
        document = await _create(embedded_client, queen_payload)

        response = await embedded_client.patch(
            f"/singer/{document['_id']}", json={"artistname": "Queen + Adam Lambert"}
        )

        assert response.status_code == 200
        updated = response.json()
        assert updated["artistname"] == "Queen + Adam Lambert"
        assert updated["band_members"] == queen_payload["band_members"]
        assert updated["_id"] == document["_id"]

        fetched = await embedded_client.get(f"/singer/{document['_id']}")
        assert fetched.json() == updated

    @pytest.mark.asyncio
    async def test_patch_replaces_band_members(self, embedded_client, queen_payload):
        document = await _create(embedded_client, queen_payload)
        members = [{"singer_name": "Roger", "instruments": ["drums"]}]

        response = await embedded_client.patch(
            f"/singer/{document['_id']}", json={"band_members": members}
        )

        assert response.json()["band_members"] == members
        assert response.json()["artistname"] == "Queen"

    @pytest.mark.asyncio
    async def test_patch_unknown_id_returns_null(self, embedded_client):
        response = await embedded_client.patch(f"/singer/{uuid.uuid4()}", json={"artistname": "X"})

        assert response.status_code == 200
        assert response.json() is None

    @pytest.mark.asyncio
    async def test_patch_null_artistname_rejected(self, embedded_client, queen_payload):
        document = await _create(embedded_client, queen_payload)

        response = await embedded_client.patch(
            f"/singer/{document['_id']}", json={"artistname": None}
        )

        assert response.status_code == 400
        assert response.json()["name"] == "ValidationError"


class TestDeleteSinger:

    @pytest.mark.asyncio
    async def test_delete_returns_document_then_get_fails(self, embedded_client, queen_payload):
        document = await _create(embedded_client, queen_payload)

        response = await embedded_client.delete(f"/singer/{document['_id']}")
        assert response.status_code == 200
        assert response.json() == document

        again = await embedded_client.get(f"/singer/{document['_id']}")
        assert again.status_code == 400
        assert again.json() == {"error": "No documents in database"}

    @pytest.mark.asyncio
    async def test_delete_unknown_id_returns_null(self, embedded_client):
        response = await embedded_client.delete(f"/singer/{uuid.uuid4()}")

        assert response.status_code == 200
        assert response.json() is None
