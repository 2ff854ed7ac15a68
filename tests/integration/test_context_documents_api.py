"""Tests for context document endpoints."""

from uuid import uuid4

import pytest

BASE = "/api/v1/context-documents"


class TestContextDocumentsAPI:
    """CRUD tests for /context-documents."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, client, sample_document_data):
        created = await client.post(BASE, json=sample_document_data)

        assert created.status_code == 201
        document_id = created.json()["id"]

        response = await client.get(f"{BASE}/{document_id}")
        data = response.json()
        assert data["type"] == "adr"
        assert data["tags"] == ["logging", "privacy"]
        assert data["metadata"] == {"owner": "platform-team"}

    @pytest.mark.asyncio
    async def test_invalid_type(self, client, sample_document_data):
        response = await client.post(BASE, json={**sample_document_data, "type": "wiki"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_list_filters(self, client, sample_document_data):
        await client.post(BASE, json=sample_document_data)
        await client.post(BASE, json={
            "title": "Naming conventions",
            "type": "best_practice",
            "content": "Classes end with Governor.",
            "tags": ["naming"],
        })

        by_type = (await client.get(BASE, params={"type": "best_practice"})).json()
        by_tag = (await client.get(BASE, params={"tag": "privacy"})).json()
        everything = (await client.get(BASE)).json()

        assert [d["title"] for d in by_type["data"]] == ["Naming conventions"]
        assert [d["title"] for d in by_tag["data"]] == ["ADR-012 Logging utilities"]
        assert everything["pagination"]["total"] == 2

    @pytest.mark.asyncio
    async def test_update(self, client, sample_document_data):
        document_id = (await client.post(BASE, json=sample_document_data)).json()["id"]

        response = await client.patch(f"{BASE}/{document_id}", json={"tags": ["privacy", "pii"]})

        assert response.status_code == 200
        assert response.json()["tags"] == ["privacy", "pii"]
        assert response.json()["content"] == sample_document_data["content"]

    @pytest.mark.asyncio
    async def test_empty_update(self, client, sample_document_data):
        created = (await client.post(BASE, json=sample_document_data)).json()

        response = await client.patch(f"{BASE}/{created['id']}", json={})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "BAD_REQUEST"
        unchanged = (await client.get(f"{BASE}/{created['id']}")).json()
        assert unchanged["updated_at"] == created["updated_at"]

    @pytest.mark.asyncio
    async def test_delete(self, client, sample_document_data):
        document_id = (await client.post(BASE, json=sample_document_data)).json()["id"]

        assert (await client.delete(f"{BASE}/{document_id}")).status_code == 204
        assert (await client.get(f"{BASE}/{document_id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_missing_document(self, client):
        assert (await client.get(f"{BASE}/{uuid4()}")).status_code == 404
        assert (await client.patch(f"{BASE}/{uuid4()}", json={"title": "x"})).status_code == 404

    @pytest.mark.asyncio
    async def test_documents_do_not_touch_audit_trail(self, client, sample_document_data):
        await client.post(BASE, json=sample_document_data)

        trail = (await client.get("/api/v1/audit/audit-trail")).json()
        assert trail["total"] == 0
