"""
HTTP surface for conversations: routes return the service envelope as the JSON
body with the envelope status as the HTTP status.
"""

import pytest


@pytest.mark.asyncio
class TestConversationRoutes:

    async def test_create_then_get(self, client, created_user, models, tags):
        created = await client.post(
            "/api/v1/conversations",
            json={"idUser": created_user.id, "idModel": models[1].id, "title": "Test", "tags": [tags[0].id]},
        )

        assert created.status_code == 201
        body = created.json()
        assert body["status"] == 201
        assert body["data"]["title"] == "Test"
        assert body["data"]["active"] is True
        assert body["data"]["tags"] == [{"id": tags[0].id, "name": "work"}]

        fetched = await client.get(f"/api/v1/conversations/{body['data']['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["data"]["model"]["provider"]["name"] == "OpenAI"

    async def test_create_invalid_body_is_400(self, client):
        response = await client.post("/api/v1/conversations", json={"title": "no ids"})

        assert response.status_code == 400
        assert response.json() == {"status": 400, "message": "Invalid input for creating conversation"}

    async def test_get_missing_is_404(self, client):
        response = await client.get("/api/v1/conversations/999")

        assert response.status_code == 404
        assert response.json() == {"status": 404, "message": "Conversation not found"}

    async def test_non_numeric_id_is_400(self, client):
        response = await client.get("/api/v1/conversations/abc")

        assert response.status_code == 400
        assert response.json() == {"status": 400, "message": "Invalid request"}

    async def test_patch_with_related_entities(self, client, created_user, models, tags, create_conversation):
        conversation = await create_conversation(created_user, models[0], title="Before", tags=[tags[0]])

        response = await client.patch(
            f"/api/v1/conversations/{conversation.id}",
            params={"include_related_entities": "true"},
            json={"title": "After", "tags": [{"id": tags[1].id}]},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "After"
        assert [t["name"] for t in data["tags"]] == ["personal"]
        assert data["user"]["username"] == "ada"
        assert data["messages"] == []

    async def test_put_parameters(self, client, created_user, models, create_conversation):
        conversation = await create_conversation(created_user, models[0])
        parameters = {"userContext": "Student", "responseContext": "Explain simply", "temperature": 0.2}

        response = await client.put(f"/api/v1/conversations/{conversation.id}/parameters", json=parameters)

        assert response.status_code == 200
        assert response.json()["data"]["parameters"] == parameters

    async def test_put_invalid_parameters_is_400(self, client, created_user, models, create_conversation):
        conversation = await create_conversation(created_user, models[0])

        response = await client.put(
            f"/api/v1/conversations/{conversation.id}/parameters", json={"temperature": 4}
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid model parameters"

    async def test_deactivate_hides_from_user_listing(self, client, created_user, models, create_conversation):
        conversation = await create_conversation(created_user, models[0])

        response = await client.post(f"/api/v1/conversations/{conversation.id}/deactivate")
        listing = await client.get(f"/api/v1/users/{created_user.id}/conversations")
        fetched = await client.get(f"/api/v1/conversations/{conversation.id}")

        assert response.json() == {"status": 200, "message": "Conversation marked as inactive"}
        assert listing.status_code == 404
        assert fetched.json()["data"]["active"] is False

    async def test_delete(self, client, created_user, models, create_conversation):
        conversation = await create_conversation(created_user, models[0])

        response = await client.delete(f"/api/v1/conversations/{conversation.id}")
        again = await client.delete(f"/api/v1/conversations/{conversation.id}")

        assert response.status_code == 200
        assert response.json()["message"] == "Conversation and associated messages successfully deleted"
        assert again.status_code == 404


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["env"] == "testing"
    assert "X-Request-ID" in response.headers
