import pytest


@pytest.mark.asyncio
class TestUserRoutes:

    async def test_list_conversations_uses_reduced_model_view(self, client, created_user, models, create_conversation):
        await create_conversation(created_user, models[1], title="Listed")

        response = await client.get(f"/api/v1/users/{created_user.id}/conversations")

        assert response.status_code == 200
        [item] = response.json()["data"]
        assert item["title"] == "Listed"
        assert item["model"] == {"name": "gpt-4", "provider": {"image": "https://cdn.example.com/providers/openai.png"}}
        assert "messages" not in item

    async def test_list_conversations_invalid_user_is_400(self, client):
        response = await client.get("/api/v1/users/0/conversations")

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid user ID"

    async def test_deactivate_all_reports_count(self, client, created_user, models, create_conversation):
        await create_conversation(created_user, models[0])
        await create_conversation(created_user, models[1])

        response = await client.post(f"/api/v1/users/{created_user.id}/conversations/deactivate")

        assert response.status_code == 200
        assert response.json() == {"status": 200, "data": {"count": 2}, "message": "Conversations marked as inactive"}

    async def test_deactivate_all_unknown_user_is_404(self, client):
        response = await client.post("/api/v1/users/12/conversations/deactivate")

        assert response.status_code == 404
        assert response.json()["message"] == "User ID does not exist"

    async def test_global_parameters_round_trip(self, client, created_user):
        new_defaults = {"gpt-4": {"userContext": "Physicist", "temperature": 0.1}}

        put = await client.put(f"/api/v1/users/{created_user.id}/global-parameters", json=new_defaults)
        get = await client.get(f"/api/v1/users/{created_user.id}/global-parameters")

        assert put.status_code == 200
        assert put.json()["data"]["globalParameters"] == new_defaults
        assert get.json() == {"status": 200, "data": new_defaults}

    async def test_invalid_global_parameters_is_400(self, client, created_user):
        response = await client.put(
            f"/api/v1/users/{created_user.id}/global-parameters", json={"gpt-4": {"temperature": "warm"}}
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid global parameters"
