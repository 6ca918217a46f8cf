"""Chat API integration tests."""

from httpx import AsyncClient

from ragchat.api.v1 import chats
from ragchat.errors import ModelUnavailableError


async def _create_chat(client: AsyncClient, title: str = "Test chat") -> int:
    """Helper to create a chat and return its id."""
    response = await client.post("/api/v1/chats", json={"title": title})
    return response.json()["id"]


class TestChatAPI:
    """Tests for chat API endpoints."""

    class TestListChats:
        """SUT: list_chats"""

        async def test_empty(self, client: AsyncClient):
            """Should return empty list when no chats exist."""
            response = await client.get("/api/v1/chats")
            assert response.status_code == 200
            assert response.json() == {"chats": [], "total": 0}

        async def test_newest_first(self, client: AsyncClient):
            first = await _create_chat(client, "first")
            second = await _create_chat(client, "second")

            data = (await client.get("/api/v1/chats")).json()
            assert data["total"] == 2
            assert [c["id"] for c in data["chats"]] == [second, first]

    class TestCreateChat:
        """SUT: create_chat"""

        async def test_success(self, client: AsyncClient):
            """Should create a chat and return 201."""
            response = await client.post("/api/v1/chats", json={"title": "Trip planning"})
            assert response.status_code == 201
            data = response.json()
            assert data["title"] == "Trip planning"
            assert "id" in data
            assert "created_at" in data

        async def test_empty_title(self, client: AsyncClient):
            response = await client.post("/api/v1/chats", json={"title": ""})
            assert response.status_code == 422

        async def test_missing_title(self, client: AsyncClient):
            response = await client.post("/api/v1/chats", json={})
            assert response.status_code == 422

    class TestGetChat:
        """SUT: get_chat"""

        async def test_with_history(self, client: AsyncClient):
            chat_id = await _create_chat(client)
            await client.post(f"/api/v1/chats/{chat_id}/entries", json={"prompt": "Hi"})

            response = await client.get(f"/api/v1/chats/{chat_id}")
            assert response.status_code == 200
            history = response.json()["history"]
            assert [(e["role"], e["content"]) for e in history] == [
                ("user", "Hi"),
                ("assistant", "Hello!"),
            ]

        async def test_not_found(self, client: AsyncClient):
            response = await client.get("/api/v1/chats/999")
            assert response.status_code == 404
            assert response.json() == {"detail": "Chat not found: 999"}

    class TestDeleteChat:
        """SUT: delete_chat"""

        async def test_success(self, client: AsyncClient):
            chat_id = await _create_chat(client)
            await client.post(f"/api/v1/chats/{chat_id}/entries", json={"prompt": "Hi"})

            response = await client.delete(f"/api/v1/chats/{chat_id}")
            assert response.status_code == 200
            assert response.json()["status"] == "deleted"

            assert (await client.get(f"/api/v1/chats/{chat_id}")).status_code == 404

        async def test_not_found(self, client: AsyncClient):
            response = await client.delete("/api/v1/chats/999")
            assert response.status_code == 404

    class TestCreateEntry:
        """SUT: create_entry"""

        async def test_success(self, client: AsyncClient):
            chat_id = await _create_chat(client)

            response = await client.post(f"/api/v1/chats/{chat_id}/entries", json={"prompt": "Hi"})
            assert response.status_code == 201
            data = response.json()
            assert data["chat_id"] == chat_id
            assert data["user_entry"]["role"] == "user"
            assert data["user_entry"]["content"] == "Hi"
            assert data["assistant_entry"]["role"] == "assistant"
            assert data["assistant_entry"]["content"] == "Hello!"

        async def test_unknown_chat(self, client: AsyncClient):
            response = await client.post("/api/v1/chats/999/entries", json={"prompt": "Hi"})
            assert response.status_code == 404

        async def test_empty_prompt(self, client: AsyncClient):
            chat_id = await _create_chat(client)
            response = await client.post(f"/api/v1/chats/{chat_id}/entries", json={"prompt": ""})
            assert response.status_code == 422

        async def test_model_unavailable(self, client: AsyncClient, chat_model):
            """A failed model call returns 503 and stores nothing."""
            chat_model.error = ModelUnavailableError("Ollama chat request failed")
            chat_id = await _create_chat(client)

            response = await client.post(f"/api/v1/chats/{chat_id}/entries", json={"prompt": "Hi"})
            assert response.status_code == 503
            assert response.json()["detail"] == "Ollama chat request failed"

            history = (await client.get(f"/api/v1/chats/{chat_id}")).json()["history"]
            assert history == []


class TestServiceNotInitialized:
    """SUT: get_chat_service"""

    async def test_returns_500(self, client: AsyncClient):
        chats.chat_service = None
        response = await client.get("/api/v1/chats")
        assert response.status_code == 500
