"""Tests for the Ollama clients."""

import json

import httpx
import pytest

from ragchat.errors import IndexingFailureError, ModelUnavailableError
from ragchat.llm.ollama import OllamaChatModel, OllamaEmbeddingModel
from ragchat.models.role import ChatMessage


MESSAGES = [ChatMessage(role="user", content="Hi")]


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://ollama")


def _ndjson(*objects):
    return "\n".join(json.dumps(o) for o in objects).encode()


class TestOllamaChatModel:
    """Tests for OllamaChatModel."""

    class TestComplete:
        """SUT: OllamaChatModel.complete"""

        async def test_returns_content(self):
            seen = {}

            def handler(request):
                seen["path"] = request.url.path
                seen["body"] = json.loads(request.content)
                return httpx.Response(200, json={"message": {"role": "assistant", "content": "Hello!"}, "done": True})

            model = OllamaChatModel("llama3.2", client=_client(handler), temperature=0.2)

            assert await model.complete(MESSAGES) == "Hello!"
            assert seen["path"] == "/api/chat"
            assert seen["body"] == {
                "model": "llama3.2",
                "messages": [{"role": "user", "content": "Hi"}],
                "stream": False,
                "options": {"temperature": 0.2},
            }

        async def test_http_error(self):
            model = OllamaChatModel("llama3.2", client=_client(lambda r: httpx.Response(500, text="oops")))
            with pytest.raises(ModelUnavailableError):
                await model.complete(MESSAGES)

        async def test_connection_error(self):
            def handler(request):
                raise httpx.ConnectError("connection refused")

            model = OllamaChatModel("llama3.2", client=_client(handler))
            with pytest.raises(ModelUnavailableError):
                await model.complete(MESSAGES)

        async def test_error_field(self):
            model = OllamaChatModel(
                "missing",
                client=_client(lambda r: httpx.Response(200, json={"error": "model not found"}))
            )
            with pytest.raises(ModelUnavailableError, match="model not found"):
                await model.complete(MESSAGES)

    class TestStream:
        """SUT: OllamaChatModel.stream"""

        async def test_yields_tokens(self):
            body = _ndjson(
                {"message": {"content": "Hel"}, "done": False},
                {"message": {"content": "lo"}, "done": False},
                {"message": {"content": ""}, "done": True},
            )
            model = OllamaChatModel("llama3.2", client=_client(lambda r: httpx.Response(200, content=body)))

            assert [t async for t in model.stream(MESSAGES)] == ["Hel", "lo"]

        async def test_error_midstream(self):
            body = _ndjson({"message": {"content": "Par"}, "done": False}, {"error": "out of memory"})
            model = OllamaChatModel("llama3.2", client=_client(lambda r: httpx.Response(200, content=body)))

            received = []
            with pytest.raises(ModelUnavailableError):
                async for token in model.stream(MESSAGES):
                    received.append(token)
            assert received == ["Par"]

        async def test_http_error(self):
            model = OllamaChatModel("llama3.2", client=_client(lambda r: httpx.Response(503)))
            with pytest.raises(ModelUnavailableError):
                async for _ in model.stream(MESSAGES):
                    pass


class TestOllamaEmbeddingModel:
    """SUT: OllamaEmbeddingModel.embed"""

    async def test_returns_vectors(self):
        def handler(request):
            assert request.url.path == "/api/embed"
            body = json.loads(request.content)
            return httpx.Response(200, json={"embeddings": [[0.1, 0.2] for _ in body["input"]]})

        model = OllamaEmbeddingModel("nomic-embed-text", client=_client(handler))
        assert await model.embed(["a", "b"]) == [[0.1, 0.2], [0.1, 0.2]]

    async def test_empty_input_skips_request(self):
        def handler(request):
            raise AssertionError("no request expected")

        model = OllamaEmbeddingModel("nomic-embed-text", client=_client(handler))
        assert await model.embed([]) == []

    async def test_count_mismatch(self):
        model = OllamaEmbeddingModel(
            "nomic-embed-text",
            client=_client(lambda r: httpx.Response(200, json={"embeddings": [[0.1]]}))
        )
        with pytest.raises(IndexingFailureError):
            await model.embed(["a", "b"])

    async def test_http_error(self):
        model = OllamaEmbeddingModel("nomic-embed-text", client=_client(lambda r: httpx.Response(500)))
        with pytest.raises(IndexingFailureError):
            await model.embed(["a"])
