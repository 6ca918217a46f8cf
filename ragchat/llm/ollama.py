"""Ollama model clients."""

import json
from typing import AsyncIterator, List, Optional

import httpx

from .base import BaseChatModel, BaseEmbeddingModel
from ..errors import IndexingFailureError, ModelUnavailableError
from ..models.role import ChatMessage
from ..utils.logger import get_app_logger


class OllamaChatModel(BaseChatModel):
    """Chat client for Ollama's ``/api/chat`` endpoint."""

    def __init__(self, model: str, base_url: str = "http://localhost:11434",
                 timeout: float = 120.0, temperature: float = 0.7,
                 api_key: Optional[str] = None,
                 client: Optional[httpx.AsyncClient] = None):
        super().__init__(model, base_url, timeout, api_key, client)
        self.temperature = temperature
        self.logger = get_app_logger()

    def _payload(self, messages: List[ChatMessage], stream: bool) -> dict:
        return {
            "model": self.model,
            "messages": [m.to_dict() for m in messages],
            "stream": stream,
            "options": {"temperature": self.temperature},
        }

    async def complete(self, messages: List[ChatMessage]) -> str:
        self.logger.debug(f"[Ollama] chat: model={self.model}, messages={len(messages)}")
        try:
            resp = await self.client.post("/api/chat", json=self._payload(messages, stream=False))
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            self.logger.error(f"[Ollama] chat request failed: {e}")
            raise ModelUnavailableError(f"Ollama chat request failed: {e}") from e
        except json.JSONDecodeError as e:
            raise ModelUnavailableError(f"Ollama returned invalid JSON: {e}") from e

        if "error" in data:
            raise ModelUnavailableError(f"Ollama error: {data['error']}")

        return data.get("message", {}).get("content", "")

    async def stream(self, messages: List[ChatMessage]) -> AsyncIterator[str]:
        self.logger.debug(f"[Ollama] chat stream: model={self.model}, messages={len(messages)}")
        try:
            async with self.client.stream("POST", "/api/chat", json=self._payload(messages, stream=True)) as resp:
                resp.raise_for_status()
                # NDJSON: one object per line, the last one has done=true
                async for line in resp.aiter_lines():
                    if not line.strip():
                        continue
                    data = json.loads(line)
                    if "error" in data:
                        raise ModelUnavailableError(f"Ollama error: {data['error']}")
                    token = data.get("message", {}).get("content", "")
                    if token:
                        yield token
                    if data.get("done"):
                        break
        except httpx.HTTPError as e:
            self.logger.error(f"[Ollama] chat stream failed: {e}")
            raise ModelUnavailableError(f"Ollama chat stream failed: {e}") from e
        except json.JSONDecodeError as e:
            raise ModelUnavailableError(f"Ollama streamed invalid JSON: {e}") from e


class OllamaEmbeddingModel(BaseEmbeddingModel):
    """Embedding client for Ollama's ``/api/embed`` endpoint."""

    def __init__(self, model: str, base_url: str = "http://localhost:11434",
                 timeout: float = 120.0, api_key: Optional[str] = None,
                 client: Optional[httpx.AsyncClient] = None):
        super().__init__(model, base_url, timeout, api_key, client)
        self.logger = get_app_logger()

    async def embed(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []
        try:
            resp = await self.client.post("/api/embed", json={"model": self.model, "input": texts})
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            self.logger.error(f"[Ollama] embed request failed: {e}")
            raise IndexingFailureError(f"Ollama embed request failed: {e}") from e
        except json.JSONDecodeError as e:
            raise IndexingFailureError(f"Ollama returned invalid JSON: {e}") from e

        embeddings = data.get("embeddings") or []
        if len(embeddings) != len(texts):
            raise IndexingFailureError(
                f"Ollama returned {len(embeddings)} embeddings for {len(texts)} texts"
            )
        return embeddings
