"""Clients for OpenAI-compatible local servers (vLLM, llama.cpp server)."""

import json
from typing import AsyncIterator, List, Optional

import httpx

from .base import BaseChatModel, BaseEmbeddingModel
from ..errors import IndexingFailureError, ModelUnavailableError
from ..models.role import ChatMessage
from ..utils.logger import get_app_logger


SSE_DATA_PREFIX = "data:"
SSE_DONE = "[DONE]"


class OpenAIChatModel(BaseChatModel):
    """Chat client for ``/v1/chat/completions``."""

    def __init__(self, model: str, base_url: str = "http://localhost:8000",
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
            "temperature": self.temperature,
            "stream": stream,
        }

    async def complete(self, messages: List[ChatMessage]) -> str:
        self.logger.debug(f"[OpenAI] chat: model={self.model}, messages={len(messages)}")
        try:
            resp = await self.client.post("/v1/chat/completions", json=self._payload(messages, stream=False))
            resp.raise_for_status()
            data = resp.json()
            return data["choices"][0]["message"].get("content") or ""
        except httpx.HTTPError as e:
            self.logger.error(f"[OpenAI] chat request failed: {e}")
            raise ModelUnavailableError(f"Chat completion request failed: {e}") from e
        except (json.JSONDecodeError, KeyError, IndexError) as e:
            raise ModelUnavailableError(f"Malformed chat completion response: {e}") from e

    async def stream(self, messages: List[ChatMessage]) -> AsyncIterator[str]:
        self.logger.debug(f"[OpenAI] chat stream: model={self.model}, messages={len(messages)}")
        try:
            async with self.client.stream(
                "POST", "/v1/chat/completions", json=self._payload(messages, stream=True)
            ) as resp:
                resp.raise_for_status()
                async for line in resp.aiter_lines():
                    if not line.startswith(SSE_DATA_PREFIX):
                        continue
                    data = line[len(SSE_DATA_PREFIX):].strip()
                    if data == SSE_DONE:
                        break
                    chunk = json.loads(data)
                    if "error" in chunk:
                        raise ModelUnavailableError(f"Chat completion error: {chunk['error']}")
                    choices = chunk.get("choices") or []
                    if not choices:
                        continue
                    token = (choices[0].get("delta") or {}).get("content")
                    if token:
                        yield token
        except httpx.HTTPError as e:
            self.logger.error(f"[OpenAI] chat stream failed: {e}")
            raise ModelUnavailableError(f"Chat completion stream failed: {e}") from e
        except json.JSONDecodeError as e:
            raise ModelUnavailableError(f"Malformed chat completion chunk: {e}") from e


class OpenAIEmbeddingModel(BaseEmbeddingModel):
    """Embedding client for ``/v1/embeddings``."""

    def __init__(self, model: str, base_url: str = "http://localhost:8000",
                 timeout: float = 120.0, api_key: Optional[str] = None,
                 client: Optional[httpx.AsyncClient] = None):
        super().__init__(model, base_url, timeout, api_key, client)
        self.logger = get_app_logger()

    async def embed(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []
        try:
            resp = await self.client.post("/v1/embeddings", json={"model": self.model, "input": texts})
            resp.raise_for_status()
            items = sorted(resp.json()["data"], key=lambda item: item.get("index", 0))
            embeddings = [item["embedding"] for item in items]
        except httpx.HTTPError as e:
            self.logger.error(f"[OpenAI] embed request failed: {e}")
            raise IndexingFailureError(f"Embedding request failed: {e}") from e
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            raise IndexingFailureError(f"Malformed embedding response: {e}") from e

        if len(embeddings) != len(texts):
            raise IndexingFailureError(
                f"Server returned {len(embeddings)} embeddings for {len(texts)} texts"
            )
        return embeddings
