"""Model client abstract base classes."""

from abc import ABC, abstractmethod
from typing import AsyncIterator, Dict, List, Optional

import httpx

from ..models.role import ChatMessage


class HttpModelClient:
    """Shared httpx plumbing for clients of a local model server."""

    def __init__(
        self,
        model: str,
        base_url: str,
        timeout: float = 120.0,
        api_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Args:
            model: Model name on the server
            base_url: Server base URL
            timeout: Request timeout in seconds
            api_key: Optional bearer token
            client: Pre-built client (tests inject one over a mock transport)
        """
        self.model = model
        self.base_url = base_url
        self._owns_client = client is None
        if client is None:
            headers: Dict[str, str] = {}
            if api_key:
                headers["Authorization"] = f"Bearer {api_key}"
            client = httpx.AsyncClient(base_url=base_url, timeout=timeout, headers=headers)
        self.client = client

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self.client.aclose()


class BaseChatModel(HttpModelClient, ABC):
    """Chat-completion client interface."""

    @abstractmethod
    async def complete(self, messages: List[ChatMessage]) -> str:
        """
        Produce one complete reply.

        Args:
            messages: Prompt, oldest message first

        Returns:
            Reply text

        Raises:
            ModelUnavailableError: If the server call fails
        """

    @abstractmethod
    def stream(self, messages: List[ChatMessage]) -> AsyncIterator[str]:
        """
        Produce the reply as partial tokens.

        Args:
            messages: Prompt, oldest message first

        Yields:
            Reply fragments in order

        Raises:
            ModelUnavailableError: If the server call fails mid-stream
        """


class BaseEmbeddingModel(HttpModelClient, ABC):
    """Text embedding client interface."""

    @abstractmethod
    async def embed(self, texts: List[str]) -> List[List[float]]:
        """
        Embed texts.

        Args:
            texts: Texts to embed

        Returns:
            One vector per input text, in input order

        Raises:
            IndexingFailureError: If the server call fails
        """
