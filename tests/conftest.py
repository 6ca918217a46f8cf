"""Shared fixtures: a fresh database per test and in-process model fakes."""

import asyncio
from typing import List, Optional, Sequence

import pytest

from ragchat.db import DatabaseConnection
from ragchat.services import (
    ChatMemory,
    ChatService,
    DocumentLoaderService,
    DuckDBVectorStore,
    TokenTextSplitter,
)
from ragchat.errors import IndexingFailureError


VOCAB = ("cat", "dog", "bird")


class FakeChatModel:
    """Chat model double; replies with ``tokens`` and records every prompt."""

    def __init__(self, tokens: Optional[List[str]] = None):
        self.tokens = tokens if tokens is not None else ["Hello", "!"]
        self.error: Optional[BaseException] = None
        # When set, complete() and stream() wait on it before finishing
        self.gate: Optional[asyncio.Event] = None
        self.calls = []

    async def complete(self, messages) -> str:
        self.calls.append(list(messages))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return "".join(self.tokens)

    async def stream(self, messages):
        self.calls.append(list(messages))
        for token in self.tokens:
            await asyncio.sleep(0)
            yield token
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error

    async def aclose(self):
        pass


class FakeEmbeddingModel:
    """Embeds text as keyword counts over a tiny vocabulary."""

    def __init__(self):
        self.fail_on: Optional[str] = None
        self.calls = []

    async def embed(self, texts: List[str]) -> List[List[float]]:
        self.calls.append(list(texts))
        if self.fail_on is not None and any(self.fail_on in t for t in texts):
            raise IndexingFailureError("embedding server rejected the batch")
        return [[float(t.lower().count(w)) for w in VOCAB] + [0.1] for t in texts]

    async def aclose(self):
        pass


class CharEncoding:
    """One token per character, so chunk sizes are easy to reason about."""

    def encode(self, text: str) -> List[int]:
        return [ord(c) for c in text]

    def decode(self, tokens: Sequence[int]) -> str:
        return "".join(chr(t) for t in tokens)


@pytest.fixture
def db_conn(tmp_path):
    """Provide a fresh database connection."""
    db = DatabaseConnection(str(tmp_path / "test.db"))
    yield db
    db.close()


@pytest.fixture
def chat_model():
    return FakeChatModel()


@pytest.fixture
def embedding_model():
    return FakeEmbeddingModel()


@pytest.fixture
def memory(db_conn):
    return ChatMemory(db_conn, max_messages=12)


@pytest.fixture
def vector_store(db_conn, embedding_model):
    return DuckDBVectorStore(db_conn, embedding_model, batch_size=2)


@pytest.fixture
def text_splitter():
    return TokenTextSplitter(chunk_size=50, encoding=CharEncoding())


@pytest.fixture
def chat_service(db_conn, chat_model, memory, vector_store):
    return ChatService(db_conn, chat_model, memory, vector_store=vector_store)


@pytest.fixture
def document_loader(db_conn, vector_store, text_splitter):
    return DocumentLoaderService(db_conn, vector_store, text_splitter)


@pytest.fixture
def char_encoding():
    return CharEncoding()
