"""Pytest fixtures for API testing."""

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from ragchat.api.v1 import chats, stream, documents
from ragchat.errors import register_exception_handlers


@pytest.fixture
def knowledgebase(tmp_path):
    """Empty knowledge base directory served by the reload endpoint."""
    kb = tmp_path / "knowledgebase"
    kb.mkdir()
    return kb


@pytest.fixture
async def client(chat_service, document_loader, vector_store, knowledgebase):
    """Create async HTTP client over a test app with injected services."""
    # Inject dependencies into routers
    chats.chat_service = chat_service
    documents.document_loader = document_loader
    documents.vector_store = vector_store
    documents.knowledgebase_dir = str(knowledgebase)
    documents.knowledgebase_pattern = "**/*.txt"

    # Create a test app without lifespan (to avoid conflicts)
    test_app = FastAPI(title="RAG Chat Test")
    register_exception_handlers(test_app)
    test_app.include_router(chats.router)
    test_app.include_router(stream.router)
    test_app.include_router(documents.router)

    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    chats.chat_service = None
    documents.document_loader = None
    documents.vector_store = None
