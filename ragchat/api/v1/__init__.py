"""API v1 package."""

from .chats import router as chats_router
from .stream import router as stream_router
from .documents import router as documents_router

__all__ = ["chats_router", "stream_router", "documents_router"]
