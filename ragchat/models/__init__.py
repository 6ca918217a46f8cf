"""Role enum and pydantic models for API request/response."""

from .role import Role, ChatMessage
from .chat import (
    ChatResponse,
    ChatDetailResponse,
    ChatListResponse,
    ChatEntryResponse,
    CreateChatRequest,
    CreateEntryRequest,
    InteractionResponse,
)
from .document import (
    LoadedDocumentResponse,
    LoadedDocumentListResponse,
    IngestReportResponse,
    SearchResult,
    SearchResponse,
)

__all__ = [
    "Role",
    "ChatMessage",
    "ChatResponse",
    "ChatDetailResponse",
    "ChatListResponse",
    "ChatEntryResponse",
    "CreateChatRequest",
    "CreateEntryRequest",
    "InteractionResponse",
    "LoadedDocumentResponse",
    "LoadedDocumentListResponse",
    "IngestReportResponse",
    "SearchResult",
    "SearchResponse",
]
