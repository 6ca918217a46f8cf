"""Repository layer for data access."""

from .chat import ChatRepository
from .chat_entry import ChatEntryRepository
from .loaded_document import LoadedDocumentRepository

__all__ = ["ChatRepository", "ChatEntryRepository", "LoadedDocumentRepository"]
