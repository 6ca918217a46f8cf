"""Database package - connection, models, and repositories."""

from .connection import DatabaseConnection
from .repositories.chat import ChatRepository
from .repositories.chat_entry import ChatEntryRepository
from .repositories.loaded_document import LoadedDocumentRepository

__all__ = [
    "DatabaseConnection",
    "ChatRepository",
    "ChatEntryRepository",
    "LoadedDocumentRepository",
]
