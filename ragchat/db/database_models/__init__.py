"""Database models (Data Objects) - map to database tables."""

from .chat import ChatDO
from .chat_entry import ChatEntryDO
from .loaded_document import LoadedDocumentDO

__all__ = ["ChatDO", "ChatEntryDO", "LoadedDocumentDO"]
