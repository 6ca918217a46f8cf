"""Services package."""

from .chat_memory import ChatMemory
from .chat_service import ChatService
from .document_loader import DocumentLoaderService, IngestReport
from .streaming import TokenChannel
from .text_splitter import TokenTextSplitter
from .vector_store import Document, DuckDBVectorStore

__all__ = [
    "ChatMemory",
    "ChatService",
    "DocumentLoaderService",
    "IngestReport",
    "TokenChannel",
    "TokenTextSplitter",
    "Document",
    "DuckDBVectorStore",
]
