"""Loaded document (ingestion ledger) database model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class LoadedDocumentDO:
    """Ledger entry - maps to loaded_documents table."""

    id: Optional[int]
    filename: str
    content_hash: str
    document_type: str
    chunk_count: int
    loaded_at: datetime = field(default_factory=datetime.utcnow)
