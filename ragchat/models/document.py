"""Knowledge base API models."""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class LoadedDocumentResponse(BaseModel):
    """Response model for one ledger entry."""

    id: int = Field(description="Ledger entry ID")
    filename: str = Field(description="Source file name")
    content_hash: str = Field(description="MD5 digest of the indexed bytes")
    document_type: str = Field(description="Document type (file extension)")
    chunk_count: int = Field(description="Chunks written to the vector store")
    loaded_at: datetime = Field(description="Indexing timestamp")


class LoadedDocumentListResponse(BaseModel):
    """Response model for listing ledger entries."""

    documents: List[LoadedDocumentResponse] = Field(description="Ledger entries")
    total: int = Field(description="Total number of entries")


class IngestReportResponse(BaseModel):
    """Outcome of one knowledge base load."""

    loaded: List[str] = Field(default_factory=list, description="Newly indexed files")
    skipped: List[str] = Field(default_factory=list, description="Unchanged files")
    failed: Dict[str, str] = Field(default_factory=dict, description="Failed files and reasons")


class SearchResult(BaseModel):
    """A retrieved chunk."""

    id: str = Field(description="Chunk ID")
    content: str = Field(description="Chunk text")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Source metadata")
    score: Optional[float] = Field(None, description="Cosine similarity to the query")


class SearchResponse(BaseModel):
    """Response model for a similarity search."""

    query: str = Field(description="Search query")
    results: List[SearchResult] = Field(description="Ranked matches")
