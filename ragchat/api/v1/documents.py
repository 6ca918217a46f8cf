"""Knowledge base API routes - V1."""

from fastapi import APIRouter, HTTPException, Depends, Query

from ...models.document import (
    LoadedDocumentResponse,
    LoadedDocumentListResponse,
    IngestReportResponse,
    SearchResult,
    SearchResponse,
)
from ...db import LoadedDocumentRepository
from ...services import DocumentLoaderService, DuckDBVectorStore

router = APIRouter(prefix="/api/v1/documents", tags=["Documents"])

# Set by main.py
document_loader: DocumentLoaderService = None
vector_store: DuckDBVectorStore = None
knowledgebase_dir: str = "./knowledgebase"
knowledgebase_pattern: str = "**/*.txt"


def get_document_loader() -> DocumentLoaderService:
    """Dependency to get the document loader."""
    if document_loader is None:
        raise HTTPException(status_code=500, detail="Document loader not initialized")
    return document_loader


def get_vector_store() -> DuckDBVectorStore:
    """Dependency to get the vector store."""
    if vector_store is None:
        raise HTTPException(status_code=500, detail="Vector store not initialized")
    return vector_store


@router.get("", response_model=LoadedDocumentListResponse)
async def list_documents(loader: DocumentLoaderService = Depends(get_document_loader)):
    """List ledger entries."""
    documents = LoadedDocumentRepository(loader.db.conn).list_all()

    return LoadedDocumentListResponse(
        documents=[
            LoadedDocumentResponse(
                id=d.id,
                filename=d.filename,
                content_hash=d.content_hash,
                document_type=d.document_type,
                chunk_count=d.chunk_count,
                loaded_at=d.loaded_at
            )
            for d in documents
        ],
        total=len(documents)
    )


@router.post("/reload", response_model=IngestReportResponse)
async def reload_documents(loader: DocumentLoaderService = Depends(get_document_loader)):
    """Index new or changed files in the knowledge base directory."""
    report = await loader.load_documents(knowledgebase_dir, knowledgebase_pattern)

    return IngestReportResponse(
        loaded=report.loaded,
        skipped=report.skipped,
        failed=report.failed
    )


@router.get("/search", response_model=SearchResponse)
async def search_documents(
    query: str = Query(..., min_length=1),
    top_k: int = Query(4, ge=1, le=50),
    store: DuckDBVectorStore = Depends(get_vector_store)
):
    """Similarity search over indexed chunks."""
    documents = await store.similarity_search(query, top_k=top_k)

    return SearchResponse(
        query=query,
        results=[
            SearchResult(id=d.id, content=d.content, metadata=d.metadata, score=d.score)
            for d in documents
        ]
    )
