"""Vector store over DuckDB list columns."""

import json
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import duckdb

from ..db.connection import DatabaseConnection
from ..errors import IndexingFailureError
from ..llm.base import BaseEmbeddingModel
from ..utils.logger import get_app_logger


@dataclass
class Document:
    """A piece of text with source metadata, as stored in the vector store."""

    content: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    id: Optional[str] = None
    score: Optional[float] = None


class DuckDBVectorStore:
    """Embeds documents and ranks them by cosine similarity."""

    def __init__(
        self,
        db: DatabaseConnection,
        embedding_model: BaseEmbeddingModel,
        batch_size: int = 32
    ):
        self.db = db
        self.embedding_model = embedding_model
        self.batch_size = batch_size
        self.logger = get_app_logger()

    async def _embed(self, texts: List[str]) -> List[List[float]]:
        vectors: List[List[float]] = []
        for start in range(0, len(texts), self.batch_size):
            vectors.extend(await self.embedding_model.embed(texts[start:start + self.batch_size]))
        return vectors

    async def add(
        self,
        documents: List[Document],
        conn: Optional[duckdb.DuckDBPyConnection] = None
    ) -> int:
        """
        Embed and store documents.

        Embedding happens before any row is written, so a failed batch leaves
        the store untouched.

        Args:
            documents: Documents to index; ids are assigned when missing
            conn: Cursor of an enclosing transaction, if any

        Returns:
            Number of documents stored

        Raises:
            IndexingFailureError: If embedding or storing fails
        """
        if not documents:
            return 0

        vectors = await self._embed([d.content for d in documents])

        rows = []
        for document, vector in zip(documents, vectors):
            if document.id is None:
                document.id = str(uuid.uuid4())
            rows.append([document.id, document.content, json.dumps(document.metadata), vector])

        with self.db.transaction(conn) as cur:
            try:
                cur.executemany(
                    "INSERT INTO vector_store (id, content, metadata, embedding) VALUES (?, ?, ?, ?)",
                    rows
                )
            except duckdb.Error as e:
                self.logger.error(f"Failed to store {len(rows)} chunks: {e}")
                raise IndexingFailureError(f"Failed to store chunks: {e}") from e

        self.logger.debug(f"Indexed {len(rows)} chunks")
        return len(rows)

    async def similarity_search(self, query: str, top_k: int = 4) -> List[Document]:
        """
        Find the stored documents closest to a query.

        Args:
            query: Query text
            top_k: Maximum number of results

        Returns:
            Documents ranked by descending cosine similarity, ``score`` set
        """
        vectors = await self.embedding_model.embed([query])
        try:
            rows = self.db.conn.execute(
                """
                SELECT id, content, metadata, list_cosine_similarity(embedding, ?::DOUBLE[]) AS score
                FROM vector_store
                ORDER BY score DESC NULLS LAST
                LIMIT ?
                """,
                [vectors[0], top_k]
            ).fetchall()
        except duckdb.Error as e:
            self.logger.error(f"Similarity search failed: {e}")
            raise IndexingFailureError(f"Similarity search failed: {e}") from e

        return [
            Document(
                id=row[0],
                content=row[1],
                metadata=json.loads(row[2]) if isinstance(row[2], str) else (row[2] or {}),
                score=row[3]
            )
            for row in rows
        ]

    def count(self) -> int:
        return self.db.conn.execute("SELECT COUNT(*) FROM vector_store").fetchone()[0]
