"""Loaded document repository - the ingestion ledger."""

from typing import List
from .base import BaseRepository
from ..database_models.loaded_document import LoadedDocumentDO


class LoadedDocumentRepository(BaseRepository):
    """Repository for ledger entries. Entries are never updated."""

    def create(self, document: LoadedDocumentDO) -> LoadedDocumentDO:
        """
        Record that a document version has been indexed.

        Args:
            document: Unsaved LoadedDocumentDO

        Returns:
            The same entry with its id assigned
        """
        row = self._execute(
            f"record loaded document {document.filename}",
            """
            INSERT INTO loaded_documents (id, filename, content_hash, document_type, chunk_count, loaded_at)
            VALUES (nextval('loaded_documents_id_seq'), ?, ?, ?, ?, ?)
            RETURNING id
            """,
            [
                document.filename,
                document.content_hash,
                document.document_type,
                document.chunk_count,
                document.loaded_at
            ]
        ).fetchone()

        document.id = row[0]
        self.logger.info(
            f"Recorded loaded document {document.filename} "
            f"({document.chunk_count} chunks, hash {document.content_hash})"
        )
        return document

    def exists_by_filename_and_content_hash(self, filename: str, content_hash: str) -> bool:
        """
        Check whether this exact version of a file has been indexed.

        Args:
            filename: Source file name
            content_hash: Digest of the file's bytes

        Returns:
            True if a matching ledger entry exists
        """
        row = self._execute(
            f"check loaded document {filename}",
            """
            SELECT 1 FROM loaded_documents
            WHERE filename = ? AND content_hash = ?
            LIMIT 1
            """,
            [filename, content_hash]
        ).fetchone()
        return row is not None

    def list_all(self) -> List[LoadedDocumentDO]:
        """
        List all ledger entries, most recently loaded first.

        Returns:
            List of LoadedDocumentDO instances
        """
        rows = self._execute(
            "list loaded documents",
            """
            SELECT id, filename, content_hash, document_type, chunk_count, loaded_at
            FROM loaded_documents
            ORDER BY loaded_at DESC, id DESC
            """
        ).fetchall()

        return [
            LoadedDocumentDO(
                id=row[0],
                filename=row[1],
                content_hash=row[2],
                document_type=row[3],
                chunk_count=row[4],
                loaded_at=row[5]
            )
            for row in rows
        ]

    def count(self) -> int:
        return self._execute("count loaded documents", "SELECT COUNT(*) FROM loaded_documents").fetchone()[0]
