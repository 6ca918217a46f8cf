"""Knowledge base ingestion.

Each source document is fingerprinted; unchanged documents are skipped, new or
changed ones are chunked, indexed and recorded in the ledger in one unit of work.
"""

import hashlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Union

from .text_splitter import TokenTextSplitter
from .vector_store import Document, DuckDBVectorStore
from ..db.connection import DatabaseConnection
from ..db.database_models.loaded_document import LoadedDocumentDO
from ..db.repositories.loaded_document import LoadedDocumentRepository
from ..utils.file_reader import SourceDocument, find_source_files, read_source_document
from ..utils.logger import get_app_logger


@dataclass
class IngestReport:
    """What one ingestion run did, by filename."""

    loaded: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)


class DocumentLoaderService:
    """Loads source documents into the vector store exactly once per version."""

    def __init__(
        self,
        db: DatabaseConnection,
        vector_store: DuckDBVectorStore,
        text_splitter: TokenTextSplitter,
        fail_fast: bool = False
    ):
        """
        Args:
            db: Database connection
            vector_store: Destination for chunks
            text_splitter: Chunking strategy
            fail_fast: Stop at the first failing document instead of continuing
        """
        self.db = db
        self.vector_store = vector_store
        self.text_splitter = text_splitter
        self.fail_fast = fail_fast
        self.logger = get_app_logger()

    @staticmethod
    def calc_content_hash(raw_bytes: bytes) -> str:
        """MD5 hex digest of a document's bytes."""
        return hashlib.md5(raw_bytes).hexdigest()

    def is_loaded(self, filename: str, content_hash: str) -> bool:
        return LoadedDocumentRepository(self.db.conn).exists_by_filename_and_content_hash(filename, content_hash)

    async def ingest(self, source: SourceDocument) -> bool:
        """
        Ingest one document unless this version is already in the ledger.

        Args:
            source: Document name and bytes

        Returns:
            True if the document was indexed, False if it was skipped

        Raises:
            UnicodeDecodeError: If the bytes are not UTF-8 text
            IndexingFailureError: If embedding or storing chunks fails
            StorageFailureError: If the ledger write fails
        """
        content_hash = self.calc_content_hash(source.raw_bytes)
        if self.is_loaded(source.filename, content_hash):
            self.logger.debug(f"Skipping unchanged document {source.filename}")
            return False

        text = source.raw_bytes.decode("utf-8")
        chunks = self.text_splitter.split_documents([
            Document(content=text, metadata={"source": source.filename})
        ])

        # Chunks and ledger entry commit together or not at all
        with self.db.transaction() as cur:
            await self.vector_store.add(chunks, conn=cur)
            LoadedDocumentRepository(cur).create(LoadedDocumentDO(
                id=None,
                filename=source.filename,
                content_hash=content_hash,
                document_type=source.document_type,
                chunk_count=len(chunks)
            ))

        self.logger.info(f"Loaded document {source.filename}: {len(chunks)} chunks")
        return True

    def _record_failure(self, report: IngestReport, filename: str, error: Exception) -> None:
        self.logger.warning(f"Failed to load document {filename}: {error}")
        report.failed[filename] = str(error)
        if self.fail_fast:
            raise error

    async def _ingest_into(self, report: IngestReport, source: SourceDocument) -> None:
        try:
            if await self.ingest(source):
                report.loaded.append(source.filename)
            else:
                report.skipped.append(source.filename)
        except Exception as e:
            self._record_failure(report, source.filename, e)

    def _log_report(self, report: IngestReport) -> None:
        self.logger.info(
            f"Document loading finished: {len(report.loaded)} loaded, "
            f"{len(report.skipped)} skipped, {len(report.failed)} failed"
        )

    async def ingest_all(self, documents: Iterable[SourceDocument]) -> IngestReport:
        """
        Ingest a set of documents.

        Running this twice over an unchanged set indexes nothing the second time.

        Args:
            documents: Documents to ingest

        Returns:
            IngestReport listing loaded, skipped and failed filenames
        """
        report = IngestReport()
        for source in documents:
            await self._ingest_into(report, source)

        self._log_report(report)
        return report

    async def load_documents(
        self,
        directory: Union[str, Path],
        pattern: str = "**/*.txt"
    ) -> IngestReport:
        """
        Ingest every matching file under a directory.

        A file that cannot be read is reported as failed like any other
        document; the remaining files are still ingested.

        Args:
            directory: Knowledge base root
            pattern: Glob relative to the root

        Returns:
            IngestReport for the run
        """
        paths = find_source_files(directory, pattern)
        self.logger.info(f"Found {len(paths)} documents in {directory} matching {pattern}")

        report = IngestReport()
        for path in paths:
            try:
                source = await read_source_document(path)
            except OSError as e:
                self._record_failure(report, path.name, e)
                continue
            await self._ingest_into(report, source)

        self._log_report(report)
        return report
