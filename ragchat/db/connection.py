"""Database connection, schema management and units of work."""

import duckdb
from contextlib import contextmanager
from typing import Iterator, Optional
from pathlib import Path
from ..errors import StorageFailureError
from ..utils.logger import get_app_logger


class DatabaseConnection:
    """DuckDB connection manager."""

    def __init__(self, db_path: str = "./data/ragchat.db"):
        """
        Initialize database connection.

        Args:
            db_path: Path to DuckDB database file
        """
        self.db_path = db_path
        self.logger = get_app_logger()
        self.conn: Optional[duckdb.DuckDBPyConnection] = None

        # Ensure database directory exists
        db_dir = Path(db_path).parent
        db_dir.mkdir(parents=True, exist_ok=True)

        self._connect()
        self._init_schema()

    def _connect(self):
        """Connect to DuckDB database."""
        try:
            self.conn = duckdb.connect(self.db_path)
            self.logger.info(f"Connected to DuckDB at {self.db_path}")
        except Exception as e:
            self.logger.error(f"Failed to connect to DuckDB: {e}")
            raise

    def _init_schema(self):
        """Initialize database schema."""
        try:
            self.conn.execute("CREATE SEQUENCE IF NOT EXISTS chats_id_seq START 1")
            self.conn.execute("CREATE SEQUENCE IF NOT EXISTS chat_entries_id_seq START 1")
            self.conn.execute("CREATE SEQUENCE IF NOT EXISTS loaded_documents_id_seq START 1")

            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS chats (
                    id BIGINT PRIMARY KEY,
                    title VARCHAR,
                    created_at TIMESTAMP NOT NULL
                )
            """)

            # Entries are removed together with their chat by ChatRepository.delete
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS chat_entries (
                    id BIGINT PRIMARY KEY,
                    chat_id BIGINT NOT NULL,
                    content VARCHAR NOT NULL,
                    role VARCHAR NOT NULL,
                    created_at TIMESTAMP NOT NULL
                )
            """)

            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS loaded_documents (
                    id BIGINT PRIMARY KEY,
                    filename VARCHAR NOT NULL,
                    content_hash VARCHAR NOT NULL,
                    document_type VARCHAR NOT NULL,
                    chunk_count INTEGER NOT NULL,
                    loaded_at TIMESTAMP NOT NULL
                )
            """)

            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS vector_store (
                    id VARCHAR PRIMARY KEY,
                    content VARCHAR NOT NULL,
                    metadata JSON,
                    embedding DOUBLE[] NOT NULL
                )
            """)

            self.conn.execute("CREATE INDEX IF NOT EXISTS idx_chat_entries_chat ON chat_entries(chat_id)")
            self.conn.execute("CREATE INDEX IF NOT EXISTS idx_chat_entries_created ON chat_entries(created_at)")
            self.conn.execute("""
                CREATE UNIQUE INDEX IF NOT EXISTS idx_loaded_documents_file_hash
                ON loaded_documents(filename, content_hash)
            """)

            self.logger.info("Database schema initialized successfully")

        except Exception as e:
            self.logger.error(f"Failed to initialize database schema: {e}")
            raise

    @contextmanager
    def transaction(
        self,
        conn: Optional[duckdb.DuckDBPyConnection] = None
    ) -> Iterator[duckdb.DuckDBPyConnection]:
        """
        Run a block as one unit of work.

        A dedicated cursor is opened so concurrent units of work do not share
        transaction state. Passing ``conn`` joins an enclosing unit of work.

        Args:
            conn: Cursor of an enclosing transaction, if any

        Yields:
            Cursor to hand to repositories

        Raises:
            StorageFailureError: If BEGIN or COMMIT fails
        """
        if conn is not None:
            yield conn
            return

        cursor = self.conn.cursor()
        try:
            try:
                cursor.begin()
            except duckdb.Error as e:
                self.logger.error(f"Failed to begin transaction: {e}")
                raise StorageFailureError(f"Failed to begin transaction: {e}") from e

            try:
                yield cursor
            except BaseException:
                try:
                    cursor.rollback()
                except duckdb.Error as e:
                    self.logger.error(f"Failed to roll back transaction: {e}")
                raise

            try:
                cursor.commit()
            except duckdb.Error as e:
                self.logger.error(f"Failed to commit transaction: {e}")
                try:
                    cursor.rollback()
                except duckdb.Error:
                    self.logger.debug("Rollback after failed commit was rejected")
                raise StorageFailureError(f"Failed to commit transaction: {e}") from e
        finally:
            cursor.close()

    def close(self):
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.logger.info("Database connection closed")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
