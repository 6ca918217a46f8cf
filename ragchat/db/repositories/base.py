"""Base repository class."""

import duckdb
from typing import Any, List, Optional
from ...errors import StorageFailureError
from ...utils.logger import get_app_logger


class BaseRepository:
    """Base class for all repositories."""

    def __init__(self, conn: duckdb.DuckDBPyConnection):
        """
        Initialize repository with database connection.

        Args:
            conn: DuckDB connection or transaction cursor
        """
        self.conn = conn
        self.logger = get_app_logger()

    def _execute(self, action: str, sql: str, params: Optional[List[Any]] = None) -> duckdb.DuckDBPyConnection:
        """
        Execute a statement, turning driver errors into StorageFailureError.

        Args:
            action: Short description for the log and error message
            sql: SQL statement
            params: Positional parameters
        """
        try:
            return self.conn.execute(sql, params or [])
        except duckdb.Error as e:
            self.logger.error(f"Failed to {action}: {e}")
            raise StorageFailureError(f"Failed to {action}: {e}") from e
