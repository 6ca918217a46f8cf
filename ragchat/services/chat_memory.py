"""Chat memory backed by the chat tables.

Bridges a chat's stored entries to and from the message list a model client
expects, replaying at most ``max_messages`` entries.
"""

from typing import Iterable, List, Literal, Optional

import duckdb

from ..db.connection import DatabaseConnection
from ..db.database_models.chat_entry import ChatEntryDO
from ..db.repositories.chat import ChatRepository
from ..db.repositories.chat_entry import ChatEntryRepository
from ..errors import NotFoundError
from ..models.role import ChatMessage
from ..utils.logger import get_app_logger


WindowPolicy = Literal["oldest", "latest"]


class ChatMemory:
    """Replay window over a chat's history."""

    def __init__(
        self,
        db: DatabaseConnection,
        max_messages: int = 12,
        window: WindowPolicy = "oldest"
    ):
        """
        Args:
            db: Database connection
            max_messages: Upper bound on replayed entries
            window: ``oldest`` keeps the first entries of the ordered history,
                ``latest`` keeps the most recent ones
        """
        if max_messages < 1:
            raise ValueError("max_messages must be at least 1")
        if window not in ("oldest", "latest"):
            raise ValueError(f"Unknown memory window: {window}")
        self.db = db
        self.max_messages = max_messages
        self.window = window
        self.logger = get_app_logger()

    def _require_chat(self, conn: duckdb.DuckDBPyConnection, conversation_id: int) -> None:
        if not ChatRepository(conn).exists(conversation_id):
            raise NotFoundError(f"Chat not found: {conversation_id}")

    def add(
        self,
        conversation_id: int,
        messages: Iterable[ChatMessage],
        conn: Optional[duckdb.DuckDBPyConnection] = None
    ) -> List[ChatEntryDO]:
        """
        Append messages to a chat's history in one unit of work.

        Args:
            conversation_id: Chat ID
            messages: Messages in the order they should be stored
            conn: Cursor of an enclosing transaction, if any

        Returns:
            The persisted entries

        Raises:
            NotFoundError: If the chat does not exist
            InvalidRoleError: If a message has an unknown role; nothing is stored
        """
        with self.db.transaction(conn) as cur:
            self._require_chat(cur, conversation_id)
            # Convert everything first so a bad role stores nothing
            entries = [ChatEntryDO.from_message(conversation_id, m) for m in messages]
            repo = ChatEntryRepository(cur)
            saved = [repo.add(entry) for entry in entries]

        self.logger.debug(f"Appended {len(saved)} entries to chat {conversation_id}")
        return saved

    def fetch(
        self,
        conversation_id: int,
        max_messages: Optional[int] = None,
        conn: Optional[duckdb.DuckDBPyConnection] = None
    ) -> List[ChatEntryDO]:
        """
        Get the replay window of a chat's history.

        Args:
            conversation_id: Chat ID
            max_messages: Override of the configured window size
            conn: Cursor of an enclosing transaction, if any

        Returns:
            At most ``max_messages`` entries sorted by creation time, oldest first

        Raises:
            NotFoundError: If the chat does not exist
        """
        limit = self.max_messages if max_messages is None else max_messages
        read_conn = conn if conn is not None else self.db.conn

        self._require_chat(read_conn, conversation_id)
        history = sorted(
            ChatEntryRepository(read_conn).list_by_chat(conversation_id),
            key=lambda entry: (entry.created_at, entry.id)
        )

        if limit <= 0:
            return []
        if self.window == "latest":
            return history[-limit:]
        return history[:limit]

    def get(
        self,
        conversation_id: int,
        conn: Optional[duckdb.DuckDBPyConnection] = None
    ) -> List[ChatMessage]:
        """Replay window materialized as model-client messages."""
        return [entry.to_message() for entry in self.fetch(conversation_id, conn=conn)]

    def clear(self, conversation_id: int) -> None:
        """History is only purged by deleting the chat."""
        self.logger.debug(f"Ignoring clear request for chat {conversation_id}")
