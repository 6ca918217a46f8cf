"""Chat repository for database operations."""

from datetime import datetime
from typing import Optional, List
from .base import BaseRepository
from .chat_entry import ChatEntryRepository
from ..database_models.chat import ChatDO


class ChatRepository(BaseRepository):
    """Repository for Chat CRUD operations."""

    def create(self, title: Optional[str]) -> ChatDO:
        """
        Create a new chat record.

        Args:
            title: Display title

        Returns:
            ChatDO with its assigned id and creation time
        """
        created_at = datetime.utcnow()
        row = self._execute(
            "create chat",
            """
            INSERT INTO chats (id, title, created_at)
            VALUES (nextval('chats_id_seq'), ?, ?)
            RETURNING id
            """,
            [title, created_at]
        ).fetchone()

        chat = ChatDO(id=row[0], title=title, created_at=created_at)
        self.logger.info(f"Created chat record: {chat.id}")
        return chat

    def get(self, chat_id: int) -> Optional[ChatDO]:
        """
        Get chat by ID, without its history.

        Args:
            chat_id: Chat ID

        Returns:
            ChatDO instance or None
        """
        row = self._execute(
            f"get chat {chat_id}",
            "SELECT id, title, created_at FROM chats WHERE id = ?",
            [chat_id]
        ).fetchone()

        if row:
            return ChatDO(id=row[0], title=row[1], created_at=row[2])
        return None

    def exists(self, chat_id: int) -> bool:
        row = self._execute(
            f"check chat {chat_id}",
            "SELECT 1 FROM chats WHERE id = ? LIMIT 1",
            [chat_id]
        ).fetchone()
        return row is not None

    def list_all(self) -> List[ChatDO]:
        """
        List all chats, newest first.

        Returns:
            List of ChatDO instances
        """
        rows = self._execute(
            "list chats",
            "SELECT id, title, created_at FROM chats ORDER BY created_at DESC, id DESC"
        ).fetchall()

        return [ChatDO(id=row[0], title=row[1], created_at=row[2]) for row in rows]

    def delete(self, chat_id: int) -> bool:
        """
        Delete a chat together with all of its entries.

        Run inside a transaction so no orphaned entries are ever visible.

        Args:
            chat_id: Chat ID

        Returns:
            True if the chat existed, False otherwise
        """
        if not self.exists(chat_id):
            return False

        removed = ChatEntryRepository(self.conn).delete_by_chat(chat_id)
        self._execute(
            f"delete chat {chat_id}",
            "DELETE FROM chats WHERE id = ?",
            [chat_id]
        )
        self.logger.info(f"Deleted chat record: {chat_id} ({removed} entries)")
        return True
